"""Board mapping configuration.

One BoardMapping binds one LeanKit board to one project (or area) in the
target system. It is built once at startup from the persisted configuration
and then enriched in place by the orchestrator (valid lanes, valid card
types, archive lane) after the board connection succeeds. After that it is
read-only.

Keys are accepted both in the PascalCase used by the persisted
configuration file ("LaneToStatesMap") and in snake_case.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from core.models.board import CardType, Lane


class SyncDirection(str, Enum):
    """Known sync directions.

    Field mappings store the direction as free text so connectors can add
    their own; always compare case-insensitively.
    """
    TO_LEANKIT = "ToLeanKit"    # target -> board
    TO_TARGET = "ToTarget"      # board -> target
    BOTH = "Both"
    NONE = "None"


class LeanKitField(str, Enum):
    """Canonical board fields a field mapping can bind."""
    ID = "Id"
    EXTERNAL_ID = "ExternalId"
    TITLE = "Title"
    DESCRIPTION = "Description"
    PRIORITY = "Priority"
    SIZE = "Size"
    IS_BLOCKED = "IsBlocked"
    BLOCKED_REASON = "BlockedReason"
    DUE_DATE = "DueDate"
    START_DATE = "StartDate"
    CARD_TYPE = "CardType"
    ASSIGNED_USERS = "AssignedUsers"
    TAGS = "Tags"
    CLASS_OF_SERVICE = "ClassOfService"


class MappingBaseModel(BaseModel):
    """Base model for persisted mapping configuration."""

    class Config:
        populate_by_name = True


class Identity(MappingBaseModel):
    """Which board and which target project a mapping binds."""
    leankit: int = Field(..., alias="LeanKit", description="LeanKit board id")
    leankit_title: Optional[str] = Field(None, alias="LeanKitTitle")
    target: str = Field(..., alias="Target", description="Target project name")
    target_title: Optional[str] = Field(None, alias="TargetTitle")

    class Config:
        frozen = True
        populate_by_name = True

    def __str__(self) -> str:
        return (
            f"          LeanKit : {self.leankit} ({self.leankit_title or '-'})\n"
            f"          Target  : {self.target} ({self.target_title or '-'})"
        )


class TargetFieldMap(MappingBaseModel):
    """One candidate target field for a board field."""
    name: str = Field(..., alias="Name")
    is_default: bool = Field(False, alias="IsDefault")
    is_selected: bool = Field(False, alias="IsSelected")


class FieldMap(MappingBaseModel):
    """Binds one canonical board field to target fields, qualified by direction."""
    leankit_field: str = Field(..., alias="LeanKitField")
    sync_direction: str = Field(SyncDirection.BOTH.value, alias="SyncDirection")
    target_fields: List[TargetFieldMap] = Field(default_factory=list, alias="TargetFields")

    def summary(self) -> str:
        lines = [
            f"     LeanKitField :       {self.leankit_field}",
            f"     SyncDirection:       {self.sync_direction}",
        ]
        if self.target_fields:
            lines.append("      TargetFields:   ")
            for item in self.target_fields:
                lines.append(
                    f"        {item.name}, IsDefault: {item.is_default}, IsSelected: {item.is_selected}"
                )
        return "\n".join(lines)


class BoardMapping(MappingBaseModel):
    """Mapping between one LeanKit board and one target project.

    The lane map may claim the same state from several lanes; that is not
    rejected here. The engine reports every match and the orchestrator
    decides what to do with more than one.
    """
    # populated by user, via config file
    identity: Identity = Field(..., alias="Identity")
    query_states: List[str] = Field(default_factory=list, alias="QueryStates")
    lane_to_states_map: Dict[int, List[str]] = Field(default_factory=dict, alias="LaneToStatesMap")
    field_mappings: List[FieldMap] = Field(default_factory=list, alias="FieldMappings")
    types: List[str] = Field(default_factory=list, alias="Types")
    excludes: Optional[str] = Field(None, alias="Excludes")
    query: Optional[str] = Field(None, alias="Query")
    iteration_path: Optional[str] = Field(None, alias="IterationPath")
    create_cards: bool = Field(False, alias="CreateCards")
    update_cards: bool = Field(False, alias="UpdateCards")
    update_card_lanes: bool = Field(False, alias="UpdateCardLanes")
    update_target_items: bool = Field(False, alias="UpdateTargetItems")
    create_target_items: bool = Field(False, alias="CreateTargetItems")
    tag_cards_with_target_system_name: bool = Field(False, alias="TagCardsWithTargetSystemName")

    # populated by app
    excluded_type_query: Optional[str] = Field(None, alias="ExcludedTypeQuery")
    valid_lanes: Optional[List[Lane]] = Field(None, alias="ValidLanes")
    valid_card_types: Optional[List[CardType]] = Field(None, alias="ValidCardTypes")
    archive_lane_id: Optional[int] = Field(None, alias="ArchiveLaneId")

    @property
    def board_id(self) -> int:
        return self.identity.leankit

    def summary(self) -> str:
        """Readable dump of the mapping for startup logs."""
        lines = ["     Identity :       ", str(self.identity)]

        if self.lane_to_states_map:
            lines.append("      Lane to States:   ")
            for lane_id, states in self.lane_to_states_map.items():
                lines.append(f"        {lane_id}: {', '.join(states)}")

        lines.append("     Field Mappings   :        ")
        for field_map in self.field_mappings:
            lines.append(field_map.summary())

        lines.append("     Types :          ")
        for work_item_type in self.types:
            lines.append(f"          WorkItemType : {work_item_type}")
        lines.append(f"     Excludes:        {self.excludes or ''}")

        if self.valid_lanes is not None:
            lines.append("     ValidLanes :     " + ", ".join(str(lane.id) for lane in self.valid_lanes))

        if self.valid_card_types is not None:
            lines.append(
                "     ValidCardTypes : " + ", ".join(card_type.name for card_type in self.valid_card_types)
            )

        lines.extend([
            f"     Query :                         {self.query or ''}",
            f"     IterationPath :                 {self.iteration_path or ''}",
            f"     ArchiveLaneId :                 {self.archive_lane_id}",
            f"     TagCardsWithTargetSystemName :  {self.tag_cards_with_target_system_name}",
            f"     CreateCards :                   {self.create_cards}",
            f"     CreateTargetItems :             {self.create_target_items}",
            f"     UpdateCards :                   {self.update_cards}",
            f"     UpdateCardLanes :               {self.update_card_lanes}",
            f"     UpdateTargetItems :             {self.update_target_items}",
        ])
        return "\n".join(lines)
