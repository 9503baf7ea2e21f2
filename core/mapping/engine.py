"""Lane and field mapping resolution.

Answers two questions for the sync orchestrator, per sync event:

1. Which board lane(s) does a target state belong to?
2. Which target field(s) should a board field be written to (or read from)
   for a given sync direction?

The engine is stateless over a BoardMapping and never raises for a missing
match: an empty (or not-found) result is handed back and the orchestrator
applies its own policy (skip, default lane, fan-out).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from core.mapping.board_mapping import BoardMapping, FieldMap, LeanKitField, SyncDirection
from core.observability.logging import get_logger, with_correlation

logger = get_logger(__name__)

_BOTH = SyncDirection.BOTH.value.lower()
_PAIRED_DIRECTIONS = (
    SyncDirection.TO_LEANKIT.value.lower(),
    SyncDirection.TO_TARGET.value.lower(),
)


def _normalize(value: Union[str, Enum]) -> str:
    if isinstance(value, Enum):
        value = value.value
    return str(value).lower()


@dataclass
class LaneResult:
    """Result of single-valued lane resolution.

    `success` is the found flag. `lane_id` is only meaningful when
    `success` is True; 0 is a valid lane id.
    """
    success: bool
    state: str
    lane_id: Optional[int] = None
    is_fallback: bool = False   # True when no lane claimed the state
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def not_found(cls, state: str) -> "LaneResult":
        """Create a failed lane result."""
        return cls(
            success=False,
            state=state,
            warnings=[f"No lane found for state: {state}"],
        )


class MappingEngine:
    """Resolves lanes and target fields for one board mapping.

    The mapping must not be mutated while resolution calls are running;
    the orchestrator enriches it once at startup and then only reads it.
    """

    def __init__(self, board_mapping: BoardMapping):
        self.mapping = board_mapping

    # =========================================================================
    # Lane resolution
    # =========================================================================

    def lanes_from_state(self, state: str) -> List[int]:
        """Every lane whose configured states contain `state`.

        Matching is case-insensitive. Lanes come back in configuration order,
        each at most once. An empty list means no lane claims the state.
        """
        wanted = state.lower()
        lanes = [
            lane_id
            for lane_id, states in self.mapping.lane_to_states_map.items()
            if any(s.lower() == wanted for s in states)
        ]

        with with_correlation(board_id=self.mapping.board_id):
            if not lanes:
                logger.debug(f"No lane configured for state '{state}'")
            elif len(lanes) > 1:
                logger.debug(f"State '{state}' is claimed by {len(lanes)} lanes: {lanes}")

        return lanes

    def lane_from_state(self, state: str) -> LaneResult:
        """First lane whose configured states contain `state` exactly.

        Used by targets that assume at most one lane per state. Matching is
        case-sensitive, unlike lanes_from_state. When no lane claims the
        state the first valid lane of the board is used as a fallback.
        """
        for lane_id, states in self.mapping.lane_to_states_map.items():
            if state in states:
                return LaneResult(success=True, state=state, lane_id=lane_id)

        valid_lanes = self.mapping.valid_lanes or []
        if valid_lanes:
            fallback = valid_lanes[0].id
            with with_correlation(board_id=self.mapping.board_id):
                logger.debug(f"No lane configured for state '{state}', using first valid lane {fallback}")
            return LaneResult(
                success=True,
                state=state,
                lane_id=fallback,
                is_fallback=True,
                warnings=[f"Using default lane for state: {state}"],
            )

        return LaneResult.not_found(state)

    # =========================================================================
    # Field resolution
    # =========================================================================

    def find_field_map(
        self,
        leankit_field: Union[str, LeanKitField],
        sync_direction: Union[str, SyncDirection],
    ) -> Optional[FieldMap]:
        """First field mapping rule for the field and direction.

        A rule tagged "Both" answers ToLeanKit and ToTarget requests. Any
        other direction only matches a rule with the same direction.
        """
        field_name = _normalize(leankit_field)
        direction = _normalize(sync_direction)

        if direction in _PAIRED_DIRECTIONS:
            accepted = (direction, _BOTH)
        else:
            accepted = (direction,)

        for field_map in self.mapping.field_mappings:
            if (field_map.leankit_field.lower() == field_name
                    and field_map.sync_direction.lower() in accepted):
                return field_map
        return None

    def target_fields_for(
        self,
        leankit_field: Union[str, LeanKitField],
        sync_direction: Union[str, SyncDirection],
    ) -> List[str]:
        """Target field names for a board field in a direction.

        Selected fields win over default fields; the two are never merged.
        Returns an empty list when there are no field mappings, no rule
        matches, or the matched rule has nothing selected or default.
        """
        if not self.mapping.field_mappings:
            return []

        field_map = self.find_field_map(leankit_field, sync_direction)
        if field_map is None:
            with with_correlation(board_id=self.mapping.board_id, sync_direction=_normalize(sync_direction)):
                logger.debug(f"No field mapping for {_normalize(leankit_field)}")
            return []

        selected = [f.name for f in field_map.target_fields if f.is_selected]
        if selected:
            return selected

        defaults = [f.name for f in field_map.target_fields if f.is_default]
        if defaults:
            return defaults

        return []
