"""TFS / Azure DevOps REST payload models.

These are TFS-specific models that map to the REST API schema.
They are separate from the taxonomy models in /core/models/.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# TFS REST API Models
# =============================================================================

class TfsBaseModel(BaseModel):
    """Base model for TFS API entities."""

    class Config:
        populate_by_name = True


class TfsProjectInfo(TfsBaseModel):
    """Team project reference.

    Maps to: /_apis/projects
    """
    id: str = Field(..., alias="id")
    name: str = Field(..., alias="name")
    url: Optional[str] = Field(None, alias="url")
    state: Optional[str] = Field(None, alias="state")


class TfsTransitionTarget(TfsBaseModel):
    """One outgoing edge of a work item type transition map."""
    to: Optional[str] = Field(None, alias="to")
    actions: Optional[List[str]] = Field(None, alias="actions")


class TfsTransition(TfsBaseModel):
    """A (from, to) edge of a work item type's transition model.

    Either endpoint may be missing or empty; the initial transition of a
    work item type has an empty source.
    """
    from_state: Optional[str] = Field(None, alias="from")
    to_state: Optional[str] = Field(None, alias="to")

    class Config:
        frozen = True
        populate_by_name = True


class TfsWorkItemType(TfsBaseModel):
    """Work item type with its transition model.

    Maps to: /{project}/_apis/wit/workitemtypes

    `transitions` is keyed by source state; the empty key holds the
    initial transition.
    """
    name: str = Field(..., alias="name")
    reference_name: Optional[str] = Field(None, alias="referenceName")
    description: Optional[str] = Field(None, alias="description")
    transitions: Optional[Dict[str, List[TfsTransitionTarget]]] = Field(None, alias="transitions")

    def transition_edges(self) -> List[TfsTransition]:
        """Flatten the transition map into (from, to) edges."""
        edges = []
        for from_state, targets in (self.transitions or {}).items():
            for target in targets or []:
                edges.append(TfsTransition(from_state=from_state, to_state=target.to))
        return edges


class TfsClassificationNode(TfsBaseModel):
    """Node of an area or iteration tree.

    Maps to: /{project}/_apis/wit/classificationnodes
    """
    id: Optional[int] = Field(None, alias="id")
    name: Optional[str] = Field(None, alias="name")
    structure_type: Optional[str] = Field(None, alias="structureType")
    path: Optional[str] = Field(None, alias="path")
    has_children: bool = Field(False, alias="hasChildren")
    children: Optional[List["TfsClassificationNode"]] = Field(None, alias="children")


TfsClassificationNode.model_rebuild()
