"""Discovered taxonomy of a target (work-item tracking) system.

These models are what connectors return from discovery. They are
target-neutral: a TFS project, a Jira project, etc. all normalize to the
same shapes so the orchestrator and the mapping UI never see vendor types.

Discovery is recomputed on every call - nothing here is cached.
"""

from typing import List

from pydantic import BaseModel, Field


class State(BaseModel):
    """A workflow state value of a work item (e.g. "Active", "Done")."""
    name: str = Field(..., description="State name as the target system spells it")

    class Config:
        frozen = True


class WorkItemType(BaseModel):
    """A category of trackable item (e.g. "Bug", "Task") and its states.

    States are sorted by name and deduplicated by the connector.
    """
    name: str = Field(..., description="Work item type name")
    states: List[State] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def state_names(self) -> List[str]:
        return [s.name for s in self.states]


class Project(BaseModel):
    """A target-system project with its full vocabulary.

    Attributes:
        id: Target-system identifier (URI or GUID)
        name: Project display name
        work_item_types: Types in the project, each with its own states
        states: Union of all type states, deduplicated and sorted by name
        iteration_paths: Iteration/sprint scope strings usable in a board mapping
    """
    id: str = Field(..., description="Target-system project identifier")
    name: str = Field(..., description="Project name")
    work_item_types: List[WorkItemType] = Field(default_factory=list)
    states: List[State] = Field(default_factory=list)
    iteration_paths: List[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def state_names(self) -> List[str]:
        return [s.name for s in self.states]

    def get_work_item_type(self, name: str):
        """Find a work item type by name (case-insensitive)."""
        for work_item_type in self.work_item_types:
            if work_item_type.name.lower() == name.lower():
                return work_item_type
        return None
