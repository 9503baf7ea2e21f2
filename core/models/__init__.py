"""Core data models - target-neutral types.

This package contains the discovered taxonomy of a target system and the
board-side catalog types. Nothing here depends on a specific target system.
"""

from core.models.taxonomy import (
    State,
    WorkItemType,
    Project,
)
from core.models.board import (
    Lane,
    CardType,
)

__all__ = [
    # Taxonomy
    "State",
    "WorkItemType",
    "Project",
    # Board catalog
    "Lane",
    "CardType",
]
