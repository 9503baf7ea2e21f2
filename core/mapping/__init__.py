"""Core mapping - board mapping configuration and resolution.

This module holds the board <-> target project mapping model and the engine
that resolves lanes and target fields from it. It is target-neutral: the
mapping values come from configuration, not from a connector.
"""

from core.mapping.board_mapping import (
    BoardMapping,
    FieldMap,
    TargetFieldMap,
    Identity,
    SyncDirection,
    LeanKitField,
)
from core.mapping.engine import (
    MappingEngine,
    LaneResult,
)

__all__ = [
    "BoardMapping",
    "FieldMap",
    "TargetFieldMap",
    "Identity",
    "SyncDirection",
    "LeanKitField",
    "MappingEngine",
    "LaneResult",
]
