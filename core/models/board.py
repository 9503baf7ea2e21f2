"""Board-side catalog types.

The orchestrator fills these in after it authenticates against the LeanKit
board. The mapping engine only reads them.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Lane(BaseModel):
    """A board lane (column or swimlane)."""
    id: int = Field(..., description="Stable numeric lane id")
    title: Optional[str] = None
    parent_lane_id: Optional[int] = None
    is_archive: bool = False

    class Config:
        frozen = True
        populate_by_name = True


class CardType(BaseModel):
    """A card type configured on the board."""
    id: int
    name: str
    is_default: bool = False

    class Config:
        frozen = True
