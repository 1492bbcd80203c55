"""Request/response models for stateless card rendering."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .editor import (
    BackgroundSettings,
    ContentStrings,
    ElementId,
    ManualOffsets,
    StyleParameters,
)


class CardRequest(BaseModel):
    """A full card description."""
    style: StyleParameters = Field(default_factory=StyleParameters)
    content: ContentStrings = Field(default_factory=ContentStrings)
    offsets: ManualOffsets = Field(default_factory=ManualOffsets)
    background: BackgroundSettings = Field(default_factory=BackgroundSettings)


class HitTestRequest(CardRequest):
    """A card plus the pointer position in canvas pixels."""
    x: float
    y: float


class HitTestResponse(BaseModel):
    element: ElementId
    over_image: bool = False


class BlockLayout(BaseModel):
    """Public view of one wrapped text element."""
    element: ElementId
    lines: List[str]
    baselines: List[float]
    font_size: int
    height: float


class CardLayoutResponse(BaseModel):
    """Geometry of a laid-out card."""
    width: int
    height: int
    interior: List[float]  # x, y, width, height
    content: List[float]
    quote1: BlockLayout
    quote2: Optional[BlockLayout] = None
    author: Optional[BlockLayout] = None
    divider1_y: Optional[float] = None
    author_divider_y: Optional[float] = None
    quote1_area_height: float
    quote2_area_height: float = 0.0
