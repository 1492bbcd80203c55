"""Request/response models for the editor session API."""

from typing import List, Optional

from pydantic import BaseModel

from .card import CardLayoutResponse
from .editor import (
    BackgroundSettings,
    ContentStrings,
    DragMode,
    ElementId,
    ManualOffsets,
    PointerEvent,
    PreviewBackground,
    ResetScope,
    StyleParameters,
)


class ContentUpdate(BaseModel):
    """Partial content change; omitted fields are kept."""
    quote1: Optional[str] = None
    quote2: Optional[str] = None
    author: Optional[str] = None


class PointerRequest(BaseModel):
    event: PointerEvent
    x: float = 0.0
    y: float = 0.0


class PointerResponse(BaseModel):
    changed: bool
    drag_mode: DragMode
    target: ElementId
    cursor: str


class CursorResponse(BaseModel):
    cursor: str


class ResetRequest(BaseModel):
    scope: ResetScope = ResetScope.EVERYTHING


class BackgroundRequest(BaseModel):
    """A background image as a base64 data URL."""
    data_url: str


class BackgroundSettingsUpdate(BaseModel):
    """Partial transform change; omitted fields are kept."""
    pan_x: Optional[float] = None
    pan_y: Optional[float] = None
    zoom: Optional[float] = None
    rotation: Optional[float] = None
    opacity: Optional[float] = None


class BackgroundState(BaseModel):
    """Background transform without the (large) image payload."""
    has_image: bool
    width: Optional[int] = None
    height: Optional[int] = None
    pan_x: float
    pan_y: float
    zoom: float
    rotation: float
    opacity: float


class EditorStateResponse(BaseModel):
    style: StyleParameters
    content: ContentStrings
    offsets: ManualOffsets
    background: BackgroundState
    preview_bg: PreviewBackground
    drag_mode: DragMode
    drag_target: ElementId
    generating: List[str]
    layout: CardLayoutResponse


class GeneratedQuoteResponse(BaseModel):
    quote: str


class BackgroundGenerateRequest(BaseModel):
    """Seed quote for the image prompt; defaults to the current quote 1."""
    seed_quote: Optional[str] = None


class GeneratedBackgroundResponse(BaseModel):
    prompt: str
    background: BackgroundState


def background_state(settings: BackgroundSettings, size: Optional[tuple] = None) -> BackgroundState:
    width, height = size if size else (None, None)
    return BackgroundState(
        has_image=size is not None,
        width=width,
        height=height,
        pan_x=settings.pan_x,
        pan_y=settings.pan_y,
        zoom=settings.zoom,
        rotation=settings.rotation,
        opacity=settings.opacity,
    )
