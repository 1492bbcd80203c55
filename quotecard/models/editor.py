"""Editor data models: style parameters, content, offsets and image settings."""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


# Card size limits (same bounds as the resize handle)
MIN_CARD_SIZE = 400
MAX_CARD_SIZE = 2000
DEFAULT_CARD_WIDTH = 970
DEFAULT_CARD_HEIGHT = 1074

MIN_FONT_SIZE = 8
MAX_FONT_SIZE = 400
MIN_LINE_HEIGHT = 1.0
MAX_LINE_HEIGHT = 4.0

MIN_ZOOM = 1.0
MAX_ZOOM = 3.0
DEFAULT_OPACITY = 0.3

DEFAULT_FONT_FAMILY = "'American Typewriter', 'Courier Prime', monospace"

FONT_WEIGHTS = {
    "100", "200", "300", "400", "500", "600", "700", "800", "900",
    "normal", "bold",
}

_HEX_COLOR_RE = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def _clamp(value, low, high):
    return max(low, min(high, value))


def _to_float(value) -> float:
    """Parse a number the way form inputs hand them over (numbers or strings)."""
    if isinstance(value, bool):
        raise ValueError("expected a number")
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"not a number: {value!r}")
    if result != result or result in (float("inf"), float("-inf")):
        raise ValueError(f"not a finite number: {value!r}")
    return result


def _to_int(value) -> int:
    return int(_to_float(value))


class ElementId(str, Enum):
    """Draggable card elements reported by the hit test."""
    QUOTE1 = "quote1"
    QUOTE2 = "quote2"
    DIVIDER1 = "divider1"
    AUTHOR = "author"
    NONE = "none"


class PreviewBackground(str, Enum):
    """Preview backdrop behind the card (editor chrome only)."""
    LIGHT = "light"
    DARK = "dark"


class DragMode(str, Enum):
    """What the current pointer gesture is moving."""
    NONE = "none"
    TEXT = "text"
    IMAGE = "image"


class PointerEvent(str, Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"
    CANCEL = "cancel"


class ResetScope(str, Enum):
    STYLES = "styles"
    SIZE = "size"
    EVERYTHING = "everything"


class StyleParameters(BaseModel):
    """Every independently settable style field of a card.

    Numeric fields accept numeric strings and are clamped to their range,
    so degenerate geometry never reaches the layout code.
    """
    card_width: int = DEFAULT_CARD_WIDTH
    card_height: int = DEFAULT_CARD_HEIGHT

    quote1_size: int = 70
    quote2_size: int = 60
    author_size: int = 36
    quote1_line_height: float = 1.4
    quote2_line_height: float = 1.4
    quote1_weight: str = "600"
    quote2_weight: str = "400"
    author_weight: str = "400"

    quote1_color: str = "#000000"
    quote2_color: str = "#000000"
    author_color: str = "#8B7355"
    bg_color: str = "#E9E5CD"
    card_color: str = "#F6F4E8"
    divider_color: str = "#AFA86A"

    enable_quote2: bool = False
    show_dividers: bool = True
    enable_colored_borders: bool = True
    font_family: str = DEFAULT_FONT_FAMILY

    @field_validator("card_width", "card_height", mode="before")
    @classmethod
    def clamp_card_size(cls, v) -> int:
        return _clamp(_to_int(v), MIN_CARD_SIZE, MAX_CARD_SIZE)

    @field_validator("quote1_size", "quote2_size", "author_size", mode="before")
    @classmethod
    def clamp_font_size(cls, v) -> int:
        return _clamp(_to_int(v), MIN_FONT_SIZE, MAX_FONT_SIZE)

    @field_validator("quote1_line_height", "quote2_line_height", mode="before")
    @classmethod
    def clamp_line_height(cls, v) -> float:
        return _clamp(_to_float(v), MIN_LINE_HEIGHT, MAX_LINE_HEIGHT)

    @field_validator("quote1_weight", "quote2_weight", "author_weight", mode="before")
    @classmethod
    def check_weight(cls, v) -> str:
        weight = str(v).strip().lower()
        if weight not in FONT_WEIGHTS:
            raise ValueError(f"unsupported font weight: {v!r}")
        return weight

    @field_validator(
        "quote1_color", "quote2_color", "author_color",
        "bg_color", "card_color", "divider_color",
        mode="before",
    )
    @classmethod
    def check_color(cls, v) -> str:
        """Accept #RGB or #RRGGBB, normalized to upper-case #RRGGBB."""
        color = str(v).strip()
        if not _HEX_COLOR_RE.match(color):
            raise ValueError(f"expected a hex color like #AABBCC, got {v!r}")
        digits = color[1:]
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return f"#{digits.upper()}"

    @field_validator("font_family", mode="before")
    @classmethod
    def default_font_family(cls, v) -> str:
        family = str(v or "").strip()
        return family or DEFAULT_FONT_FAMILY


class ContentStrings(BaseModel):
    """Text content of the card. Quotes may contain hard line breaks."""
    quote1: str = ""
    quote2: str = ""
    author: str = ""


class ManualOffsets(BaseModel):
    """Vertical drag deltas in pixels, added on top of computed centering.

    Offsets are not clamped; an element can be dragged off the card and is
    only recovered by a reset.
    """
    quote1: float = 0.0
    quote2: float = 0.0
    author: float = 0.0
    divider1: float = 0.0

    @field_validator("quote1", "quote2", "author", "divider1", mode="before")
    @classmethod
    def parse_offset(cls, v) -> float:
        if v is None:
            return 0.0
        return _to_float(v)

    def add(self, element: ElementId, delta: float) -> None:
        """Accumulate a drag delta on one element."""
        if element == ElementId.QUOTE1:
            self.quote1 += delta
        elif element == ElementId.QUOTE2:
            self.quote2 += delta
        elif element == ElementId.AUTHOR:
            self.author += delta
        elif element == ElementId.DIVIDER1:
            self.divider1 += delta


class BackgroundSettings(BaseModel):
    """Transform and opacity of the background image.

    ``data_url`` is the persisted encoding of the image; the decoded bitmap
    only lives in the editor session.
    """
    data_url: Optional[str] = None
    pan_x: float = 0.0
    pan_y: float = 0.0
    zoom: float = MIN_ZOOM
    rotation: float = 0.0
    opacity: float = DEFAULT_OPACITY

    @field_validator("pan_x", "pan_y", mode="before")
    @classmethod
    def parse_pan(cls, v) -> float:
        if v is None:
            return 0.0
        return _to_float(v)

    @field_validator("zoom", mode="before")
    @classmethod
    def clamp_zoom(cls, v) -> float:
        if v is None:
            return MIN_ZOOM
        return _clamp(_to_float(v), MIN_ZOOM, MAX_ZOOM)

    @field_validator("rotation", mode="before")
    @classmethod
    def clamp_rotation(cls, v) -> float:
        if v is None:
            return 0.0
        return _clamp(_to_float(v), 0.0, 360.0)

    @field_validator("opacity", mode="before")
    @classmethod
    def clamp_opacity(cls, v) -> float:
        if v is None:
            return DEFAULT_OPACITY
        return _clamp(_to_float(v), 0.0, 1.0)

    @field_validator("data_url", mode="before")
    @classmethod
    def empty_data_url(cls, v) -> Optional[str]:
        return v or None

    def reset_transform(self) -> None:
        """Back to the defaults applied whenever a new image is loaded."""
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.zoom = MIN_ZOOM
        self.rotation = 0.0
        self.opacity = DEFAULT_OPACITY
