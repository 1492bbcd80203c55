"""Card geometry shared by the compositor and the hit test.

Layout of a card, top to bottom:
┌───────────────────────────────┐
│  margin + optional borders    │
│  ┌─────────────────────────┐  │
│  │ inner padding           │  │
│  │   quote 1 area          │  │  ← proportional split of the quote area
│  │   ───── divider 1 ───── │  │
│  │   quote 2 area          │  │
│  │   ─── author divider ── │  │
│  │        author           │  │
│  └─────────────────────────┘  │
└───────────────────────────────┘

All y coordinates of text are baselines (canvas "alphabetic" convention).
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from quotecard.models.editor import ContentStrings, ElementId, ManualOffsets, StyleParameters
from quotecard.workers.text_layout import MeasureFn, block_height, wrap_text

# (left, top, right, bottom) of a line's painted pixels, relative to its
# horizontal center and baseline
InkBox = Tuple[float, float, float, float]
InkBoxFn = Callable[[str], InkBox]

# (weight, size, family) -> width function for that font
MeasureFactory = Callable[[str, int, str], MeasureFn]
# (weight, size, family) -> ink box function for that font
InkBoxFactory = Callable[[str, int, str], InkBoxFn]

# Frame geometry
BORDER_WIDTH = 5
MARGIN_FROM_EDGE = 38
BORDER_COLORS = ("#FF0000", "#FFE500", "#0287FF")  # outermost first
INNER_PADDING = 40

# Quote area geometry
QUOTE_TOP_PADDING = 60
QUOTE_BOTTOM_PADDING = 60
DIVIDER_GAP_BEFORE = 30
DIVIDER_GAP_AFTER = 60

# Dividers
DIVIDER_WIDTH = 350
DIVIDER_LINE_WIDTH = 3
AUTHOR_DIVIDER_GAP = 10  # between author divider and the author font box
AUTHOR_BASELINE_DROP = 8  # author baseline sits below the content bottom
NO_AUTHOR_BOTTOM_GAP = 40


@dataclass
class Rect:
    """Axis-aligned rectangle in canvas pixels."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        """Inclusive point test."""
        return self.x <= px <= self.right and self.y <= py <= self.bottom


@dataclass
class TextBlock:
    """A wrapped text element positioned on the card."""
    element: ElementId
    lines: List[str]
    line_widths: List[float]
    font_size: int
    line_advance: float
    start_y: float
    height: float
    ink_boxes: List[InkBox] = field(default_factory=list)

    @property
    def baselines(self) -> List[float]:
        """Baseline y of every line."""
        return [self.start_y + i * self.line_advance for i in range(len(self.lines))]

    @property
    def max_line_width(self) -> float:
        return max(self.line_widths, default=0.0)

    def ink_rect(self, center_x: float) -> Optional[Rect]:
        """Bounds of the painted glyphs, or None when no ink boxes are known."""
        if not self.ink_boxes:
            return None
        placed = [
            (center_x + left, baseline + top, center_x + right, baseline + bottom)
            for baseline, (left, top, right, bottom) in zip(self.baselines, self.ink_boxes)
        ]
        left = min(box[0] for box in placed)
        top = min(box[1] for box in placed)
        right = max(box[2] for box in placed)
        bottom = max(box[3] for box in placed)
        return Rect(left, top, right - left, bottom - top)


@dataclass
class VerticalAllocation:
    """Result of splitting the quote area between the two quote blocks."""
    quote1_start_y: float
    quote1_area_height: float
    quote2_start_y: Optional[float] = None
    quote2_area_height: float = 0.0
    divider1_y: Optional[float] = None
    adjustable_height: float = 0.0


@dataclass
class CardLayout:
    """Everything needed to paint or hit-test a card."""
    width: int
    height: int
    interior: Rect
    content: Rect
    quote1: TextBlock
    quote2: Optional[TextBlock]
    author: Optional[TextBlock]
    allocation: VerticalAllocation
    divider1_y: Optional[float]
    author_divider_y: Optional[float]
    divider_left: float = field(init=False)
    divider_right: float = field(init=False)

    def __post_init__(self):
        self.divider_left = self.width / 2 - DIVIDER_WIDTH / 2
        self.divider_right = self.width / 2 + DIVIDER_WIDTH / 2

    @property
    def center_x(self) -> float:
        return self.width / 2

    @property
    def has_quote2(self) -> bool:
        return self.quote2 is not None


def frame_inset(style: StyleParameters) -> int:
    """Distance from the canvas edge to the card interior."""
    if style.enable_colored_borders:
        return MARGIN_FROM_EDGE + BORDER_WIDTH * len(BORDER_COLORS)
    return MARGIN_FROM_EDGE


def allocate_vertical(
    area_top: float,
    area_bottom: float,
    quote1_block: float,
    quote2_block: float,
    offsets: ManualOffsets,
    has_quote2: bool,
) -> VerticalAllocation:
    """Split the quote area between quote 1 and quote 2.

    Without quote 2, quote 1 is centered in the whole area. With quote 2,
    the area minus the divider gaps is shared in proportion to each block's
    own height, so the block with more lines gets more room. Each block is
    centered in its share and then moved by its manual offset.

    Args:
        area_top: Top of the quote area
        area_bottom: Bottom of the quote area
        quote1_block: Rendered height of quote 1
        quote2_block: Rendered height of quote 2 (0 when absent)
        offsets: Manual drag offsets
        has_quote2: Whether quote 2 is shown

    Returns:
        Start baselines, area heights and divider position
    """
    if not has_quote2:
        area_height = max(area_bottom - area_top, 0)
        return VerticalAllocation(
            quote1_start_y=area_top + (area_height - quote1_block) / 2 + offsets.quote1,
            quote1_area_height=area_height,
            adjustable_height=area_height,
        )

    adjustable = max(area_bottom - area_top - DIVIDER_GAP_BEFORE - DIVIDER_GAP_AFTER, 0)
    total_block = max(quote1_block + quote2_block, 1)
    quote1_area = adjustable * (quote1_block / total_block)
    quote2_area = adjustable - quote1_area

    base_divider_y = area_top + quote1_area + DIVIDER_GAP_BEFORE
    quote2_area_top = base_divider_y + DIVIDER_GAP_AFTER

    return VerticalAllocation(
        quote1_start_y=area_top + (quote1_area - quote1_block) / 2 + offsets.quote1,
        quote1_area_height=quote1_area,
        quote2_start_y=quote2_area_top + (quote2_area - quote2_block) / 2 + offsets.quote2,
        quote2_area_height=quote2_area,
        divider1_y=base_divider_y + offsets.divider1,
        adjustable_height=adjustable,
    )


def _wrap_block(
    element: ElementId,
    text: str,
    measure: MeasureFn,
    max_width: float,
    font_size: int,
    line_height: float,
    ink_box: Optional[InkBoxFn] = None,
) -> TextBlock:
    lines = wrap_text(text, measure, max_width)
    return TextBlock(
        element=element,
        lines=lines,
        line_widths=[measure(line) for line in lines],
        font_size=font_size,
        line_advance=font_size * line_height,
        start_y=0.0,
        height=block_height(len(lines), font_size, line_height),
        ink_boxes=[ink_box(line) for line in lines] if ink_box else [],
    )


def compute_card_layout(
    style: StyleParameters,
    content: ContentStrings,
    offsets: ManualOffsets,
    measure_for: MeasureFactory,
    ink_box_for: Optional[InkBoxFactory] = None,
) -> CardLayout:
    """Compute the full card geometry without painting anything.

    Args:
        style: Style parameters
        content: Quote and author text
        offsets: Manual drag offsets
        measure_for: Builds a width function for (weight, size, family)
        ink_box_for: Builds an ink box function for (weight, size, family);
            without it text blocks carry no painted bounds

    Returns:
        CardLayout with wrapped lines and positions
    """

    def ink_for(weight: str, size: int) -> Optional[InkBoxFn]:
        return ink_box_for(weight, size, style.font_family) if ink_box_for else None

    width, height = style.card_width, style.card_height
    inset = frame_inset(style)
    padding = inset + INNER_PADDING

    interior = Rect(inset, inset, width - 2 * inset, height - 2 * inset)
    content_rect = Rect(padding, padding, width - 2 * padding, height - 2 * padding)

    quote1 = _wrap_block(
        ElementId.QUOTE1,
        content.quote1,
        measure_for(style.quote1_weight, style.quote1_size, style.font_family),
        content_rect.width,
        style.quote1_size,
        style.quote1_line_height,
        ink_for(style.quote1_weight, style.quote1_size),
    )

    quote2: Optional[TextBlock] = None
    if style.enable_quote2 and content.quote2.strip():
        quote2 = _wrap_block(
            ElementId.QUOTE2,
            content.quote2,
            measure_for(style.quote2_weight, style.quote2_size, style.font_family),
            content_rect.width,
            style.quote2_size,
            style.quote2_line_height,
            ink_for(style.quote2_weight, style.quote2_size),
        )
        if not quote2.lines:
            quote2 = None

    has_author = bool(content.author.strip())
    if has_author:
        author_divider_base = height - padding - style.author_size - AUTHOR_DIVIDER_GAP
    else:
        author_divider_base = height - padding - NO_AUTHOR_BOTTOM_GAP

    area_top = padding + QUOTE_TOP_PADDING
    area_bottom = max(area_top, author_divider_base - QUOTE_BOTTOM_PADDING)

    allocation = allocate_vertical(
        area_top,
        area_bottom,
        quote1.height,
        quote2.height if quote2 else 0.0,
        offsets,
        has_quote2=quote2 is not None,
    )
    quote1.start_y = allocation.quote1_start_y
    if quote2 is not None:
        quote2.start_y = allocation.quote2_start_y

    author: Optional[TextBlock] = None
    if has_author:
        author_measure = measure_for(style.author_weight, style.author_size, style.font_family)
        author_ink = ink_for(style.author_weight, style.author_size)
        author = TextBlock(
            element=ElementId.AUTHOR,
            lines=[content.author],
            line_widths=[author_measure(content.author)],
            font_size=style.author_size,
            line_advance=float(style.author_size),
            start_y=height - padding + AUTHOR_BASELINE_DROP + offsets.author,
            height=float(style.author_size),
            ink_boxes=[author_ink(content.author)] if author_ink else [],
        )

    return CardLayout(
        width=width,
        height=height,
        interior=interior,
        content=content_rect,
        quote1=quote1,
        quote2=quote2,
        author=author,
        allocation=allocation,
        divider1_y=allocation.divider1_y,
        author_divider_y=author_divider_base if has_author else None,
    )
