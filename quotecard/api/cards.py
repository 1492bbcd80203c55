"""Cards API routes - stateless rendering, layout and hit testing."""

from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from loguru import logger

from quotecard.exceptions import ImageDecodeError
from quotecard.models.card import (
    BlockLayout,
    CardLayoutResponse,
    CardRequest,
    HitTestRequest,
    HitTestResponse,
)
from quotecard.workers.card_renderer import CardRenderer
from quotecard.workers.hit_test import hit_test, hit_test_image
from quotecard.workers.images import load_background
from quotecard.workers.layout import CardLayout, Rect, TextBlock

router = APIRouter(prefix="/cards", tags=["cards"])

# Module-level instance (set at startup)
_renderer: Optional[CardRenderer] = None


def set_card_renderer(renderer: CardRenderer) -> None:
    """Set the card renderer instance."""
    global _renderer
    _renderer = renderer


def _get_renderer() -> CardRenderer:
    if _renderer is None:
        raise HTTPException(status_code=503, detail="Card renderer not initialized")
    return _renderer


def _rect(rect: Rect) -> list:
    return [rect.x, rect.y, rect.width, rect.height]


def _block(block: Optional[TextBlock]) -> Optional[BlockLayout]:
    if block is None:
        return None
    return BlockLayout(
        element=block.element,
        lines=block.lines,
        baselines=block.baselines,
        font_size=block.font_size,
        height=block.height,
    )


def layout_response(layout: CardLayout) -> CardLayoutResponse:
    """Convert a computed layout into its API representation."""
    return CardLayoutResponse(
        width=layout.width,
        height=layout.height,
        interior=_rect(layout.interior),
        content=_rect(layout.content),
        quote1=_block(layout.quote1),
        quote2=_block(layout.quote2),
        author=_block(layout.author),
        divider1_y=layout.divider1_y,
        author_divider_y=layout.author_divider_y,
        quote1_area_height=layout.allocation.quote1_area_height,
        quote2_area_height=layout.allocation.quote2_area_height,
    )


@router.post("/render")
async def render_card(request: CardRequest):
    """Render a card to PNG."""
    renderer = _get_renderer()
    try:
        background = load_background(request.background)
    except ImageDecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    png = renderer.export_png(request.style, request.content, request.offsets, background)
    logger.debug(f"Rendered card PNG ({len(png)} bytes)")
    return Response(content=png, media_type="image/png")


@router.post("/layout", response_model=CardLayoutResponse)
async def card_layout(request: CardRequest):
    """Compute card geometry without painting."""
    layout = _get_renderer().layout(request.style, request.content, request.offsets)
    return layout_response(layout)


@router.post("/hit-test", response_model=HitTestResponse)
async def card_hit_test(request: HitTestRequest):
    """Report which element lies under a point."""
    layout = _get_renderer().layout(request.style, request.content, request.offsets)
    has_image = bool(request.background.data_url)
    return HitTestResponse(
        element=hit_test(layout, request.x, request.y),
        over_image=hit_test_image(layout, has_image, request.x, request.y),
    )
