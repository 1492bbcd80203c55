"""Card renderer - paints quote cards as PNG images.

Paint order:
1. Outside background
2. Optional red/yellow/blue border stack
3. Card surface
4. Optional background image (cover fit, zoom, pan, rotation, opacity)
5. Dividers
6. Quote 1, quote 2 and author text
"""

import io
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger
from PIL import Image, ImageChops, ImageDraw

from quotecard.models.editor import ContentStrings, ManualOffsets, StyleParameters
from quotecard.workers.fonts import FontResolver
from quotecard.workers.images import BackgroundImage
from quotecard.workers.layout import (
    BORDER_COLORS,
    BORDER_WIDTH,
    DIVIDER_LINE_WIDTH,
    MARGIN_FROM_EDGE,
    CardLayout,
    Rect,
    TextBlock,
    compute_card_layout,
)

DEFAULT_EXPORT_NAME = "quote-card"
EXPORT_WORD_COUNT = 4

# Everything except ASCII letters/digits and Latin Extended-A/B is dropped
_FILENAME_STRIP_RE = re.compile(r"[^a-zA-Z0-9\u0100-\u017F\u0180-\u024F]")


def export_filename(quote1: str) -> str:
    """Derive an export file stem from the first words of quote 1.

    Returns:
        Lower-case words joined by hyphens, or "quote-card"
    """
    words = quote1.strip().split()[:EXPORT_WORD_COUNT]
    clean = [_FILENAME_STRIP_RE.sub("", word).lower() for word in words]
    clean = [word for word in clean if word]
    return "-".join(clean) if clean else DEFAULT_EXPORT_NAME


@dataclass
class ImagePlacement:
    """Where the scaled background image is drawn before rotation."""
    x: float
    y: float
    width: float
    height: float


def compute_image_placement(
    interior: Rect,
    image_width: int,
    image_height: int,
    zoom: float,
    pan_x: float,
    pan_y: float,
) -> ImagePlacement:
    """Cover-fit the image to the interior, zoom it and apply a clamped pan.

    The pan is clamped so the scaled image always covers the interior:
    x stays within [interior.right - width, interior.x], same for y.
    """
    image_aspect = image_width / image_height
    area_aspect = interior.width / interior.height

    if image_aspect > area_aspect:
        # Image is wider - fit to height
        base_height = interior.height
        base_width = base_height * image_aspect
    else:
        # Image is taller - fit to width
        base_width = interior.width
        base_height = base_width / image_aspect

    width = base_width * zoom
    height = base_height * zoom

    x = interior.x + (interior.width - width) / 2 + pan_x
    y = interior.y + (interior.height - height) / 2 + pan_y

    x = max(interior.right - width, min(interior.x, x))
    y = max(interior.bottom - height, min(interior.y, y))

    return ImagePlacement(x=x, y=y, width=width, height=height)


class CardRenderer:
    """Renderer for quote card images."""

    def __init__(self, fonts_dir: Optional[Path] = None, font_resolver: Optional[FontResolver] = None):
        """Initialize card renderer.

        Args:
            fonts_dir: Directory containing font files
            font_resolver: Shared resolver (takes precedence over fonts_dir)
        """
        self.fonts = font_resolver or FontResolver(fonts_dir)

    def layout(
        self,
        style: StyleParameters,
        content: ContentStrings,
        offsets: ManualOffsets,
    ) -> CardLayout:
        """Compute card geometry with this renderer's fonts."""
        return compute_card_layout(style, content, offsets, self.fonts.measurer, self.fonts.ink_box)

    def _draw_borders(self, draw: ImageDraw.ImageDraw, width: int, height: int) -> None:
        """Stroke the nested border stack, each inset by the previous thickness."""
        for i, color in enumerate(BORDER_COLORS):
            inset = MARGIN_FROM_EDGE + i * BORDER_WIDTH
            draw.rectangle(
                (inset, inset, width - inset - 1, height - inset - 1),
                outline=color,
                width=BORDER_WIDTH,
            )

    def _paint_background_image(
        self,
        canvas: Image.Image,
        background: BackgroundImage,
        interior: Rect,
    ) -> None:
        """Paint the transformed background image clipped to the interior."""
        settings = background.settings
        bitmap = background.bitmap
        placement = compute_image_placement(
            interior,
            bitmap.width,
            bitmap.height,
            settings.zoom,
            settings.pan_x,
            settings.pan_y,
        )

        size = (max(1, round(placement.width)), max(1, round(placement.height)))
        layer = bitmap.convert("RGBA").resize(size, Image.Resampling.LANCZOS)

        # Canvas rotation is clockwise; PIL rotates counter-clockwise
        if settings.rotation % 360:
            layer = layer.rotate(
                -settings.rotation,
                resample=Image.Resampling.BICUBIC,
                expand=True,
            )

        if settings.opacity < 1:
            alpha = layer.getchannel("A").point(lambda a: round(a * settings.opacity))
            layer.putalpha(alpha)

        center_x = placement.x + placement.width / 2
        center_y = placement.y + placement.height / 2
        overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        overlay.paste(layer, (round(center_x - layer.width / 2), round(center_y - layer.height / 2)))

        clip = Image.new("L", canvas.size, 0)
        ImageDraw.Draw(clip).rectangle(
            (interior.x, interior.y, interior.right - 1, interior.bottom - 1),
            fill=255,
        )
        overlay.putalpha(ImageChops.multiply(overlay.getchannel("A"), clip))
        canvas.alpha_composite(overlay)

    def _draw_divider(self, draw: ImageDraw.ImageDraw, layout: CardLayout, y: float, color: str) -> None:
        draw.line(
            [(layout.divider_left, y), (layout.divider_right, y)],
            fill=color,
            width=DIVIDER_LINE_WIDTH,
        )

    def _draw_block(
        self,
        draw: ImageDraw.ImageDraw,
        layout: CardLayout,
        block: TextBlock,
        css_family: str,
        weight: str,
        color: str,
    ) -> None:
        """Draw each line centered horizontally on its baseline."""
        font = self.fonts.get_font(css_family, weight, block.font_size)
        for line, baseline in zip(block.lines, block.baselines):
            draw.text((layout.center_x, baseline), line, font=font, fill=color, anchor="ms")

    def render(
        self,
        style: StyleParameters,
        content: ContentStrings,
        offsets: Optional[ManualOffsets] = None,
        background: Optional[BackgroundImage] = None,
    ) -> Image.Image:
        """Render a card.

        Args:
            style: Style parameters
            content: Quote and author text
            offsets: Manual drag offsets
            background: Decoded background image with its settings

        Returns:
            RGBA image of style.card_width x style.card_height
        """
        offsets = offsets or ManualOffsets()
        width, height = style.card_width, style.card_height

        canvas = Image.new("RGBA", (width, height), style.bg_color)
        draw = ImageDraw.Draw(canvas)

        if style.enable_colored_borders:
            self._draw_borders(draw, width, height)

        layout = self.layout(style, content, offsets)
        interior = layout.interior
        draw.rectangle(
            (interior.x, interior.y, interior.right - 1, interior.bottom - 1),
            fill=style.card_color,
        )

        if background is not None:
            self._paint_background_image(canvas, background, interior)
            draw = ImageDraw.Draw(canvas)

        if style.show_dividers:
            if layout.has_quote2 and layout.divider1_y is not None:
                self._draw_divider(draw, layout, layout.divider1_y, style.divider_color)
            if layout.author_divider_y is not None:
                self._draw_divider(draw, layout, layout.author_divider_y, style.divider_color)

        self._draw_block(draw, layout, layout.quote1, style.font_family, style.quote1_weight, style.quote1_color)
        if layout.quote2 is not None:
            self._draw_block(draw, layout, layout.quote2, style.font_family, style.quote2_weight, style.quote2_color)
        if layout.author is not None:
            self._draw_block(draw, layout, layout.author, style.font_family, style.author_weight, style.author_color)

        logger.debug(
            f"Rendered card {width}x{height}: {len(layout.quote1.lines)} + "
            f"{len(layout.quote2.lines) if layout.quote2 else 0} lines"
        )
        return canvas

    def export_png(
        self,
        style: StyleParameters,
        content: ContentStrings,
        offsets: Optional[ManualOffsets] = None,
        background: Optional[BackgroundImage] = None,
    ) -> bytes:
        """Render a card and encode it as PNG bytes."""
        img = self.render(style, content, offsets, background)
        output = io.BytesIO()
        img.save(output, format="PNG")
        return output.getvalue()
