"""Editor session - the interactive state of one quote card.

Holds style, content, offsets and the background image, and turns pointer
gestures into offset and pan changes using the same layout the renderer
paints with.
"""

from dataclasses import dataclass, field
from typing import Optional, Set, Tuple

from loguru import logger
from PIL import Image

from quotecard.exceptions import GenerationInProgressError, ImageDecodeError
from quotecard.models.editor import (
    DEFAULT_CARD_HEIGHT,
    DEFAULT_CARD_WIDTH,
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
from quotecard.models.template import TemplateSettings
from quotecard.workers.card_renderer import CardRenderer, export_filename
from quotecard.workers.generators import BackgroundGenerator, GeneratedBackground, QuoteGenerator
from quotecard.workers.hit_test import hit_test, hit_test_image
from quotecard.workers.images import BackgroundImage, decode_data_url
from quotecard.workers.layout import CardLayout

# Style fields a style reset leaves alone
_RESET_KEEPS = ("card_width", "card_height", "enable_quote2", "show_dividers")


@dataclass
class DragState:
    """One gesture in progress."""
    mode: DragMode = DragMode.NONE
    target: ElementId = ElementId.NONE
    last_x: float = 0.0
    last_y: float = 0.0

    @property
    def active(self) -> bool:
        return self.mode != DragMode.NONE


@dataclass
class EditorState:
    """Everything the card is rendered from, plus the current drag."""
    style: StyleParameters = field(default_factory=StyleParameters)
    content: ContentStrings = field(default_factory=ContentStrings)
    offsets: ManualOffsets = field(default_factory=ManualOffsets)
    background: BackgroundSettings = field(default_factory=BackgroundSettings)
    bitmap: Optional[Image.Image] = None
    preview_bg: PreviewBackground = PreviewBackground.LIGHT
    drag: DragState = field(default_factory=DragState)


class EditorSession:
    """Interactive editor for a single card."""

    def __init__(
        self,
        renderer: Optional[CardRenderer] = None,
        quote_generator: Optional[QuoteGenerator] = None,
        background_generator: Optional[BackgroundGenerator] = None,
    ):
        self.renderer = renderer or CardRenderer()
        self.quote_generator = quote_generator
        self.background_generator = background_generator
        self.state = EditorState()
        self._in_flight: Set[str] = set()

    # ---- Layout ----

    @property
    def has_image(self) -> bool:
        return self.state.bitmap is not None

    def layout(self) -> CardLayout:
        """Current card geometry, recomputed on every call."""
        s = self.state
        return self.renderer.layout(s.style, s.content, s.offsets)

    def _background(self) -> Optional[BackgroundImage]:
        if self.state.bitmap is None:
            return None
        return BackgroundImage(bitmap=self.state.bitmap, settings=self.state.background)

    # ---- Style and content ----

    def update_style(self, **changes) -> StyleParameters:
        """Apply style changes; values are validated and clamped."""
        data = self.state.style.model_dump()
        data.update(changes)
        self.state.style = StyleParameters(**data)
        return self.state.style

    def update_content(self, **changes) -> ContentStrings:
        data = self.state.content.model_dump()
        data.update({k: v for k, v in changes.items() if v is not None})
        self.state.content = ContentStrings(**data)
        return self.state.content

    def set_preview_bg(self, preview_bg: PreviewBackground) -> None:
        self.state.preview_bg = PreviewBackground(preview_bg)

    # ---- Pointer gestures ----

    def pointer_down(self, x: float, y: float) -> DragState:
        """Start a text drag or an image pan at (x, y).

        Text wins over the image underneath it.
        """
        layout = self.layout()
        drag = self.state.drag
        target = hit_test(layout, x, y)

        if target != ElementId.NONE:
            drag.mode, drag.target = DragMode.TEXT, target
        elif hit_test_image(layout, self.has_image, x, y):
            drag.mode, drag.target = DragMode.IMAGE, ElementId.NONE
        else:
            drag.mode, drag.target = DragMode.NONE, ElementId.NONE

        drag.last_x, drag.last_y = x, y
        return drag

    def pointer_move(self, x: float, y: float) -> bool:
        """Continue the current gesture.

        Returns:
            True if an offset or the pan changed
        """
        drag = self.state.drag
        if not drag.active:
            return False

        dx, dy = x - drag.last_x, y - drag.last_y
        if drag.mode == DragMode.IMAGE:
            self.state.background.pan_x += dx
            self.state.background.pan_y += dy
        else:
            self.state.offsets.add(drag.target, dy)

        drag.last_x, drag.last_y = x, y
        return dx != 0 or dy != 0

    def pointer_up(self) -> None:
        self.state.drag = DragState()

    def pointer_leave(self) -> None:
        self.state.drag = DragState()

    def pointer_cancel(self) -> None:
        self.state.drag = DragState()

    def handle_pointer(self, event: PointerEvent, x: float = 0.0, y: float = 0.0) -> bool:
        """Dispatch a pointer event. Returns whether the card changed."""
        event = PointerEvent(event)
        if event == PointerEvent.DOWN:
            self.pointer_down(x, y)
            return False
        if event == PointerEvent.MOVE:
            return self.pointer_move(x, y)
        if event == PointerEvent.UP:
            self.pointer_up()
        elif event == PointerEvent.LEAVE:
            self.pointer_leave()
        else:
            self.pointer_cancel()
        return False

    def cursor_at(self, x: float, y: float) -> str:
        """CSS cursor for the pointer at (x, y)."""
        drag = self.state.drag
        if drag.mode == DragMode.TEXT:
            return "grabbing"
        if drag.mode == DragMode.IMAGE:
            return "move"

        layout = self.layout()
        if hit_test(layout, x, y) != ElementId.NONE:
            return "grab"
        if hit_test_image(layout, self.has_image, x, y):
            return "move"
        return "default"

    # ---- Resets ----

    def reset_styles(self) -> None:
        """Styles, offsets and background back to defaults.

        Card size, content, the quote 2 toggle and divider visibility are kept.
        """
        kept = {name: getattr(self.state.style, name) for name in _RESET_KEEPS}
        self.state.style = StyleParameters(**kept)
        self.state.offsets = ManualOffsets()
        self.clear_background()

    def reset_size(self) -> None:
        self.update_style(card_width=DEFAULT_CARD_WIDTH, card_height=DEFAULT_CARD_HEIGHT)

    def reset_everything(self) -> None:
        self.reset_styles()
        self.reset_size()

    def reset(self, scope: ResetScope) -> None:
        scope = ResetScope(scope)
        if scope == ResetScope.STYLES:
            self.reset_styles()
        elif scope == ResetScope.SIZE:
            self.reset_size()
        else:
            self.reset_everything()
        logger.info(f"Editor reset: {scope.value}")

    # ---- Background image ----

    def apply_background_data_url(self, data_url: str) -> None:
        """Load a background image and reset its transform.

        Raises:
            ImageDecodeError: If the image cannot be decoded; state is unchanged
        """
        bitmap = decode_data_url(data_url)
        background = self.state.background.model_copy()
        background.data_url = data_url
        background.reset_transform()
        self.state.bitmap = bitmap
        self.state.background = background
        logger.info(f"Applied background image {bitmap.width}x{bitmap.height}")

    def clear_background(self) -> None:
        self.state.bitmap = None
        self.state.background = BackgroundSettings()

    def reset_image_position(self) -> None:
        self.state.background.pan_x = 0.0
        self.state.background.pan_y = 0.0

    def update_background_settings(self, **changes) -> BackgroundSettings:
        """Change zoom, rotation, opacity or pan; the image itself is kept."""
        data = self.state.background.model_dump()
        data.update({k: v for k, v in changes.items() if v is not None})
        data["data_url"] = self.state.background.data_url
        self.state.background = BackgroundSettings(**data)
        return self.state.background

    # ---- Templates ----

    def snapshot(self) -> TemplateSettings:
        """Capture the current editor state as template settings."""
        s = self.state
        return TemplateSettings(
            style=s.style.model_copy(),
            content=s.content.model_copy(),
            offsets=s.offsets.model_copy(),
            background=s.background.model_copy(),
            preview_bg=s.preview_bg,
        )

    def apply_template(self, template_settings: TemplateSettings) -> None:
        """Restore a snapshot.

        A background image that fails to decode is logged and dropped; the
        rest of the template still applies.
        """
        s = self.state
        s.style = template_settings.style.model_copy()
        s.content = template_settings.content.model_copy()
        s.offsets = template_settings.offsets.model_copy()
        s.preview_bg = template_settings.preview_bg
        s.drag = DragState()

        background = template_settings.background.model_copy()
        bitmap = None
        if background.data_url:
            try:
                bitmap = decode_data_url(background.data_url)
            except ImageDecodeError as e:
                logger.warning(f"Template background image dropped: {e}")
                background = BackgroundSettings()
        s.background = background
        s.bitmap = bitmap

    # ---- Output ----

    def render(self) -> Image.Image:
        s = self.state
        return self.renderer.render(s.style, s.content, s.offsets, self._background())

    def render_png(self) -> bytes:
        s = self.state
        return self.renderer.export_png(s.style, s.content, s.offsets, self._background())

    def export(self) -> Tuple[str, bytes]:
        """Return (file name, PNG bytes) for download."""
        filename = f"{export_filename(self.state.content.quote1)}.png"
        return filename, self.render_png()

    # ---- Generation ----

    def _begin(self, kind: str) -> None:
        if kind in self._in_flight:
            raise GenerationInProgressError(kind)
        self._in_flight.add(kind)

    def is_generating(self, kind: str) -> bool:
        return kind in self._in_flight

    async def generate_quote(self) -> str:
        """Generate a quote into quote 1.

        Raises:
            GenerationInProgressError: If a quote generation is running
            GenerationError: If generation fails
        """
        if self.quote_generator is None:
            raise RuntimeError("Quote generator not configured")
        self._begin("quote")
        try:
            quote = await self.quote_generator.generate()
        finally:
            self._in_flight.discard("quote")
        self.update_content(quote1=quote)
        return quote

    async def generate_background(self, seed_quote: Optional[str] = None) -> GeneratedBackground:
        """Generate a background image and apply it.

        The seed defaults to the current quote 1.
        """
        if self.background_generator is None:
            raise RuntimeError("Background generator not configured")
        self._begin("image")
        try:
            seed = self.state.content.quote1 if seed_quote is None else seed_quote
            generated = await self.background_generator.generate(seed)
        finally:
            self._in_flight.discard("image")
        self.apply_background_data_url(generated.data_url)
        return generated
