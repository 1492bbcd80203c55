"""Tests for the card renderer."""

import io

import pytest
from PIL import Image

from quotecard.models.editor import BackgroundSettings, ContentStrings, ManualOffsets, StyleParameters
from quotecard.workers.card_renderer import CardRenderer, compute_image_placement, export_filename
from quotecard.workers.images import BackgroundImage, decode_data_url
from quotecard.workers.layout import Rect

BG = (0xE9, 0xE5, 0xCD, 255)
CARD = (0xF6, 0xF4, 0xE8, 255)


@pytest.fixture
def card_renderer():
    return CardRenderer()


class TestRender:
    def test_hello_world_default_size(self, card_renderer):
        img = card_renderer.render(StyleParameters(), ContentStrings(quote1="Hello world"))
        assert img.size == (970, 1074)
        assert img.mode == "RGBA"

    def test_frame_colors(self, card_renderer):
        img = card_renderer.render(StyleParameters(), ContentStrings(quote1="Hi"))
        assert img.getpixel((5, 5)) == BG
        assert img.getpixel((38, 500)) == (255, 0, 0, 255)
        assert img.getpixel((43, 500)) == (255, 229, 0, 255)
        assert img.getpixel((48, 500)) == (2, 135, 255, 255)
        assert img.getpixel((60, 60)) == CARD

    def test_without_borders(self, card_renderer):
        style = StyleParameters(enable_colored_borders=False)
        img = card_renderer.render(style, ContentStrings(quote1="Hi"))
        assert img.getpixel((37, 500)) == BG
        assert img.getpixel((40, 500)) == CARD

    def test_custom_size(self, card_renderer):
        img = card_renderer.render(StyleParameters(card_width=600, card_height=800), ContentStrings())
        assert img.size == (600, 800)

    def test_text_is_painted(self, card_renderer):
        style = StyleParameters(quote1_color="#000000")
        img = card_renderer.render(style, ContentStrings(quote1="Hello world"))
        layout = card_renderer.layout(style, ContentStrings(quote1="Hello world"), ManualOffsets())
        baseline = int(layout.quote1.baselines[0])
        band = img.crop((93, baseline - 40, 877, baseline + 5)).convert("RGB")
        assert (0, 0, 0) in {color for _, color in band.getcolors(maxcolors=100000)}

    def test_author_divider_painted(self, card_renderer):
        style = StyleParameters()
        content = ContentStrings(quote1="Hi", author="Ana")
        img = card_renderer.render(style, content)
        y = 1074 - 93 - 36 - 10
        assert img.getpixel((485, y)) == (0xAF, 0xA8, 0x6A, 255)

    def test_dividers_hidden(self, card_renderer):
        style = StyleParameters(show_dividers=False)
        img = card_renderer.render(style, ContentStrings(quote1="Hi", author="Ana"))
        y = 1074 - 93 - 36 - 10
        assert img.getpixel((485, y)) == CARD

    def test_background_image_fills_interior(self, card_renderer, red_data_url):
        settings = BackgroundSettings(data_url=red_data_url, opacity=1.0)
        background = BackgroundImage(bitmap=decode_data_url(red_data_url), settings=settings)
        img = card_renderer.render(StyleParameters(), ContentStrings(), background=background)
        assert img.getpixel((60, 60)) == (255, 0, 0, 255)
        # Clipped to the interior
        assert img.getpixel((5, 5)) == BG
        assert img.getpixel((48, 500)) == (2, 135, 255, 255)

    def test_background_opacity(self, card_renderer, red_data_url):
        settings = BackgroundSettings(data_url=red_data_url, opacity=0.5)
        background = BackgroundImage(bitmap=decode_data_url(red_data_url), settings=settings)
        img = card_renderer.render(StyleParameters(), ContentStrings(), background=background)
        r, g, b, a = img.getpixel((60, 60))
        assert a == 255
        assert r > CARD[0] - 10
        assert g < CARD[1] - 50

    def test_rotated_background_stays_clipped(self, card_renderer, red_data_url):
        settings = BackgroundSettings(data_url=red_data_url, opacity=1.0, rotation=45)
        background = BackgroundImage(bitmap=decode_data_url(red_data_url), settings=settings)
        img = card_renderer.render(StyleParameters(), ContentStrings(), background=background)
        assert img.getpixel((5, 5)) == BG
        assert img.getpixel((485, 537)) == (255, 0, 0, 255)

    def test_export_png(self, card_renderer):
        png = card_renderer.export_png(StyleParameters(), ContentStrings(quote1="Hello world"))
        assert png[:8] == b"\x89PNG\r\n\x1a\n"
        assert Image.open(io.BytesIO(png)).size == (970, 1074)


class TestImagePlacement:
    def test_cover_fit_wide_image(self):
        placement = compute_image_placement(Rect(0, 0, 100, 100), 200, 100, 1.0, 0, 0)
        assert (placement.width, placement.height) == (200, 100)
        assert placement.x == -50
        assert placement.y == 0

    def test_cover_fit_tall_image(self):
        placement = compute_image_placement(Rect(0, 0, 100, 100), 50, 100, 1.0, 0, 0)
        assert (placement.width, placement.height) == (100, 200)
        assert placement.y == -50

    def test_zoom_scales(self):
        placement = compute_image_placement(Rect(0, 0, 100, 100), 100, 100, 2.0, 0, 0)
        assert (placement.width, placement.height) == (200, 200)
        assert (placement.x, placement.y) == (-50, -50)

    def test_pan_clamped(self):
        interior = Rect(10, 20, 100, 100)
        right = compute_image_placement(interior, 100, 100, 2.0, 1000, 1000)
        assert (right.x, right.y) == (10, 20)
        left = compute_image_placement(interior, 100, 100, 2.0, -1000, -1000)
        assert (left.x, left.y) == (110 - 200, 120 - 200)

    def test_pan_within_bounds(self):
        interior = Rect(0, 0, 100, 100)
        for pan in (-80, -30, 0, 30, 80):
            p = compute_image_placement(interior, 100, 100, 2.0, pan, pan)
            assert interior.right - p.width <= p.x <= interior.x
            assert interior.bottom - p.height <= p.y <= interior.y

    def test_no_zoom_no_pan(self):
        placement = compute_image_placement(Rect(0, 0, 100, 100), 100, 100, 1.0, 40, -40)
        assert (placement.x, placement.y) == (0, 0)


class TestExportFilename:
    def test_first_four_words(self):
        assert export_filename("Hello, World! This is great") == "hello-world-this-is"

    def test_empty(self):
        assert export_filename("") == "quote-card"
        assert export_filename("   ") == "quote-card"

    def test_only_symbols(self):
        assert export_filename("!!! ???") == "quote-card"

    def test_drops_empty_words(self):
        assert export_filename("Hi ... there") == "hi-there"

    def test_keeps_latin_extended(self):
        assert export_filename("Ștefan cel Mare") == "ștefan-cel-mare"

    def test_collapses_whitespace(self):
        assert export_filename("  one\ttwo\n three  ") == "one-two-three"
