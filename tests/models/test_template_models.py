"""Tests for template and generation request models."""

from quotecard.models.editor import PreviewBackground
from quotecard.models.generation import ImageGenerateRequest, QuoteGenerateRequest
from quotecard.models.template import TemplateSettings


class TestFromEditorExport:
    def test_maps_browser_record(self):
        record = {
            "bgColor": "#E9E5CD",
            "cardColor": "#F6F4E8",
            "quote1Size": "72",
            "quote1LineHeight": "1.5",
            "quote1Weight": "600",
            "cardWidth": "1080",
            "cardHeight": "1080",
            "quote1Offset": 12,
            "divider1Offset": -4,
            "enableQuote2Toggle": True,
            "enableColoredBorders": False,
            "previewBg": "dark",
            "backgroundImageData": None,
            "bgImageOpacity": "0.5",
            "bgImageZoom": "1.2",
            "bgImagePanX": 3,
            "quote1Text": "Hello",
            "authorText": "Ana",
        }
        settings = TemplateSettings.from_editor_export(record)
        assert settings.style.quote1_size == 72
        assert settings.style.quote1_line_height == 1.5
        assert settings.style.card_width == 1080
        assert settings.style.enable_quote2 is True
        assert settings.style.enable_colored_borders is False
        assert settings.offsets.quote1 == 12
        assert settings.offsets.divider1 == -4
        assert settings.preview_bg == PreviewBackground.DARK
        assert settings.background.data_url is None
        assert settings.background.opacity == 0.5
        assert settings.background.zoom == 1.2
        assert settings.background.pan_x == 3
        assert settings.content.quote1 == "Hello"
        assert settings.content.author == "Ana"

    def test_older_enable_quote2_key(self):
        settings = TemplateSettings.from_editor_export({"enableQuote2": True})
        assert settings.style.enable_quote2 is True

    def test_missing_keys_default(self):
        settings = TemplateSettings.from_editor_export({})
        assert settings.style.quote1_size == 70
        assert settings.preview_bg == PreviewBackground.LIGHT
        assert settings.background.opacity == 0.3


class TestQuoteGenerateRequest:
    def test_defaults_fill_missing(self):
        payload = QuoteGenerateRequest(messages=[]).to_upstream("gpt-4o-mini")
        assert payload == {
            "model": "gpt-4o-mini",
            "messages": [],
            "temperature": 1.0,
            "top_p": 0.9,
            "presence_penalty": 0.7,
            "frequency_penalty": 0.6,
            "max_tokens": 130,
        }

    def test_zero_is_honored(self):
        payload = QuoteGenerateRequest(messages=[], temperature=0, max_tokens=50).to_upstream("m")
        assert payload["temperature"] == 0
        assert payload["max_tokens"] == 50


class TestImageGenerateRequest:
    def test_defaults(self):
        payload = ImageGenerateRequest(prompt="sky").to_upstream("dall-e-3")
        assert payload == {
            "model": "dall-e-3",
            "prompt": "sky",
            "size": "1024x1024",
            "quality": "standard",
            "n": 1,
        }

    def test_overrides(self):
        payload = ImageGenerateRequest(prompt="sky", size="1792x1024", quality="hd").to_upstream("m")
        assert payload["size"] == "1792x1024"
        assert payload["quality"] == "hd"
