"""Template models - named snapshots of the whole editor state."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .editor import (
    BackgroundSettings,
    ContentStrings,
    ManualOffsets,
    PreviewBackground,
    StyleParameters,
)


# Field names used by templates exported from the browser editor
_EDITOR_STYLE_KEYS = {
    "cardWidth": "card_width",
    "cardHeight": "card_height",
    "quote1Size": "quote1_size",
    "quote2Size": "quote2_size",
    "authorSize": "author_size",
    "quote1LineHeight": "quote1_line_height",
    "quote2LineHeight": "quote2_line_height",
    "quote1Weight": "quote1_weight",
    "quote2Weight": "quote2_weight",
    "authorWeight": "author_weight",
    "quote1Color": "quote1_color",
    "quote2Color": "quote2_color",
    "authorColor": "author_color",
    "bgColor": "bg_color",
    "cardColor": "card_color",
    "dividerColor": "divider_color",
    "showDividers": "show_dividers",
    "enableColoredBorders": "enable_colored_borders",
    "fontFamily": "font_family",
}
_EDITOR_CONTENT_KEYS = {
    "quote1Text": "quote1",
    "quote2Text": "quote2",
    "authorText": "author",
}
_EDITOR_OFFSET_KEYS = {
    "quote1Offset": "quote1",
    "quote2Offset": "quote2",
    "authorOffset": "author",
    "divider1Offset": "divider1",
}
_EDITOR_BACKGROUND_KEYS = {
    "backgroundImageData": "data_url",
    "bgImagePanX": "pan_x",
    "bgImagePanY": "pan_y",
    "bgImageZoom": "zoom",
    "bgImageRotate": "rotation",
    "bgImageOpacity": "opacity",
}


def _pick(data: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    return {
        field: data[key]
        for key, field in mapping.items()
        if key in data and data[key] is not None
    }


class TemplateSettings(BaseModel):
    """Everything a template restores."""
    style: StyleParameters = Field(default_factory=StyleParameters)
    content: ContentStrings = Field(default_factory=ContentStrings)
    offsets: ManualOffsets = Field(default_factory=ManualOffsets)
    background: BackgroundSettings = Field(default_factory=BackgroundSettings)
    preview_bg: PreviewBackground = PreviewBackground.LIGHT

    @classmethod
    def from_editor_export(cls, data: Dict[str, Any]) -> "TemplateSettings":
        """Build settings from the flat camelCase record the browser editor saves.

        Missing keys keep their defaults.
        """
        style = _pick(data, _EDITOR_STYLE_KEYS)
        # Older exports only carry enableQuote2
        toggle = data.get("enableQuote2Toggle", data.get("enableQuote2"))
        if toggle is not None:
            style["enable_quote2"] = toggle

        preview = data.get("previewBg") or PreviewBackground.LIGHT.value
        return cls(
            style=StyleParameters(**style),
            content=ContentStrings(**_pick(data, _EDITOR_CONTENT_KEYS)),
            offsets=ManualOffsets(**_pick(data, _EDITOR_OFFSET_KEYS)),
            background=BackgroundSettings(**_pick(data, _EDITOR_BACKGROUND_KEYS)),
            preview_bg=PreviewBackground(preview),
        )


class Template(BaseModel):
    """A named, persisted editor snapshot."""
    name: str
    settings: TemplateSettings
    created_at: datetime = Field(default_factory=datetime.now)


class TemplateSaveRequest(BaseModel):
    """Request to save a template.

    When ``settings`` is omitted the current editor session is captured.
    """
    name: str = ""
    settings: Optional[TemplateSettings] = None
    overwrite: bool = False


class TemplateImportRequest(BaseModel):
    """Request to import a template exported by the browser editor."""
    name: str = ""
    settings: Dict[str, Any]
    overwrite: bool = False


class TemplateSummary(BaseModel):
    """Template list entry without the (possibly large) image payload."""
    name: str
    created_at: datetime
    has_background_image: bool = False


class TemplateListResponse(BaseModel):
    """Saved templates in insertion order."""
    templates: List[TemplateSummary]
    count: int
