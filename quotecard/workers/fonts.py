"""Font resolution from CSS-style family lists.

The editor describes fonts the way a canvas does: a comma-separated family
list ("'American Typewriter', 'Courier Prime', monospace") plus a weight.
This module maps that onto font files Pillow can load.
"""

import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from loguru import logger
from PIL import ImageFont

from quotecard.workers.layout import InkBox, InkBoxFn
from quotecard.workers.text_layout import MeasureFn

FONT_SUFFIXES = {".ttf", ".otf", ".ttc"}
BOLD_WEIGHTS = {"600", "700", "800", "900", "bold"}
INK_MARGIN = 2

# Known family names → (regular, bold) candidate paths (macOS → Linux → Windows)
KNOWN_FAMILIES: Dict[str, Tuple[List[str], List[str]]] = {
    "american typewriter": (
        ["/System/Library/Fonts/Supplemental/AmericanTypewriter.ttc"],
        ["/System/Library/Fonts/Supplemental/AmericanTypewriter.ttc"],
    ),
    "courier prime": (
        [
            "/usr/share/fonts/truetype/courier-prime/CourierPrime-Regular.ttf",
            "/usr/share/fonts/TTF/CourierPrime-Regular.ttf",
        ],
        [
            "/usr/share/fonts/truetype/courier-prime/CourierPrime-Bold.ttf",
            "/usr/share/fonts/TTF/CourierPrime-Bold.ttf",
        ],
    ),
    "monospace": (
        [
            "/System/Library/Fonts/Menlo.ttc",
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
            "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
            "C:\\Windows\\Fonts\\cour.ttf",
        ],
        [
            "/System/Library/Fonts/Menlo.ttc",
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono-Bold.ttf",
            "/usr/share/fonts/TTF/DejaVuSansMono-Bold.ttf",
            "C:\\Windows\\Fonts\\courbd.ttf",
        ],
    ),
    "serif": (
        [
            "/System/Library/Fonts/Supplemental/Times New Roman.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf",
            "/usr/share/fonts/TTF/DejaVuSerif.ttf",
            "C:\\Windows\\Fonts\\times.ttf",
        ],
        [
            "/System/Library/Fonts/Supplemental/Times New Roman Bold.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSerif-Bold.ttf",
            "/usr/share/fonts/TTF/DejaVuSerif-Bold.ttf",
            "C:\\Windows\\Fonts\\timesbd.ttf",
        ],
    ),
    "sans-serif": (
        [
            "/System/Library/Fonts/Helvetica.ttc",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/TTF/DejaVuSans.ttf",
            "C:\\Windows\\Fonts\\arial.ttf",
        ],
        [
            "/System/Library/Fonts/Helvetica.ttc",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
            "C:\\Windows\\Fonts\\arialbd.ttf",
        ],
    ),
}


def parse_font_families(css_family: str) -> List[str]:
    """Split a CSS font-family list into lower-case names without quotes."""
    families = []
    for part in css_family.split(","):
        name = part.strip().strip("'\"").strip().lower()
        if name:
            families.append(name)
    return families


def _normalize(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", name.lower())


class FontResolver:
    """Loads Pillow fonts for (family list, weight, size) with caching."""

    def __init__(self, fonts_dir: Optional[Path] = None):
        """Initialize font resolver.

        Args:
            fonts_dir: Extra directory searched before system font paths
        """
        self.fonts_dir = Path(fonts_dir) if fonts_dir else None
        self._cache: Dict[Tuple[str, bool, int], ImageFont.FreeTypeFont] = {}
        self._warned: set = set()

    def _local_candidates(self, family: str, bold: bool) -> List[str]:
        """Font files in fonts_dir whose name starts with the family name."""
        if not self.fonts_dir or not self.fonts_dir.is_dir():
            return []
        key = _normalize(family)
        matches = [
            p for p in sorted(self.fonts_dir.iterdir())
            if p.suffix.lower() in FONT_SUFFIXES and _normalize(p.stem).startswith(key)
        ]
        # Bold files first for bold weights, regular files first otherwise
        matches.sort(key=lambda p: ("bold" in p.stem.lower()) != bold)
        return [str(p) for p in matches]

    def _candidates(self, family: str, bold: bool) -> List[str]:
        candidates = self._local_candidates(family, bold)
        regular, heavy = KNOWN_FAMILIES.get(family, ([], []))
        candidates.extend(heavy if bold else regular)
        return candidates

    @staticmethod
    def _find_font(candidates: List[str], size: int) -> Optional[ImageFont.FreeTypeFont]:
        """Try loading a font from a list of candidate paths."""
        for path in candidates:
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue
        return None

    def get_font(self, css_family: str, weight: str, size: int) -> ImageFont.FreeTypeFont:
        """Resolve a font, falling back to Pillow's built-in scalable font."""
        bold = str(weight).lower() in BOLD_WEIGHTS
        cache_key = (css_family, bold, size)
        if cache_key in self._cache:
            return self._cache[cache_key]

        font = None
        for family in parse_font_families(css_family):
            font = self._find_font(self._candidates(family, bold), size)
            if font is not None:
                break

        if font is None:
            if css_family not in self._warned:
                logger.warning(f"No font file found for '{css_family}', using Pillow default font")
                self._warned.add(css_family)
            font = ImageFont.load_default(size=size)

        self._cache[cache_key] = font
        return font

    def measurer(self, weight: str, size: int, css_family: str) -> MeasureFn:
        """Width function for text set in the given font."""
        font = self.get_font(css_family, weight, size)
        return font.getlength

    def ink_box(self, weight: str, size: int, css_family: str) -> InkBoxFn:
        """Painted bounds of a line drawn centered on its baseline.

        Padded by INK_MARGIN to cover anti-aliasing at fractional positions.
        """
        font = self.get_font(css_family, weight, size)

        def box(text: str) -> InkBox:
            left, top, right, bottom = font.getbbox(text, anchor="ms")
            return (left - INK_MARGIN, top - INK_MARGIN, right + INK_MARGIN, bottom + INK_MARGIN)

        return box
