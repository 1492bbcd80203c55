"""Worker modules for card layout, rendering and generation."""

from .card_renderer import CardRenderer
from .fonts import FontResolver
from .generators import BackgroundGenerator, QuoteGenerator
from .openai_proxy import OpenAIClient

__all__ = [
    "CardRenderer",
    "FontResolver",
    "BackgroundGenerator",
    "QuoteGenerator",
    "OpenAIClient",
]
