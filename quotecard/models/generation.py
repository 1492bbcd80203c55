"""Request models for the quote and image generation proxies."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


# Upstream sampling defaults for quote generation
DEFAULT_TEMPERATURE = 1.0
DEFAULT_TOP_P = 0.9
DEFAULT_PRESENCE_PENALTY = 0.7
DEFAULT_FREQUENCY_PENALTY = 0.6
DEFAULT_MAX_TOKENS = 130

# Upstream image defaults
DEFAULT_IMAGE_SIZE = "1024x1024"
DEFAULT_IMAGE_QUALITY = "standard"


class QuoteGenerateRequest(BaseModel):
    """Body of POST /api/generate-quote.

    ``messages`` is passed upstream untouched; omitted sampling parameters
    fall back to the defaults above.
    """
    messages: List[Any]
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    max_tokens: Optional[int] = None

    def to_upstream(self, model: str) -> Dict[str, Any]:
        """Build the chat-completion payload."""
        return {
            "model": model,
            "messages": self.messages,
            "temperature": _or_default(self.temperature, DEFAULT_TEMPERATURE),
            "top_p": _or_default(self.top_p, DEFAULT_TOP_P),
            "presence_penalty": _or_default(self.presence_penalty, DEFAULT_PRESENCE_PENALTY),
            "frequency_penalty": _or_default(self.frequency_penalty, DEFAULT_FREQUENCY_PENALTY),
            "max_tokens": _or_default(self.max_tokens, DEFAULT_MAX_TOKENS),
        }


class ImageGenerateRequest(BaseModel):
    """Body of POST /api/generate-image."""
    prompt: str
    size: Optional[str] = None
    quality: Optional[str] = None

    def to_upstream(self, model: str) -> Dict[str, Any]:
        """Build the image-generation payload."""
        return {
            "model": model,
            "prompt": self.prompt,
            "size": self.size or DEFAULT_IMAGE_SIZE,
            "quality": self.quality or DEFAULT_IMAGE_QUALITY,
            "n": 1,
        }


def _or_default(value, default):
    return default if value is None else value
