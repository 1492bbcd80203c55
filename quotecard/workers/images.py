"""Background image decoding and data-URL encoding."""

import base64
import binascii
import io
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger
from PIL import Image, UnidentifiedImageError

from quotecard.exceptions import ImageDecodeError
from quotecard.models.editor import BackgroundSettings


@dataclass
class BackgroundImage:
    """A decoded background bitmap with its transform settings."""
    bitmap: Image.Image
    settings: BackgroundSettings = field(default_factory=BackgroundSettings)


def bytes_to_data_url(data: bytes, mime_type: str = "image/png") -> str:
    """Encode raw image bytes as a base64 data URL."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def decode_image_bytes(data: bytes) -> Image.Image:
    """Decode image bytes into a fully loaded RGBA bitmap."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeError(f"Could not load the image: {e}") from e


def decode_data_url(data_url: str) -> Image.Image:
    """Decode a base64 ``data:`` URL into a bitmap.

    Raises:
        ImageDecodeError: If the URL is not a base64 data URL or the
            payload is not a readable image
    """
    if not isinstance(data_url, str) or not data_url.startswith("data:"):
        raise ImageDecodeError("Expected a data: URL")

    header, sep, payload = data_url.partition(",")
    if not sep or ";base64" not in header:
        raise ImageDecodeError("Expected a base64-encoded data: URL")

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 payload: {e}") from e

    bitmap = decode_image_bytes(raw)
    logger.debug(f"Decoded background image {bitmap.width}x{bitmap.height}")
    return bitmap


def load_background(settings: BackgroundSettings) -> Optional[BackgroundImage]:
    """Decode the image referenced by settings, if any."""
    if not settings.data_url:
        return None
    return BackgroundImage(bitmap=decode_data_url(settings.data_url), settings=settings)
