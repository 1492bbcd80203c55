"""Quote and background generation flows.

Server-side versions of the editor's "generate" buttons: build the prompt,
call the upstream through OpenAIClient and turn the answer into something the
editor can apply (a cleaned quote, a data URL).
"""

import base64
import random
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import httpx
from loguru import logger

from quotecard.config import settings
from quotecard.exceptions import GenerationError
from quotecard.models.generation import ImageGenerateRequest, QuoteGenerateRequest
from quotecard.workers.images import bytes_to_data_url
from quotecard.workers.openai_proxy import MISSING_KEY_MESSAGE, OpenAIClient, upstream_error_message
from quotecard.workers.prompts import build_image_prompt, build_quote_messages

if TYPE_CHECKING:
    from quotecard.services.quote_history import QuoteHistory

_SURROUNDING_QUOTES_RE = re.compile(r'^"+|"+$')


def clean_quote(text: str) -> str:
    """Strip whitespace and surrounding double quotes from a generated quote."""
    return _SURROUNDING_QUOTES_RE.sub("", text.strip())


@dataclass
class GeneratedBackground:
    """A generated background image ready to apply."""
    prompt: str
    data_url: str


class QuoteGenerator:
    """Generates one quote and records it in the history."""

    def __init__(
        self,
        client: OpenAIClient,
        history: "QuoteHistory",
        model: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        self.client = client
        self.history = history
        self.model = model or settings.chat_model
        self.rng = rng or random.Random()

    async def generate(self) -> str:
        """Generate a quote.

        Raises:
            GenerationError: Missing key, transport or upstream failure, or
                empty answer
        """
        if not self.client.is_configured():
            raise GenerationError(MISSING_KEY_MESSAGE, status_code=500)

        request = QuoteGenerateRequest(messages=build_quote_messages(self.history.texts(), self.rng))
        try:
            response = await self.client.chat_completion(request.to_upstream(self.model))
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Quote request failed: {e}")
            raise GenerationError(f"OpenAI API request failed: {e}") from e
        if not response.ok:
            raise GenerationError(
                upstream_error_message(response.data, "OpenAI API request failed"),
                status_code=response.status_code,
            )

        try:
            content = response.data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            content = ""

        quote = clean_quote(str(content))
        if not quote:
            raise GenerationError("No quote returned by OpenAI.")

        self.history.add(quote)
        logger.info(f"Generated quote: {quote[:60]}")
        return quote


class BackgroundGenerator:
    """Generates a background image and returns it as a data URL."""

    def __init__(
        self,
        client: OpenAIClient,
        model: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        self.client = client
        self.model = model or settings.image_model
        self.rng = rng or random.Random()

    async def generate(self, seed_quote: str = "") -> GeneratedBackground:
        """Generate an image, optionally inspired by a quote.

        Prefers the inline ``b64_json`` payload and falls back to
        downloading ``url`` (or ``image_url``).

        Raises:
            GenerationError: Missing key, transport or upstream failure, or no
                usable image
        """
        if not self.client.is_configured():
            raise GenerationError(MISSING_KEY_MESSAGE, status_code=500)

        prompt = build_image_prompt(seed_quote, self.rng)
        request = ImageGenerateRequest(prompt=prompt)
        try:
            response = await self.client.create_image(request.to_upstream(self.model))
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Image request failed: {e}")
            raise GenerationError(f"Image generation failed: {e}") from e
        if not response.ok:
            raise GenerationError(
                upstream_error_message(response.data, "Image generation failed"),
                status_code=response.status_code,
            )

        items = response.data.get("data") or []
        first = items[0] if items and isinstance(items[0], dict) else {}

        if first.get("b64_json"):
            try:
                raw = base64.b64decode(first["b64_json"], validate=True)
            except ValueError as e:
                raise GenerationError(f"Invalid image payload: {e}") from e
            return GeneratedBackground(prompt=prompt, data_url=bytes_to_data_url(raw))

        remote_url = first.get("url") or first.get("image_url")
        if not remote_url:
            raise GenerationError("Response does not contain the generated image.")

        try:
            content, mime_type = await self.client.fetch_bytes(remote_url)
        except httpx.HTTPError as e:
            logger.error(f"Failed to download generated image: {e}")
            raise GenerationError("Could not download the generated image.") from e

        return GeneratedBackground(prompt=prompt, data_url=bytes_to_data_url(content, mime_type))
