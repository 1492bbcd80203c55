"""HTTP client for the OpenAI-compatible chat and image endpoints.

The API key never leaves the server: the proxy routes and the generation
flows both go through this client.
"""

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import httpx
from loguru import logger

from quotecard.config import settings

MISSING_KEY_MESSAGE = (
    "OpenAI API key not configured. Please add OPENAI_API_KEY to the "
    "server environment (.env)."
)


@dataclass
class UpstreamResponse:
    """Status code and decoded JSON body of an upstream call."""
    status_code: int
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass
class InlineResult:
    """Outcome of inlining a generated image as base64.

    Inlining is best effort: on failure the response keeps the remote URL.
    """
    ok: bool
    error: Optional[str] = None


def upstream_error_message(data: Any, fallback: str) -> str:
    """Pull ``error.message`` out of an upstream error body."""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return fallback


class OpenAIClient:
    """Thin async client for /chat/completions and /images/generations."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        download_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.openai_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self.timeout = timeout or settings.upstream_timeout
        self.download_timeout = download_timeout or settings.download_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def is_configured(self) -> bool:
        """Check if an API key is available."""
        return bool(self.api_key and self.api_key.strip())

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self):
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _post_json(self, path: str, payload: Dict[str, Any]) -> UpstreamResponse:
        client = await self._get_client()
        response = await client.post(
            f"{self.base_url}{path}",
            json=payload,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
        )
        data = response.json()
        if not response.is_success:
            logger.error(f"Upstream {path} error {response.status_code}: {data}")
        return UpstreamResponse(status_code=response.status_code, data=data)

    async def chat_completion(self, payload: Dict[str, Any]) -> UpstreamResponse:
        """POST /chat/completions."""
        logger.info(f"Generating quote with {payload.get('model')}")
        return await self._post_json("/chat/completions", payload)

    async def create_image(self, payload: Dict[str, Any]) -> UpstreamResponse:
        """POST /images/generations."""
        logger.info(f"Generating image with {payload.get('model')}")
        logger.debug(f"Image prompt: {payload.get('prompt')}")
        return await self._post_json("/images/generations", payload)

    async def fetch_bytes(self, url: str) -> Tuple[bytes, str]:
        """Download a remote file.

        Returns:
            (content, mime type)

        Raises:
            httpx.HTTPError: On connection failures and non-2xx responses
        """
        client = await self._get_client()
        response = await client.get(url, timeout=self.download_timeout)
        response.raise_for_status()
        mime_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not mime_type.startswith("image/"):
            mime_type = "image/png"
        return response.content, mime_type

    async def inline_first_image(self, data: Dict[str, Any]) -> InlineResult:
        """Replace the first image URL with base64 content in place.

        Sets ``data[0].b64_json`` and ``data[0].data_url`` when the download
        works; leaves the body untouched otherwise.
        """
        items = data.get("data") if isinstance(data, dict) else None
        if not items or not isinstance(items[0], dict) or not items[0].get("url"):
            return InlineResult(ok=False, error="no image url")

        first = items[0]
        try:
            content, _ = await self.fetch_bytes(first["url"])
        except httpx.HTTPError as e:
            logger.warning(f"Could not convert image to base64: {e}")
            return InlineResult(ok=False, error=str(e))

        encoded = base64.b64encode(content).decode("ascii")
        first["b64_json"] = encoded
        first["data_url"] = f"data:image/png;base64,{encoded}"
        logger.info("Image converted to base64")
        return InlineResult(ok=True)
