"""Generation proxy endpoints.

Thin pass-through to the OpenAI-compatible API so the editor never sees the
API key. Errors are returned as ``{"error": ...}`` bodies, the shape the
editor reads, rather than FastAPI's ``detail``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from loguru import logger
from pydantic import ValidationError

from quotecard.config import settings
from quotecard.models.generation import ImageGenerateRequest, QuoteGenerateRequest
from quotecard.workers.openai_proxy import MISSING_KEY_MESSAGE, OpenAIClient, upstream_error_message

router = APIRouter(prefix="/api", tags=["generate"])

_client: Optional[OpenAIClient] = None

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

INVALID_MESSAGES = 'Invalid request. Expected "messages" array.'
INVALID_PROMPT = 'Invalid request. Expected "prompt" string.'


def set_openai_client(client: OpenAIClient) -> None:
    """Set the upstream client instance."""
    global _client
    _client = client


def _get_client() -> OpenAIClient:
    if _client is None:
        raise RuntimeError("OpenAIClient not initialized")
    return _client


def _json(status_code: int, body: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body, headers=CORS_HEADERS)


async def _read_body(request: Request) -> Dict[str, Any]:
    """Request JSON as a dict; anything else reads as empty."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _preflight_or_method_error(request: Request) -> Optional[Response]:
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    if request.method != "POST":
        return _json(405, {"error": "Method not allowed"})
    return None


def _missing_key_response() -> JSONResponse:
    logger.error("OPENAI_API_KEY not configured")
    return _json(500, {"error": "Server configuration error", "message": MISSING_KEY_MESSAGE})


@router.api_route("/generate-quote", methods=ALL_METHODS)
async def generate_quote(request: Request):
    """Forward a chat completion request.

    Body: ``{messages, temperature?, top_p?, presence_penalty?,
    frequency_penalty?, max_tokens?}``. The upstream body is returned as is.
    """
    early = _preflight_or_method_error(request)
    if early is not None:
        return early

    try:
        body = await _read_body(request)
        if not isinstance(body.get("messages"), list):
            return _json(400, {"error": INVALID_MESSAGES})

        client = _get_client()
        if not client.is_configured():
            return _missing_key_response()

        try:
            quote_request = QuoteGenerateRequest(**body)
        except ValidationError as e:
            return _json(400, {"error": "Invalid request parameters.", "message": str(e)})

        response = await client.chat_completion(quote_request.to_upstream(settings.chat_model))
        if not response.ok:
            return _json(response.status_code, {
                "error": upstream_error_message(response.data, "OpenAI API request failed"),
                "details": response.data,
            })

        logger.info("Quote generated successfully")
        return _json(200, response.data)

    except Exception as e:
        logger.error(f"Error generating quote: {e}")
        return _json(500, {"error": "Failed to generate quote", "message": str(e)})


@router.api_route("/generate-image", methods=ALL_METHODS)
async def generate_image(request: Request):
    """Forward an image generation request.

    Body: ``{prompt, size?, quality?}``. When the upstream answers with a
    URL, the image is downloaded and inlined as ``b64_json`` and
    ``data_url`` on a best-effort basis.
    """
    early = _preflight_or_method_error(request)
    if early is not None:
        return early

    try:
        body = await _read_body(request)
        prompt = body.get("prompt")
        if not isinstance(prompt, str) or not prompt:
            return _json(400, {"error": INVALID_PROMPT})

        client = _get_client()
        if not client.is_configured():
            return _missing_key_response()

        try:
            image_request = ImageGenerateRequest(**body)
        except ValidationError as e:
            return _json(400, {"error": "Invalid request parameters.", "message": str(e)})

        response = await client.create_image(image_request.to_upstream(settings.image_model))
        if not response.ok:
            return _json(response.status_code, {
                "error": upstream_error_message(response.data, "Image generation failed"),
                "details": response.data,
            })

        inline = await client.inline_first_image(response.data)
        if not inline.ok:
            logger.info(f"Returning image URL without inline data ({inline.error})")

        logger.info("Image generated successfully")
        return _json(200, response.data)

    except Exception as e:
        logger.error(f"Error generating image: {e}")
        return _json(500, {"error": "Failed to generate image", "message": str(e)})


@router.api_route("/health", methods=ALL_METHODS)
async def health():
    """Health check endpoint (any method)."""
    return _json(200, {
        "status": "ok",
        "message": "Quote Card Editor API is running",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "environment": settings.environment,
    })
