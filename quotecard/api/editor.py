"""Editor session API - style, content, pointer gestures and export."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import Response
from loguru import logger
from pydantic import ValidationError

from quotecard.api.cards import layout_response
from quotecard.exceptions import GenerationError, GenerationInProgressError, ImageDecodeError
from quotecard.models.editor import ContentStrings, PreviewBackground, StyleParameters
from quotecard.models.session import (
    BackgroundGenerateRequest,
    BackgroundRequest,
    BackgroundSettingsUpdate,
    BackgroundState,
    ContentUpdate,
    CursorResponse,
    EditorStateResponse,
    GeneratedBackgroundResponse,
    GeneratedQuoteResponse,
    PointerRequest,
    PointerResponse,
    ResetRequest,
    background_state,
)
from quotecard.services.editor_session import EditorSession

router = APIRouter(prefix="/editor", tags=["editor"])

_session: Optional[EditorSession] = None


def set_editor_session(session: EditorSession) -> None:
    """Set the editor session instance."""
    global _session
    _session = session


def _get_session() -> EditorSession:
    if _session is None:
        raise HTTPException(status_code=503, detail="Editor session not initialized")
    return _session


def _background(session: EditorSession) -> BackgroundState:
    size = session.state.bitmap.size if session.has_image else None
    return background_state(session.state.background, size)


@router.get("/state", response_model=EditorStateResponse)
async def get_state():
    """Get the full editor state with the current layout."""
    session = _get_session()
    s = session.state
    return EditorStateResponse(
        style=s.style,
        content=s.content,
        offsets=s.offsets,
        background=_background(session),
        preview_bg=s.preview_bg,
        drag_mode=s.drag.mode,
        drag_target=s.drag.target,
        generating=sorted(k for k in ("quote", "image") if session.is_generating(k)),
        layout=layout_response(session.layout()),
    )


@router.put("/style", response_model=StyleParameters)
async def update_style(changes: Dict[str, Any] = Body(...)):
    """Change style fields. Numbers are clamped; bad colors or weights are 422.

    ``preview_bg`` ("light" | "dark") is accepted here as well.
    """
    session = _get_session()
    changes = dict(changes)
    preview = changes.pop("preview_bg", None)

    unknown = set(changes) - set(StyleParameters.model_fields)
    if unknown:
        raise HTTPException(status_code=422, detail=f"Unknown style fields: {', '.join(sorted(unknown))}")

    try:
        if preview is not None:
            preview = PreviewBackground(preview)
        style = session.update_style(**changes)
    except (ValidationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    if preview is not None:
        session.set_preview_bg(preview)
    return style


@router.put("/content", response_model=ContentStrings)
async def update_content(request: ContentUpdate):
    """Change quote or author text."""
    return _get_session().update_content(**request.model_dump())


@router.post("/pointer", response_model=PointerResponse)
async def pointer(request: PointerRequest):
    """Feed a pointer or touch event (canvas pixel coordinates)."""
    session = _get_session()
    changed = session.handle_pointer(request.event, request.x, request.y)
    drag = session.state.drag
    return PointerResponse(
        changed=changed,
        drag_mode=drag.mode,
        target=drag.target,
        cursor=session.cursor_at(request.x, request.y),
    )


@router.get("/cursor", response_model=CursorResponse)
async def cursor(x: float, y: float):
    """Cursor to show with the pointer at (x, y)."""
    return CursorResponse(cursor=_get_session().cursor_at(x, y))


@router.post("/reset")
async def reset(request: ResetRequest):
    """Reset styles, size or everything."""
    session = _get_session()
    session.reset(request.scope)
    return {"message": f"Reset {request.scope.value}", "style": session.state.style}


@router.post("/background", response_model=BackgroundState)
async def set_background(request: BackgroundRequest):
    """Load a background image from a data URL."""
    session = _get_session()
    try:
        session.apply_background_data_url(request.data_url)
    except ImageDecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _background(session)


@router.delete("/background", response_model=BackgroundState)
async def clear_background():
    """Remove the background image."""
    session = _get_session()
    session.clear_background()
    return _background(session)


@router.post("/background/reset-position", response_model=BackgroundState)
async def reset_image_position():
    """Re-center the background image."""
    session = _get_session()
    session.reset_image_position()
    return _background(session)


@router.put("/background/settings", response_model=BackgroundState)
async def update_background_settings(request: BackgroundSettingsUpdate):
    """Change zoom, rotation, opacity or pan."""
    session = _get_session()
    if not session.has_image:
        raise HTTPException(status_code=409, detail="No background image loaded")
    try:
        session.update_background_settings(**request.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _background(session)


@router.get("/render.png")
async def render_png():
    """Render the current card."""
    return Response(content=_get_session().render_png(), media_type="image/png")


@router.get("/export")
async def export():
    """Download the current card as a PNG named after quote 1."""
    filename, png = _get_session().export()
    logger.info(f"Exported card as {filename}")
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/generate-quote", response_model=GeneratedQuoteResponse)
async def generate_quote():
    """Generate a quote into quote 1."""
    session = _get_session()
    try:
        quote = await session.generate_quote()
    except GenerationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except GenerationError as e:
        raise HTTPException(status_code=e.status_code, detail=f"Could not generate quote. {e.message}")
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return GeneratedQuoteResponse(quote=quote)


@router.post("/generate-background", response_model=GeneratedBackgroundResponse)
async def generate_background(request: Optional[BackgroundGenerateRequest] = None):
    """Generate a background image and apply it to the card."""
    session = _get_session()
    seed = request.seed_quote if request else None
    try:
        generated = await session.generate_background(seed)
    except GenerationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except GenerationError as e:
        raise HTTPException(status_code=e.status_code, detail=f"Could not generate the image. {e.message}")
    except ImageDecodeError as e:
        raise HTTPException(status_code=502, detail=f"Generated image could not be decoded: {e}")
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return GeneratedBackgroundResponse(prompt=generated.prompt, background=_background(session))
