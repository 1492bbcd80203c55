"""Templates API - save, list, apply and delete editor snapshots."""

from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from quotecard.exceptions import TemplateExistsError, TemplateNotFoundError
from quotecard.models.template import (
    Template,
    TemplateImportRequest,
    TemplateListResponse,
    TemplateSaveRequest,
    TemplateSettings,
    TemplateSummary,
)
from quotecard.services.editor_session import EditorSession
from quotecard.services.template_store import TemplateStore

router = APIRouter(prefix="/templates", tags=["templates"])

_template_store: Optional[TemplateStore] = None
_session: Optional[EditorSession] = None


def set_template_store(store: TemplateStore) -> None:
    """Set the template store instance."""
    global _template_store
    _template_store = store


def set_editor_session(session: EditorSession) -> None:
    """Set the editor session templates are captured from and applied to."""
    global _session
    _session = session


def _get_store() -> TemplateStore:
    if _template_store is None:
        raise HTTPException(status_code=503, detail="Template store not initialized")
    return _template_store


def _get_session() -> EditorSession:
    if _session is None:
        raise HTTPException(status_code=503, detail="Editor session not initialized")
    return _session


def _summary(template: Template) -> TemplateSummary:
    return TemplateSummary(
        name=template.name,
        created_at=template.created_at,
        has_background_image=bool(template.settings.background.data_url),
    )


def _save(name: str, settings: TemplateSettings, overwrite: bool) -> Template:
    try:
        return _get_store().save(name, settings, overwrite=overwrite)
    except TemplateExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("", response_model=TemplateListResponse)
async def list_templates():
    """List saved templates."""
    templates = [_summary(t) for t in _get_store().list()]
    return TemplateListResponse(templates=templates, count=len(templates))


@router.get("/{name}", response_model=Template)
async def get_template(name: str):
    """Get a template with its full settings."""
    try:
        return _get_store().get(name)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=Template, status_code=201)
async def save_template(request: TemplateSaveRequest):
    """Save a template.

    Without ``settings`` the current editor state is captured. An existing
    name is a 409 unless ``overwrite`` is set.
    """
    settings = request.settings or _get_session().snapshot()
    return _save(request.name, settings, request.overwrite)


@router.post("/import", response_model=Template, status_code=201)
async def import_template(request: TemplateImportRequest):
    """Import a template saved by the browser editor (flat camelCase record)."""
    try:
        settings = TemplateSettings.from_editor_export(request.settings)
    except (ValidationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    name = request.name or str(request.settings.get("name") or "")
    return _save(name, settings, request.overwrite)


@router.post("/{name}/apply")
async def apply_template(name: str):
    """Restore a template into the editor session."""
    try:
        template = _get_store().get(name)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    session = _get_session()
    session.apply_template(template.settings)
    return {
        "message": f'Template "{name}" applied',
        "has_background_image": session.has_image,
    }


@router.delete("/{name}")
async def delete_template(name: str):
    """Delete a template."""
    try:
        _get_store().delete(name)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": f'Template "{name}" deleted'}
