"""API routers for Quote Card Editor."""

from .generate import router as generate_router, set_openai_client
from .cards import router as cards_router, set_card_renderer
from .editor import router as editor_router, set_editor_session
from .templates import (
    router as templates_router,
    set_template_store,
    set_editor_session as set_templates_editor_session,
)
from .history import router as history_router, set_quote_history

__all__ = [
    # Routers
    "generate_router",
    "cards_router",
    "editor_router",
    "templates_router",
    "history_router",
    # Setup functions
    "set_openai_client",
    "set_card_renderer",
    "set_editor_session",
    "set_template_store",
    "set_templates_editor_session",
    "set_quote_history",
]
