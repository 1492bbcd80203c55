"""Stateful services: editor session, templates and quote history."""

from .editor_session import EditorSession
from .quote_history import QuoteHistory
from .template_store import TemplateStore

__all__ = [
    "EditorSession",
    "QuoteHistory",
    "TemplateStore",
]
