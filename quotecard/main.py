"""Quote Card Editor - FastAPI main application.

Card rendering, drag hit testing, templates, quote history and the
generation proxy endpoints.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from quotecard import __version__
from quotecard.config import settings
from quotecard.api import (
    cards_router,
    editor_router,
    generate_router,
    history_router,
    templates_router,
    set_card_renderer,
    set_editor_session,
    set_openai_client,
    set_quote_history,
    set_template_store,
    set_templates_editor_session,
)
from quotecard.services.editor_session import EditorSession
from quotecard.services.quote_history import QuoteHistory
from quotecard.services.template_store import TemplateStore
from quotecard.workers.card_renderer import CardRenderer
from quotecard.workers.generators import BackgroundGenerator, QuoteGenerator
from quotecard.workers.openai_proxy import OpenAIClient


# Routes that answer CORS (including preflights) with their own fixed headers
PROXY_PATH_PREFIX = "/api/"


class EditorCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that leaves the generation proxy routes alone."""

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["path"].startswith(PROXY_PATH_PREFIX):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting Quote Card Editor v{__version__}")
    logger.info(f"Data directory: {settings.data_dir}")

    if not settings.has_api_key:
        logger.warning("OPENAI_API_KEY not set - generation endpoints will answer 500")

    client = OpenAIClient()
    history = QuoteHistory()
    store = TemplateStore()
    renderer = CardRenderer(fonts_dir=settings.fonts_dir)
    session = EditorSession(
        renderer=renderer,
        quote_generator=QuoteGenerator(client, history),
        background_generator=BackgroundGenerator(client),
    )

    set_openai_client(client)
    set_card_renderer(renderer)
    set_editor_session(session)
    set_templates_editor_session(session)
    set_template_store(store)
    set_quote_history(history)

    logger.info(f"Initialized stores: {len(store)} templates, {len(history)} history quotes")

    yield

    await client.close()
    logger.info("Shutting down Quote Card Editor")


app = FastAPI(
    title="Quote Card Editor",
    description="Quote card rendering, templates and generation proxies",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for the browser editor
app.add_middleware(
    EditorCORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(generate_router)
app.include_router(cards_router)
app.include_router(editor_router)
app.include_router(templates_router)
app.include_router(history_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Quote Card Editor",
        "version": __version__,
        "status": "running",
        "features": ["render", "hit_test", "templates", "quote_history", "generation_proxy"],
    }


def run():
    """Serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("quotecard.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
