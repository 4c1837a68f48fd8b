"""
App factory.

    uvicorn oriento.main:create_app --factory

Everything with app lifetime (engine, session factory, chat-session registry,
provider client) is built here and stored on `app.state`, so separate app
instances (e.g. in tests) share nothing.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from oriento.api.v1 import api_router
from oriento.api.v1.error_handlers import register_exception_handlers
from oriento.config.settings import Settings, get_settings
from oriento.core.logging import RequestIDMiddleware, setup_logging, stop_queue_logging
from oriento.database import Base, build_engine, build_session_maker
from oriento.prompts.oriento import build_chat_config
from oriento.providers.base import ChatProvider
from oriento.services.chat_sessions import ChatSessionRegistry
from oriento.utils.logging import get_project_version

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger.info(
        "app.startup",
        extra={"env": settings.ENV, "model_name": settings.GEMINI_MODEL},
    )

    if settings.DB_AUTO_CREATE:
        async with app.state.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("app.db.tables_created")

    try:
        yield
    finally:
        await app.state.engine.dispose()
        logger.info("app.shutdown", extra={"chat_sessions": len(app.state.chat_sessions)})
        stop_queue_logging()


def create_app(settings: Settings | None = None, provider: ChatProvider | None = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        settings: defaults to `get_settings()`.
        provider: defaults to a Gemini provider built from settings.
    """
    settings = settings or get_settings()

    if provider is None:
        from oriento.providers.gemini import GeminiChatProvider
        provider = GeminiChatProvider.from_settings(settings)

    app = FastAPI(title="Oriento API", version=get_project_version(), lifespan=lifespan)

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)
    app.state.chat_sessions = ChatSessionRegistry()
    app.state.chat_provider = provider
    app.state.model_name = settings.GEMINI_MODEL
    app.state.chat_config = build_chat_config(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    # added last so it wraps CORS and sees every request first
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    return app
