"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from promptforge import __version__
from promptforge.api.health import router as health_router
from promptforge.api.middleware.logging import RequestLoggingMiddleware
from promptforge.api.middleware.request_id import RequestIDMiddleware
from promptforge.api.v1.router import v1_router
from promptforge.common.errors import register_error_handlers
from promptforge.common.logging import configure_logging
from promptforge.config import Settings, get_settings
from promptforge.core.media.store import MediaStore
from promptforge.providers.dispatcher import ProviderDispatcher
from promptforge.services.identity import LocalIdentityProvider
from promptforge.services.storage import KeyValueStore, create_store

logger = structlog.stdlib.get_logger()


def create_app(
    settings: Settings | None = None,
    *,
    store: KeyValueStore | None = None,
    dispatcher: ProviderDispatcher | None = None,
) -> FastAPI:
    """
    Application factory, called by Uvicorn.

    ``store`` and ``dispatcher`` override the resources the lifespan would
    otherwise build from settings; the app still closes them on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.logging.level, settings.logging.format)

        log = structlog.stdlib.get_logger()
        await log.ainfo(
            "promptforge.startup",
            version=__version__,
            env=settings.env,
            storage=settings.storage.backend.value,
        )

        app.state.settings = settings
        app.state.store = store if store is not None else create_store(settings)
        app.state.dispatcher = dispatcher if dispatcher is not None else ProviderDispatcher(
            settings, MediaStore(settings.video.media_store_capacity)
        )
        app.state.media_store = app.state.dispatcher.media_store
        app.state.identity = LocalIdentityProvider(app.state.store)

        try:
            yield
        finally:
            await app.state.dispatcher.aclose()
            app.state.media_store.clear()
            await app.state.store.close()
            await log.ainfo("promptforge.shutdown")

    app = FastAPI(
        title="PromptForge",
        description="Structured prompt assembly with multi-provider text, speech and video generation.",
        version=__version__,
        docs_url="/docs" if settings.env == "development" else None,
        redoc_url="/redoc" if settings.env == "development" else None,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    # Middleware (order matters; outermost first)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.env == "development" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(v1_router)
    app.include_router(health_router)

    return app
