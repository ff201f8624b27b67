"""
API Explorer - FastAPI Application Entry Point

Compose HTTP requests, send them, inspect normalized responses, and keep
a bounded history of what was sent.
"""

import logging
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, load_settings
from .exceptions import register_exception_handlers
from .logging_config import configure_logging
from .routers import dispatch, history, session
from .services.dispatcher import dispatch as dispatch_request
from .services.history_store import create_history_store
from .services.session import SessionController


log = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to run with; read from the environment if None

    Returns:
        The configured FastAPI application
    """
    settings = settings if settings is not None else load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup and shutdown events."""
        configure_logging(settings.log_level)
        store = create_history_store(settings)
        app.state.history_store = store
        app.state.session = SessionController(
            store, dispatcher=partial(dispatch_request, timeout=settings.dispatch_timeout)
        )
        log.info("API Explorer started")
        yield
        # Shutdown: abandon any send still in flight
        app.state.session.cancel()

    app = FastAPI(
        title="API Explorer",
        description="Compose, send and replay HTTP requests",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register global exception handlers
    register_exception_handlers(app)

    @app.get("/")
    async def root():
        """Root endpoint returning API information."""
        return {
            "name": "API Explorer",
            "version": "1.0.0",
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    # Register routers
    app.include_router(dispatch.router)
    app.include_router(history.router)
    app.include_router(session.router)

    return app


app = create_app()
