"""
FastAPI dependencies resolving the per-application components.

The components are created in the application lifespan and kept on
app.state.
"""

from fastapi import Request

from .config import Settings
from .services.history_store import HistoryStore
from .services.session import SessionController


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_history_store(request: Request) -> HistoryStore:
    """
    Dependency function for FastAPI to get the history store.

    Usage:
        @router.get("/items")
        def get_items(store: HistoryStore = Depends(get_history_store)):
            ...
    """
    return request.app.state.history_store


def get_session(request: Request) -> SessionController:
    return request.app.state.session
