# Services package

from .dispatcher import dispatch, normalize_url, build_headers, build_body
from .formatting import format_bytes, pretty_body, status_category
from .history_store import (
    HistoryStore,
    InMemoryHistoryStore,
    SqlHistoryStore,
    create_history_store,
)
from .session import Notification, SessionController, SessionState

__all__ = [
    "dispatch",
    "normalize_url",
    "build_headers",
    "build_body",
    "format_bytes",
    "pretty_body",
    "status_category",
    "HistoryStore",
    "InMemoryHistoryStore",
    "SqlHistoryStore",
    "create_history_store",
    "Notification",
    "SessionController",
    "SessionState",
]
