"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .request import (
    HttpMethod,
    BODY_METHODS,
    HeaderItem,
    RequestSpec,
    default_request_spec,
)

from .response import (
    ResponseEnvelope,
    ResponseSummary,
)

from .history import (
    HistoryCreate,
    HistoryEntry,
    HistorySaved,
)

from .session import (
    NotificationResponse,
    SessionView,
    CancelResult,
)

__all__ = [
    # Request schemas
    "HttpMethod",
    "BODY_METHODS",
    "HeaderItem",
    "RequestSpec",
    "default_request_spec",
    # Response schemas
    "ResponseEnvelope",
    "ResponseSummary",
    # History schemas
    "HistoryCreate",
    "HistoryEntry",
    "HistorySaved",
    # Session schemas
    "NotificationResponse",
    "SessionView",
    "CancelResult",
]
