"""
Pydantic schemas for the session view.
"""

from typing import Literal

from pydantic import BaseModel

from .request import RequestSpec
from .response import ResponseEnvelope


class NotificationResponse(BaseModel):
    """Schema for a user-visible notification."""
    title: str
    description: str
    variant: str = "default"


class SessionView(BaseModel):
    """Schema for the current session: draft, displayed response and state."""
    draft: RequestSpec
    response: ResponseEnvelope | None = None
    state: Literal["idle", "sending", "succeeded", "failed"]
    outcome: Literal["succeeded", "failed"] | None = None
    focus: Literal["request", "response", "history"]
    notifications: list[NotificationResponse] = []


class CancelResult(BaseModel):
    """Schema for the cancel endpoint."""
    cancelled: bool
