"""
Session controller driving one editable request draft.

A send runs Idle -> Sending -> (Succeeded | Failed) -> Idle. The envelope
is always published, whatever the outcome, and dispatches that came back
with a status are recorded in history. Loading a history entry copies it
back into the draft.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import APIException, SessionBusyError
from ..schemas.history import HistoryCreate, HistoryEntry
from ..schemas.request import HeaderItem, RequestSpec, default_request_spec
from ..schemas.response import ResponseEnvelope, ResponseSummary
from .dispatcher import dispatch
from .history_store import HistoryStore


log = logging.getLogger(__name__)

Dispatcher = Callable[..., Awaitable[ResponseEnvelope]]


class SessionState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class Notification:
    """User-visible message raised by a session action."""
    title: str
    description: str
    variant: str = "default"


class SessionController:
    """
    Orchestrates dispatch, display and history for a single draft.

    Attributes:
        draft: The editable request
        response: The envelope on display, or None
        state: Current position in the send cycle
        outcome: SUCCEEDED or FAILED for the last completed send
        focus: Which view is in front: "request", "response" or "history"
        notifications: Messages raised so far, oldest first
    """

    def __init__(
        self,
        history: HistoryStore,
        dispatcher: Dispatcher = dispatch,
        notifier: Callable[[Notification], None] | None = None,
        draft: RequestSpec | None = None,
    ):
        self.history_store = history
        self._dispatch = dispatcher
        self._notifier = notifier
        self.draft = draft if draft is not None else default_request_spec()
        self.response: ResponseEnvelope | None = None
        self.state = SessionState.IDLE
        self.outcome: SessionState | None = None
        self.focus = "request"
        self.notifications: list[Notification] = []
        self._cancel_event: asyncio.Event | None = None

    @property
    def is_busy(self) -> bool:
        return self.state is SessionState.SENDING

    def notify(self, title: str, description: str, variant: str = "default") -> None:
        notification = Notification(title=title, description=description, variant=variant)
        self.notifications.append(notification)
        if self._notifier is not None:
            self._notifier(notification)

    async def send(self) -> ResponseEnvelope:
        """
        Dispatch the current draft.

        Returns:
            The published envelope

        Raises:
            SessionBusyError: If a send is already in flight
        """
        if self.is_busy:
            raise SessionBusyError()

        self.state = SessionState.SENDING
        self.response = None
        self.focus = "response"
        request = self.draft.model_copy(deep=True)
        self._cancel_event = asyncio.Event()
        try:
            envelope = await self._dispatch(request, cancel_event=self._cancel_event)

            self.outcome = SessionState.SUCCEEDED if envelope.succeeded else SessionState.FAILED
            self.state = self.outcome
            self.response = envelope

            if envelope.error:
                self.notify("Request Error", envelope.error, variant="destructive")
            else:
                self.notify(
                    "Request Successful",
                    f"Status: {envelope.status} {envelope.status_text or ''}".rstrip(),
                )

            if envelope.succeeded:
                self._save_history(request, envelope)
            return envelope
        finally:
            self._cancel_event = None
            self.state = SessionState.IDLE

    def cancel(self) -> bool:
        """Abandon the in-flight send. Returns False when nothing is in flight."""
        if self._cancel_event is None or self._cancel_event.is_set():
            return False
        self._cancel_event.set()
        return True

    def _save_history(self, request: RequestSpec, envelope: ResponseEnvelope) -> None:
        data = HistoryCreate.from_request(request, ResponseSummary.from_envelope(envelope))
        try:
            self.history_store.append(data)
        except (APIException, SQLAlchemyError) as e:
            log.exception("Could not save %s %s to history", request.method, request.url)
            detail = e.detail if isinstance(e, APIException) else "Failed to reach history storage."
            self.notify(
                "History Save Error", f"Could not save to history: {detail}", variant="destructive"
            )

    def history(self) -> list[HistoryEntry]:
        return self.history_store.list()

    def load_history_item(self, entry: HistoryEntry) -> RequestSpec:
        """
        Copy a stored request into the draft.

        Header rows get new ids, the displayed response is cleared and the
        request view is brought to the front.
        """
        self.draft = entry.to_request()
        self.response = None
        self.focus = "request"
        self.notify("History Item Loaded", "Request details loaded into composer.")
        return self.draft

    # Draft editing

    def set_field(self, field: str, value: Any) -> RequestSpec:
        """Assign one RequestSpec field; the value is validated."""
        if field not in RequestSpec.model_fields:
            raise ValueError(f"Unknown request field: {field}")
        setattr(self.draft, field, value)
        return self.draft

    def add_header(self, key: str = "", value: str = "", enabled: bool = True) -> HeaderItem:
        header = HeaderItem(key=key, value=value, enabled=enabled)
        self.draft.headers.append(header)
        return header

    def update_header(self, header_id: str, **changes: Any) -> HeaderItem:
        """Edit one header row in place, keeping its id and position."""
        index = self._header_index(header_id)
        current = self.draft.headers[index]
        updated = HeaderItem.model_validate({**current.model_dump(), **changes, "id": current.id})
        self.draft.headers[index] = updated
        return updated

    def remove_header(self, header_id: str) -> None:
        del self.draft.headers[self._header_index(header_id)]

    def _header_index(self, header_id: str) -> int:
        for index, header in enumerate(self.draft.headers):
            if header.id == header_id:
                return index
        raise KeyError(f"No header row with id {header_id}")
