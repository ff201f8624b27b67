"""
Pydantic schemas for the editable request draft.

A RequestSpec describes one outbound HTTP call: method, URL, an ordered
list of header rows, and an optional body.
"""

import uuid
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# HTTP methods supported by the explorer
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD"]

# Only these methods ever transmit a body
BODY_METHODS: tuple[str, ...] = ("POST", "PUT", "PATCH")


def new_header_id() -> str:
    """Generate a fresh identity for a header row."""
    return uuid.uuid4().hex


class HeaderItem(BaseModel):
    """
    One header row of a request draft.

    The id identifies the row independently of its position, so edits to
    one row never touch its neighbours.
    """
    id: str = Field(default_factory=new_header_id)
    key: str = ""
    value: str = ""
    enabled: bool = True

    @property
    def is_active(self) -> bool:
        """Whether this row is transmitted on dispatch."""
        return self.enabled and self.key.strip() != ""


class RequestSpec(BaseModel):
    """Schema for an editable draft of an outbound call."""
    url: str = ""
    method: HttpMethod = "GET"
    headers: list[HeaderItem] = []
    body: str | None = None

    model_config = ConfigDict(validate_assignment=True)

    @property
    def transmits_body(self) -> bool:
        """Whether the body is sent for this method."""
        return bool(self.body) and self.method in BODY_METHODS


def default_request_spec() -> RequestSpec:
    """Return the blank draft a new session starts from."""
    return RequestSpec(
        url="",
        method="GET",
        headers=[HeaderItem(key="Content-Type", value="application/json", enabled=True)],
        body=None,
    )
