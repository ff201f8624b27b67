"""
Pydantic schemas for dispatch outcomes.

Fields serialize with camelCase names (statusText, rawBody) so the
envelope matches what browser clients expect.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ResponseEnvelope(BaseModel):
    """
    Normalized outcome of one dispatch attempt.

    Exactly one of status or error is set once a dispatch completes.
    time is populated whenever the network call was attempted.
    """
    status: int | None = None
    status_text: str | None = None
    headers: dict[str, str] | None = None
    data: Any | None = None
    raw_body: str | None = None
    error: str | None = None
    size: int | None = None
    time: int | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @property
    def succeeded(self) -> bool:
        return self.status is not None


class ResponseSummary(BaseModel):
    """Status line kept alongside a history entry."""
    status: int | None = None
    status_text: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_envelope(cls, envelope: ResponseEnvelope) -> "ResponseSummary":
        return cls(status=envelope.status, status_text=envelope.status_text)
