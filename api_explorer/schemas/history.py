"""
Pydantic schemas for request history.

Defines the append payload, the stored entry, and the append result.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .request import HeaderItem, HttpMethod, RequestSpec
from .response import ResponseSummary


class HistoryCreate(BaseModel):
    """
    Schema for appending to history.

    url and method are optional here so that the store, not the schema,
    reports missing required fields.
    """
    url: str | None = None
    method: HttpMethod | None = None
    headers: list[HeaderItem] = []
    body: str | None = None
    response_summary: ResponseSummary | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_request(
        cls, request: RequestSpec, summary: ResponseSummary | None = None
    ) -> "HistoryCreate":
        return cls(
            url=request.url,
            method=request.method,
            headers=[h.model_copy() for h in request.headers],
            body=request.body,
            response_summary=summary,
        )


class HistoryEntry(BaseModel):
    """Schema for a stored history record with its assigned id and timestamp."""
    id: str
    timestamp: int
    url: str
    method: HttpMethod
    headers: list[HeaderItem] = []
    body: str | None = None
    response_summary: ResponseSummary | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_request(self) -> RequestSpec:
        """Copy the stored request fields into a fresh draft with new header ids."""
        return RequestSpec(
            url=self.url,
            method=self.method,
            headers=[
                HeaderItem(key=h.key, value=h.value, enabled=h.enabled)
                for h in self.headers
            ],
            body=self.body,
        )


class HistorySaved(BaseModel):
    """Schema for the append endpoint's success body."""
    message: str
    item: HistoryEntry
