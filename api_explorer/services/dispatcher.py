"""
Request dispatch service for sending one outbound HTTP request.

Turns a RequestSpec into an httpx request, and normalizes the outcome
(status, headers, body, timing, size, or the failure message) into a
ResponseEnvelope. Failures are reported inside the envelope, never raised.
"""

import asyncio
import json
import logging
import re
import time
from typing import Any

import httpx

from ..config import DEFAULT_DISPATCH_TIMEOUT
from ..schemas.request import HeaderItem, RequestSpec
from ..schemas.response import ResponseEnvelope


log = logging.getLogger(__name__)

URL_REQUIRED_MESSAGE = "URL is required."
CANCELLED_MESSAGE = "Request cancelled."
UNKNOWN_NETWORK_ERROR = "An unknown network error occurred."

_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


class InvalidRequestURL(ValueError):
    """Raised by normalize_url when the URL cannot be used."""


class _DispatchCancelled(Exception):
    pass


def normalize_url(url: str) -> str:
    """
    Ensure the URL carries an http(s) scheme and is well formed.

    Args:
        url: URL as typed into the draft

    Returns:
        The URL to transmit; https:// is prepended when no scheme is present

    Raises:
        InvalidRequestURL: If the URL cannot be parsed or has no host
    """
    if not _SCHEME_PATTERN.match(url):
        url = "https://" + url

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise InvalidRequestURL(
            f"Invalid URL: {e}. Ensure it includes a protocol (e.g., https://)."
        ) from e

    if not parsed.host:
        raise InvalidRequestURL(
            "Invalid URL: missing host. Ensure it includes a protocol (e.g., https://)."
        )
    return url


def build_headers(headers: list[HeaderItem]) -> list[tuple[str, str]]:
    """
    Select the header rows to transmit.

    Disabled rows and rows with a blank key are dropped. Order is kept and
    duplicate keys are all sent.
    """
    return [(h.key.strip(), h.value) for h in headers if h.is_active]


def build_body(spec: RequestSpec) -> str | None:
    """Return the body to transmit, or None for methods that carry no body."""
    return spec.body if spec.transmits_body else None


def parse_content_length(value: str | None) -> int:
    """Read a content-length header; absent or malformed values count as 0."""
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0


def parse_body(raw_body: str, content_type: str | None) -> Any:
    """
    Decode a JSON body when the content type says so.

    A body that fails to parse is returned as the raw text.
    """
    if content_type and "application/json" in content_type.lower():
        try:
            return json.loads(raw_body)
        except json.JSONDecodeError:
            return raw_body
    return raw_body


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


async def _await_unless_cancelled(coro, cancel_event: asyncio.Event) -> httpx.Response:
    request_task = asyncio.ensure_future(coro)
    cancel_task = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait(
            {request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        cancel_task.cancel()
        if not request_task.done():
            request_task.cancel()

    if request_task in done:
        return request_task.result()

    try:
        await request_task
    except asyncio.CancelledError:
        pass
    raise _DispatchCancelled()


async def dispatch(
    spec: RequestSpec,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_DISPATCH_TIMEOUT,
    cancel_event: asyncio.Event | None = None,
) -> ResponseEnvelope:
    """
    Send the request described by a draft and return its outcome.

    Args:
        spec: The request draft to send
        client: httpx client to send with; a short-lived one is created if None
        timeout: Request timeout in seconds, used when no client is given
        cancel_event: Setting this event abandons the in-flight request

    Returns:
        ResponseEnvelope with status/headers/body on success, or error set.
        time is populated whenever the network call was attempted.
    """
    if not spec.url.strip():
        return ResponseEnvelope(error=URL_REQUIRED_MESSAGE)

    try:
        url = normalize_url(spec.url.strip())
    except InvalidRequestURL as e:
        log.info("Rejected %s %r before sending: %s", spec.method, spec.url, e)
        return ResponseEnvelope(error=str(e))

    headers = build_headers(spec.headers)
    content = build_body(spec)

    log.info("Dispatching %s %s", spec.method, url)
    start = time.perf_counter()
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
                response = await _send(owned, spec.method, url, headers, content, cancel_event)
        else:
            response = await _send(client, spec.method, url, headers, content, cancel_event)
    except _DispatchCancelled:
        elapsed = _elapsed_ms(start)
        log.info("Cancelled %s %s after %d ms", spec.method, url, elapsed)
        return ResponseEnvelope(error=CANCELLED_MESSAGE, time=elapsed)
    except httpx.HTTPError as e:
        elapsed = _elapsed_ms(start)
        log.warning("%s %s failed after %d ms: %s", spec.method, url, elapsed, e)
        return ResponseEnvelope(error=str(e) or UNKNOWN_NETWORK_ERROR, time=elapsed)
    except Exception as e:
        # Request construction failures, e.g. header text that is not ASCII
        elapsed = _elapsed_ms(start)
        log.warning("%s %s could not be sent: %r", spec.method, url, e)
        return ResponseEnvelope(error=str(e) or UNKNOWN_NETWORK_ERROR, time=elapsed)
    elapsed = _elapsed_ms(start)

    response_headers = {key: value for key, value in response.headers.multi_items()}
    raw_body = response.text

    log.info("%s %s -> %d in %d ms", spec.method, url, response.status_code, elapsed)
    return ResponseEnvelope(
        status=response.status_code,
        status_text=response.reason_phrase,
        headers=response_headers,
        data=parse_body(raw_body, response.headers.get("content-type")),
        raw_body=raw_body,
        size=parse_content_length(response.headers.get("content-length")),
        time=elapsed,
    )


async def _send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    headers: list[tuple[str, str]],
    content: str | None,
    cancel_event: asyncio.Event | None,
) -> httpx.Response:
    request = client.request(method=method, url=url, headers=headers, content=content)
    if cancel_event is None:
        return await request
    return await _await_unless_cancelled(request, cancel_event)
