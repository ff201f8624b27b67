"""
Display helpers for rendering a ResponseEnvelope.
"""

import json

from ..schemas.response import ResponseEnvelope


_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def format_bytes(size: int, decimals: int = 2) -> str:
    """
    Render a byte count with a binary unit.

    Example:
        >>> format_bytes(1536)
        '1.5 KB'
    """
    if size <= 0:
        return "0 Bytes"
    decimals = max(decimals, 0)
    exponent = 0
    while exponent < len(_SIZE_UNITS) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = round(size / (1024 ** exponent), decimals)
    # "1.50" -> "1.5"
    text = f"{value:.{decimals}f}".rstrip("0").rstrip(".") if decimals else str(int(value))
    return f"{text} {_SIZE_UNITS[exponent]}"


def status_category(status: int | None) -> str:
    """Classify a status code for display."""
    if status is None:
        return "none"
    if 200 <= status < 300:
        return "success"
    if 300 <= status < 400:
        return "redirect"
    if 400 <= status < 500:
        return "client_error"
    if status >= 500:
        return "server_error"
    return "informational"


def pretty_body(envelope: ResponseEnvelope) -> str | None:
    """Return the body indented when it is JSON, otherwise as received."""
    raw = envelope.raw_body
    if not raw:
        return raw
    headers = envelope.headers or {}
    content_type = headers.get("content-type") or headers.get("Content-Type") or ""
    if "application/json" not in content_type.lower():
        return raw
    try:
        return json.dumps(json.loads(raw), indent=2)
    except json.JSONDecodeError:
        return raw
