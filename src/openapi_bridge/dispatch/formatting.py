"""Response formatting — status legend, response-type hint and raw body.

The body is appended verbatim: JSON responses are classified for the hint
but never re-serialized, so nothing the backend sent is lost.
"""

from __future__ import annotations

import json
from typing import Any

_SUCCESS_LEGEND = {
    200: "OK - Request succeeded",
    201: "Created - Resource successfully created",
    202: "Accepted - Request accepted for processing",
    204: "No Content - Request succeeded but no content returned",
}

_ERROR_LEGEND = {
    400: "Bad Request - The request was invalid",
    401: "Unauthorized - Authentication is required",
    403: "Forbidden - You don't have permission",
    404: "Not Found - The requested resource was not found",
    409: "Conflict - Request conflicts with current state",
    429: "Too Many Requests - Rate limit exceeded",
    500: "Internal Server Error - Something went wrong on the server",
    502: "Bad Gateway - Invalid response from upstream server",
    503: "Service Unavailable - Server temporarily unavailable",
}

_LIST_FIELDS = {"items", "results", "data"}
_ERROR_FIELDS = {"error", "errors", "message"}


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def status_prefix(status_code: int) -> str:
    """``SUCCESS (200)`` or ``ERROR (404)``."""
    label = "SUCCESS" if is_success(status_code) else "ERROR"
    return f"{label} ({status_code})"


def status_legend(status_code: int) -> str:
    """Return the legend line, e.g. ``ERROR (404): Not Found - ...``."""
    if is_success(status_code):
        meaning = _SUCCESS_LEGEND.get(status_code, "Request succeeded")
    elif status_code in _ERROR_LEGEND:
        meaning = _ERROR_LEGEND[status_code]
    elif 400 <= status_code < 500:
        meaning = "Client error"
    elif status_code >= 500:
        meaning = "Server error"
    else:
        meaning = "Unexpected status"
    return f"{status_prefix(status_code)}: {meaning}"


def response_type_hint(data: Any) -> str | None:
    """Classify a decoded JSON body; ``None`` for scalars."""
    if isinstance(data, list):
        return f"Array with {len(data)} elements"
    if not isinstance(data, dict):
        return None
    if not data:
        return "Empty object"

    has_id = has_list = has_error = False
    for key, value in data.items():
        lowered = str(key).lower()
        if lowered == "id" or str(key).endswith("Id"):
            has_id = True
        elif lowered in _LIST_FIELDS or isinstance(value, list):
            has_list = True
        elif lowered in _ERROR_FIELDS:
            has_error = True

    if has_list:
        return "Collection of resources"
    if has_id:
        return "Single resource"
    if has_error:
        return "Error details"
    return "Object"


def format_response(body: str, status_code: int) -> str:
    """Render the primary text content for a backend response.

    JSON bodies get the legend line, a ``RESPONSE TYPE`` hint and the raw
    body, separated by blank lines. Anything else is prefixed with the
    status only.
    """
    try:
        data = json.loads(body)
    except ValueError:
        if not body:
            return status_legend(status_code)
        return f"{status_prefix(status_code)}: {body}"

    sections = [status_legend(status_code)]
    hint = response_type_hint(data)
    if hint is not None:
        sections.append(f"RESPONSE TYPE: {hint}")
    sections.append(body)
    return "\n\n".join(sections)
