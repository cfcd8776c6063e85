"""Shared error types for the bridge.

Startup errors (:class:`ParseError`, :class:`ConfigurationError`) are fatal.
Every other error is raised and caught within a single tool call and turned
into a :class:`~openapi_bridge.models.ToolResult` with ``is_error=True``.
"""

from __future__ import annotations

from typing import Literal


class BridgeError(Exception):
    """Base error for all bridge failures."""


class ParseError(BridgeError):
    """The API description is malformed or structurally incomplete."""


class ConfigurationError(BridgeError):
    """The bridge configuration is invalid."""


class CompileError(BridgeError):
    """Call arguments could not be compiled into an HTTP request."""


class MissingPathParameterError(CompileError):
    """A ``{placeholder}`` in the path template has no argument."""

    def __init__(self, name: str, path: str) -> None:
        self.name = name
        self.path = path
        super().__init__(f"Missing required path parameter '{name}' for {path}")


class InvalidURLError(CompileError):
    """The resolved URL is not a usable absolute http(s) URL."""

    def __init__(self, url: str, detail: str = "") -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Invalid URL format: {url}" + (f" - {detail}" if detail else ""))


class InvalidHeaderError(CompileError):
    """A header name or value cannot be sent on the wire (non-ASCII)."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid header '{name}': names and values must be ASCII")


TransportErrorKind = Literal["connect", "dns", "timeout", "transport"]


class TransportError(BridgeError):
    """The backend could not be reached or the exchange failed mid-flight."""

    def __init__(self, kind: TransportErrorKind, url: str, detail: str = "") -> None:
        self.kind = kind
        self.url = url
        self.detail = detail
        super().__init__(f"{kind} error for {url}" + (f": {detail}" if detail else ""))


class BackendError(BridgeError):
    """The backend answered with a status outside ``[200, 300)``."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Backend returned HTTP {status_code}")


class ToolNotFoundError(BridgeError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")
