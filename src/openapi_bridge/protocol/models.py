"""Protocol models — JSON-RPC 2.0 envelope and MCP request payloads.

Covers the subset of the Model Context Protocol a tool server needs:
the ``initialize`` handshake, ``tools/list`` and ``tools/call``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request, or a notification when ``id`` is absent."""

    jsonrpc: str = "2.0"
    method: str
    id: int | str | None = None
    params: dict[str, Any] = {}

    @property
    def is_notification(self) -> bool:
        return self.id is None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @classmethod
    def failure(
        cls,
        request_id: int | str | None,
        code: int,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Serialize with exactly one of ``result`` / ``error`` and an explicit ``id``."""
        message: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            message["error"] = self.error.model_dump(exclude_none=True)
        else:
            message["result"] = self.result if self.result is not None else {}
        return message


# ---------------------------------------------------------------------------
# MCP payloads
# ---------------------------------------------------------------------------


class ServerInfo(BaseModel):
    """The ``serverInfo`` block of the ``initialize`` result."""

    name: str
    version: str


class CallToolParams(BaseModel):
    """Parameters of a ``tools/call`` request."""

    name: str
    arguments: dict[str, Any] | None = None


class CancelledParams(BaseModel):
    """Parameters of a ``notifications/cancelled`` notification."""

    model_config = ConfigDict(populate_by_name=True)

    request_id: int | str = Field(alias="requestId")
    reason: str | None = None
