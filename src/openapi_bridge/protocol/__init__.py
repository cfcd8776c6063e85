"""Protocol runtime adapter — MCP over stdio JSON-RPC."""

from openapi_bridge.protocol.models import JsonRpcError, JsonRpcRequest, JsonRpcResponse, ServerInfo
from openapi_bridge.protocol.server import StdioServer

__all__ = [
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "ServerInfo",
    "StdioServer",
]
