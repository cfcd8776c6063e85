"""StdioServer — serve a ToolRegistry over newline-delimited JSON-RPC.

Each ``tools/call`` runs in its own task so a slow backend never blocks
``ping`` or other calls; ``notifications/cancelled`` cancels that task.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import ValidationError

from openapi_bridge.protocol.models import (
    DEFAULT_PROTOCOL_VERSION,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    CallToolParams,
    CancelledParams,
    JsonRpcRequest,
    JsonRpcResponse,
    ServerInfo,
)

if TYPE_CHECKING:
    from openapi_bridge.registry import ToolRegistry

logger = logging.getLogger(__name__)

_STREAM_LIMIT = 16 * 1024 * 1024


class LineReader(Protocol):
    async def readline(self) -> bytes: ...


class LineWriter(Protocol):
    def write(self, data: bytes) -> None: ...
    async def drain(self) -> None: ...


class StdioServer:
    """JSON-RPC server for one client over a pair of byte streams.

    Usage::

        registry = create_registry("petstore.yaml", BridgeConfig.from_env())
        await StdioServer(registry).serve()
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        reader: LineReader | None = None,
        writer: LineWriter | None = None,
        server_info: ServerInfo | None = None,
    ) -> None:
        self._registry = registry
        self._reader = reader
        self._writer = writer
        index = registry.index
        self._info = server_info or ServerInfo(name=index.title, version=index.version or "0.0.0")
        self._write_lock = asyncio.Lock()
        self._in_flight: dict[int | str, asyncio.Task[None]] = {}

    async def serve(self) -> None:
        """Read messages until end of input, then wait for in-flight calls."""
        if self._reader is None or self._writer is None:
            self._reader, self._writer = await _connect_stdio()
        logger.info("Serving %d tools over stdio", len(self._registry.list_tools()))

        while True:
            line = await self._reader.readline()
            if not line:
                break
            if line.strip():
                await self.handle_line(line)

        pending = list(self._in_flight.values())
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info("Input closed; server stopped")

    async def handle_line(self, line: bytes | str) -> None:
        """Decode one line and handle the message it carries."""
        try:
            message = json.loads(line)
        except ValueError as exc:
            await self._send(JsonRpcResponse.failure(None, PARSE_ERROR, f"Parse error: {exc}"))
            return
        if not isinstance(message, dict):
            await self._send(JsonRpcResponse.failure(None, INVALID_REQUEST, "Invalid request"))
            return
        if "method" not in message:
            # A response to a server-initiated request; none are issued.
            logger.debug("Ignoring message without method: %s", message)
            return
        try:
            request = JsonRpcRequest.model_validate(message)
        except ValidationError as exc:
            raw_id = message.get("id")
            request_id = raw_id if isinstance(raw_id, (int, str)) else None
            await self._send(
                JsonRpcResponse.failure(request_id, INVALID_REQUEST, "Invalid request", str(exc))
            )
            return
        await self.handle_request(request)

    async def handle_request(self, request: JsonRpcRequest) -> None:
        """Route *request* to its handler."""
        logger.debug("Received %s (id=%s)", request.method, request.id)
        method = request.method

        if method == "initialize":
            await self._reply(request, self._initialize_result(request.params))
        elif method == "ping":
            await self._reply(request, {})
        elif method == "tools/list":
            tools = [tool.to_mcp() for tool in self._registry.list_tools()]
            await self._reply(request, {"tools": tools})
        elif method == "tools/call":
            await self._start_call(request)
        elif method == "notifications/cancelled":
            self._cancel(request.params)
        elif method.startswith("notifications/"):
            logger.debug("Notification %s", method)
        elif not request.is_notification:
            await self._send(
                JsonRpcResponse.failure(request.id, METHOD_NOT_FOUND, f"Method not found: {method}")
            )

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _initialize_result(self, params: dict[str, Any]) -> dict[str, Any]:
        capabilities: dict[str, Any] = {}
        if self._registry.config.tools_advertised:
            capabilities["tools"] = {"listChanged": False}
        return {
            "protocolVersion": params.get("protocolVersion") or DEFAULT_PROTOCOL_VERSION,
            "capabilities": capabilities,
            "serverInfo": self._info.model_dump(),
        }

    async def _start_call(self, request: JsonRpcRequest) -> None:
        try:
            params = CallToolParams.model_validate(request.params)
        except ValidationError as exc:
            await self._send(
                JsonRpcResponse.failure(request.id, INVALID_PARAMS, "Invalid params", str(exc))
            )
            return
        task = asyncio.create_task(self._run_call(request.id, params))
        if request.id is not None:
            request_id = request.id
            self._in_flight[request_id] = task
            task.add_done_callback(lambda _: self._in_flight.pop(request_id, None))

    async def _run_call(self, request_id: int | str | None, params: CallToolParams) -> None:
        try:
            result = await self._registry.call_tool(params.name, params.arguments)
        except asyncio.CancelledError:
            logger.info("Call %s (id=%s) cancelled", params.name, request_id)
            raise
        except Exception as exc:
            logger.exception("Unexpected failure in %s", params.name)
            if request_id is not None:
                await self._send(JsonRpcResponse.failure(request_id, INTERNAL_ERROR, str(exc)))
            return
        if request_id is not None:
            await self._send(JsonRpcResponse(id=request_id, result=result.to_mcp()))

    def _cancel(self, params: dict[str, Any]) -> None:
        try:
            cancelled = CancelledParams.model_validate(params)
        except ValidationError:
            logger.debug("Ignoring malformed cancellation: %s", params)
            return
        task = self._in_flight.get(cancelled.request_id)
        if task is None:
            logger.debug("No in-flight call with id %s", cancelled.request_id)
            return
        logger.info("Cancelling call %s: %s", cancelled.request_id, cancelled.reason or "no reason")
        task.cancel()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    async def _reply(self, request: JsonRpcRequest, result: dict[str, Any]) -> None:
        if request.is_notification:
            return
        await self._send(JsonRpcResponse(id=request.id, result=result))

    async def _send(self, response: JsonRpcResponse) -> None:
        if self._writer is None:
            msg = "Server not connected"
            raise RuntimeError(msg)
        data = json.dumps(response.to_wire(), default=str).encode() + b"\n"
        async with self._write_lock:
            self._writer.write(data)
            await self._writer.drain()


async def _connect_stdio() -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Wrap the process's stdin/stdout in asyncio streams."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=_STREAM_LIMIT)
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
    transport, protocol = await loop.connect_write_pipe(
        asyncio.streams.FlowControlMixin, sys.stdout
    )
    writer = asyncio.StreamWriter(transport, protocol, reader, loop)
    return reader, writer
