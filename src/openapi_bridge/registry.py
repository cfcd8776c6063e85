"""ToolRegistry — the call path from tool name to normalized result.

Built once at startup from a :class:`DescriptionIndex`. Lookups, compiling
and dispatch share no mutable state, so calls may run concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from openapi_bridge.compiler import compile_request
from openapi_bridge.dispatch import HttpDispatcher
from openapi_bridge.errors import CompileError, ConfigurationError, ToolNotFoundError
from openapi_bridge.models import ToolResult
from openapi_bridge.synthesis import synthesize_all
from openapi_bridge.utils.telemetry import (
    ATTR_HTTP_METHOD,
    ATTR_OPERATION_ID,
    ATTR_RESULT_IS_ERROR,
    ATTR_TOOL_NAME,
    SPAN_CALL_TOOL,
    get_tracer,
    set_current_attribute,
)

if TYPE_CHECKING:
    import httpx

    from openapi_bridge.config import BridgeConfig
    from openapi_bridge.description.models import DescriptionIndex, OperationSpec
    from openapi_bridge.models import ToolDefinition

logger = logging.getLogger(__name__)

_tracer = get_tracer(__name__)


class ToolRegistry:
    """Maps tool names to operations and executes calls against the backend.

    Satisfies the :class:`~openapi_bridge.provider.ToolProvider` protocol.

    Usage::

        registry = ToolRegistry.from_index(build_index(text), config)
        tools = registry.list_tools()
        result = await registry.call_tool("getPetById", {"petId": 7})
    """

    def __init__(
        self,
        index: DescriptionIndex,
        tools: list[ToolDefinition],
        config: BridgeConfig,
        dispatcher: HttpDispatcher | None = None,
    ) -> None:
        if not config.base_url:
            msg = "No base URL configured and the description declares no servers"
            raise ConfigurationError(msg)
        self._index = index
        self._config = config
        self._dispatcher = dispatcher or HttpDispatcher(config)
        self._tools: dict[str, ToolDefinition] = {t.name: t for t in tools}
        self._operations: dict[str, OperationSpec] = {
            op.operation_id: op for op in index.operations
        }
        for tool in tools:
            logger.info("Registered tool %s (%s %s)", tool.name, tool.method, tool.path)

    @classmethod
    def from_index(
        cls,
        index: DescriptionIndex,
        config: BridgeConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ToolRegistry:
        """Synthesize every operation in *index* and build a registry."""
        dispatcher = HttpDispatcher(config, transport=transport)
        return cls(index, synthesize_all(index), config, dispatcher)

    @property
    def index(self) -> DescriptionIndex:
        return self._index

    @property
    def config(self) -> BridgeConfig:
        return self._config

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def list_tools(self) -> list[ToolDefinition]:
        """Return every tool, or nothing when tools are disabled."""
        if not self._config.enable_tools:
            return []
        return list(self._tools.values())

    def get_tool(self, name: str) -> ToolDefinition:
        """Return the tool called *name*.

        Raises:
            ToolNotFoundError: If no such tool exists.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    async def discover_tools(self) -> list[dict[str, Any]]:
        """Return tools as OpenAI-compatible function schemas."""
        return [tool.to_function_schema() for tool in self.list_tools()]

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def call_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        """Execute tool *name* with *arguments*.

        Never raises for per-call failures: unknown tools, bad arguments,
        transport errors and backend errors all come back as a result with
        ``is_error=True``.
        """
        with _tracer.start_as_current_span(SPAN_CALL_TOOL) as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            result = await self._call(name, arguments)
            span.set_attribute(ATTR_RESULT_IS_ERROR, result.is_error)
            return result

    async def execute_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Alias of :meth:`call_tool` for the ToolProvider protocol."""
        return await self.call_tool(name, arguments)

    async def _call(self, name: str, arguments: Mapping[str, Any] | None) -> ToolResult:
        if not self._config.enable_tools:
            return ToolResult.error(f"Tools are disabled; cannot call {name}")
        try:
            tool = self.get_tool(name)
        except ToolNotFoundError as exc:
            logger.warning("%s", exc)
            return ToolResult.error(f"{exc}. Use tools/list to see the available tools.")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            return ToolResult.error(f"Arguments for {name} must be an object")

        op = self._operations[tool.operation_id]
        set_current_attribute(ATTR_OPERATION_ID, op.operation_id)
        set_current_attribute(ATTR_HTTP_METHOD, op.method)
        try:
            request = compile_request(op, arguments, self._config.base_url)
        except CompileError as exc:
            logger.warning("Cannot compile %s: %s", name, exc)
            return ToolResult.error(str(exc))
        return await self._dispatcher.execute(request, operation_id=op.operation_id, path=op.path)
