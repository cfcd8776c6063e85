"""ToolProvider protocol — the surface a tool host drives.

:class:`~openapi_bridge.registry.ToolRegistry` satisfies it, so anything that
routes calls by name over OpenAI-style function schemas can host the bridge
without knowing it is backed by an HTTP API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from openapi_bridge.models import ToolResult


@runtime_checkable
class ToolProvider(Protocol):
    """Discovers and executes tools."""

    async def discover_tools(self) -> list[dict[str, Any]]:
        """Return tools as OpenAI-compatible function schemas::

            {
                "type": "function",
                "function": {"name": "...", "description": "...", "parameters": {...}}
            }
        """
        ...

    async def execute_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Execute a tool by name and return its result."""
        ...
