"""Tool-facing models: definitions, compiled requests and call results.

These are the types that cross the boundary between the engine and the
protocol runtime. :class:`ToolDefinition` is built once at startup and never
mutated; :class:`CompiledRequest` and :class:`ToolResult` live for a single
call.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Content parts
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    """Plain text content part."""

    type: Literal["text"] = "text"
    text: str


ContentPart = TextContent


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------


class ToolDefinition(BaseModel):
    """A callable tool synthesized from one API operation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")
    operation_id: str
    method: str
    path: str

    def to_mcp(self) -> dict[str, Any]:
        """Serialize as an MCP ``tools/list`` entry."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    def to_function_schema(self) -> dict[str, Any]:
        """Serialize as an OpenAI-compatible function schema."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema,
            },
        }


# ---------------------------------------------------------------------------
# Per-call request and result
# ---------------------------------------------------------------------------


class CompiledRequest(BaseModel):
    """A fully resolved HTTP request ready to be sent."""

    method: str
    url: str
    headers: list[tuple[str, str]] = []
    body: bytes | None = None

    def header_values(self, name: str) -> list[str]:
        """Return every value of header *name* (case-insensitive)."""
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]


class ToolResult(BaseModel):
    """The normalized outcome of a tool call."""

    model_config = ConfigDict(populate_by_name=True)

    is_error: bool = Field(default=False, alias="isError")
    content: list[ContentPart] = []

    @property
    def text(self) -> str:
        """Text of the primary content item."""
        return self.content[0].text if self.content else ""

    @classmethod
    def from_text(cls, text: str, *, is_error: bool = False) -> ToolResult:
        """Create a ToolResult with a single text content part."""
        parts: list[ContentPart] = [TextContent(text=text)]
        return cls(is_error=is_error, content=parts)

    @classmethod
    def error(cls, text: str) -> ToolResult:
        """Create an error ToolResult with a single text content part."""
        return cls.from_text(text, is_error=True)

    def with_metadata(self, metadata: dict[str, Any]) -> ToolResult:
        """Return a copy with *metadata* appended as a JSON text content item."""
        extra = TextContent(text=json.dumps(metadata, default=str))
        return self.model_copy(update={"content": [*self.content, extra]})

    def to_mcp(self) -> dict[str, Any]:
        """Serialize as an MCP ``tools/call`` result."""
        return self.model_dump(by_alias=True)
