"""Shared CLI output formatters."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from openapi_bridge.models import ToolDefinition, ToolResult

console = Console()
err_console = Console(stderr=True)


def print_tools_table(tools: list[ToolDefinition], *, title: str = "Tools") -> None:
    """Pretty-print synthesized tools as a table."""
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Method")
    table.add_column("Path")
    table.add_column("Description")

    for tool in tools:
        table.add_row(
            tool.name,
            tool.method,
            tool.path,
            _truncate(tool.description.split("\n", 1)[0]),
        )

    console.print(table)


def print_tools_json(tools: list[ToolDefinition]) -> None:
    console.print_json(json.dumps([tool.to_mcp() for tool in tools]))


def print_tool(tool: ToolDefinition) -> None:
    """Print a tool's description and input schema."""
    console.print(f"[bold cyan]{tool.name}[/bold cyan]  {tool.method} {tool.path}")
    console.print(tool.description, markup=False, highlight=False)
    console.print("\n[bold]Input schema:[/bold]")
    console.print_json(json.dumps(tool.input_schema))


def print_result(result: ToolResult, *, as_json: bool = False) -> None:
    """Print a tool result: primary text, then metadata items dimmed."""
    if as_json:
        console.print_json(json.dumps(result.to_mcp()))
        return
    if result.is_error:
        console.print("[red]Tool returned an error[/red]")
    for index, part in enumerate(result.content):
        style = None if index == 0 else "dim"
        console.print(part.text, markup=False, highlight=False, style=style)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
