"""``openapi-bridge tools`` — inspect and call synthesized tools."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import TYPE_CHECKING, Any

import click

from openapi_bridge.cli_commands._config import build_config, connection_options
from openapi_bridge.cli_commands._output import (
    console,
    print_result,
    print_tool,
    print_tools_json,
    print_tools_table,
)

if TYPE_CHECKING:
    from openapi_bridge.models import ToolDefinition


@click.group()
def tools() -> None:
    """Inspect and call tools synthesized from an API description."""


@tools.command("list")
@click.argument("spec")
@click.option("--json", "as_json", is_flag=True, help="Output as MCP tools/list JSON.")
def list_cmd(spec: str, as_json: bool) -> None:
    """List the tools synthesized from SPEC."""
    definitions = _synthesize(spec)
    if not definitions:
        console.print("[yellow]No operations found.[/yellow]")
        return
    if as_json:
        print_tools_json(definitions)
    else:
        print_tools_table(definitions, title=f"Tools ({len(definitions)})")


@tools.command("show")
@click.argument("spec")
@click.argument("name")
def show(spec: str, name: str) -> None:
    """Show the description and input schema of tool NAME."""
    for definition in _synthesize(spec):
        if definition.name == name:
            print_tool(definition)
            return
    console.print(f"[red]Tool not found:[/red] {name}")
    sys.exit(1)


@tools.command("call")
@click.argument("spec")
@click.argument("name")
@click.option(
    "--arg",
    "args",
    multiple=True,
    metavar="KEY=VALUE",
    help="Tool argument; VALUE is parsed as JSON when possible. Repeatable.",
)
@click.option("--args-json", default=None, help="All arguments as one JSON object.")
@connection_options
@click.option("--json", "as_json", is_flag=True, help="Output the raw MCP result.")
def call(
    spec: str,
    name: str,
    args: tuple[str, ...],
    args_json: str | None,
    base_url: str | None,
    timeout: float | None,
    headers: tuple[str, ...],
    as_json: bool,
) -> None:
    """Call tool NAME once against the backend and print the result."""
    from openapi_bridge.bootstrap import create_registry
    from openapi_bridge.errors import BridgeError

    arguments = _parse_arguments(args, args_json)
    try:
        registry = create_registry(spec, build_config(base_url, timeout, headers))
    except BridgeError as exc:
        console.print(f"[red]Startup error:[/red] {exc}")
        sys.exit(1)

    result = asyncio.run(registry.call_tool(name, arguments))
    print_result(result, as_json=as_json)
    if result.is_error:
        sys.exit(1)


def _synthesize(spec: str) -> list[ToolDefinition]:
    from openapi_bridge.description import build_index, load_description
    from openapi_bridge.errors import BridgeError
    from openapi_bridge.synthesis import synthesize_all

    try:
        return synthesize_all(build_index(load_description(spec)))
    except BridgeError as exc:
        console.print(f"[red]Description error:[/red] {exc}")
        sys.exit(1)


def _parse_arguments(pairs: tuple[str, ...], args_json: str | None) -> dict[str, Any]:
    arguments: dict[str, Any] = {}
    if args_json:
        try:
            loaded = json.loads(args_json)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--args-json") from exc
        if not isinstance(loaded, dict):
            raise click.BadParameter("must be a JSON object", param_hint="--args-json")
        arguments.update(loaded)
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--arg")
        try:
            arguments[key] = json.loads(raw)
        except ValueError:
            arguments[key] = raw
    return arguments
