"""``openapi-bridge serve`` — run the MCP stdio server."""

from __future__ import annotations

import asyncio
import sys

import click

from openapi_bridge.cli_commands._config import build_config, connection_options
from openapi_bridge.cli_commands._output import err_console


@click.command()
@click.argument("spec")
@connection_options
@click.option(
    "--otlp-endpoint",
    default=None,
    help="Export traces via OTLP/gRPC (requires the otel extra).",
)
def serve(
    spec: str,
    base_url: str | None,
    timeout: float | None,
    headers: tuple[str, ...],
    otlp_endpoint: str | None,
) -> None:
    """Serve the API described by SPEC as MCP tools over stdio.

    SPEC is a file path, an http(s) URL or inline JSON/YAML.
    """
    from openapi_bridge.bootstrap import create_registry
    from openapi_bridge.errors import BridgeError
    from openapi_bridge.protocol.server import StdioServer

    try:
        config = build_config(base_url, timeout, headers)
        registry = create_registry(spec, config)
    except BridgeError as exc:
        err_console.print(f"[red]Startup error:[/red] {exc}")
        sys.exit(1)

    if otlp_endpoint:
        from openapi_bridge.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(otlp_endpoint=otlp_endpoint)
        except ImportError as exc:
            err_console.print(f"[red]Telemetry error:[/red] {exc}")
            sys.exit(1)

    try:
        asyncio.run(StdioServer(registry).serve())
    except KeyboardInterrupt:
        err_console.print("Interrupted")
