"""openapi-bridge CLI entrypoint."""

from __future__ import annotations

import logging
import sys

import click

from openapi_bridge import __version__

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="openapi-bridge")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Log level; logs always go to stderr.",
)
def main(log_level: str) -> None:
    """openapi-bridge — serve an OpenAPI description as MCP tools."""
    # stdout carries the protocol stream
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, stream=sys.stderr)


# Register subcommands
from openapi_bridge.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
