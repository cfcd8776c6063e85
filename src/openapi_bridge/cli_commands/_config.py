"""Shared CLI options: environment configuration plus command-line overrides."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

from openapi_bridge.config import BridgeConfig, parse_header_lines

F = TypeVar("F", bound=Callable[..., Any])


def connection_options(func: F) -> F:
    """Add ``--base-url``, ``--timeout`` and ``--header`` to a command."""
    func = click.option(
        "--header",
        "headers",
        multiple=True,
        metavar="'NAME: VALUE'",
        help="Static header sent with every request. Repeatable.",
    )(func)
    func = click.option(
        "--timeout",
        type=click.FloatRange(min=0, min_open=True),
        default=None,
        help="Request timeout in seconds [env: REQUEST_TIMEOUT, default: 30].",
    )(func)
    func = click.option(
        "--base-url",
        default=None,
        help="Backend base URL [env: API_BASE_URL, default: first server].",
    )(func)
    return func


def build_config(
    base_url: str | None,
    timeout: float | None,
    headers: tuple[str, ...],
) -> BridgeConfig:
    """Read the environment, then apply command-line overrides."""
    extra = parse_header_lines("\n".join(headers))
    return BridgeConfig.from_env(
        base_url=base_url,
        request_timeout=timeout,
        additional_headers=extra or None,
    )
