"""Startup wiring: description source to ready-to-serve registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urljoin, urlsplit

from openapi_bridge.description import build_index, load_description
from openapi_bridge.errors import ConfigurationError
from openapi_bridge.registry import ToolRegistry

if TYPE_CHECKING:
    from pathlib import Path

    import httpx

    from openapi_bridge.config import BridgeConfig

logger = logging.getLogger(__name__)


def create_registry(
    source: str | Path,
    config: BridgeConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ToolRegistry:
    """Load *source*, index it, synthesize tools and build the registry.

    When *config* has no base URL the first ``servers`` entry is used.

    Raises:
        ParseError: If the description cannot be loaded or parsed.
        ConfigurationError: If no base URL can be determined.
    """
    index = build_index(load_description(source))
    logger.info(
        "Loaded %s %s with %d operations",
        index.title,
        index.version,
        len(index.operations),
    )
    if not config.base_url:
        server = index.default_server
        if not server:
            msg = "No base URL configured and the description declares no servers"
            raise ConfigurationError(msg)
        server = _absolute_server(server, source)
        logger.info("Using base URL from servers: %s", server)
        config = config.with_base_url(server)
    return ToolRegistry.from_index(index, config, transport=transport)


def _absolute_server(server: str, source: str | Path) -> str:
    """Resolve a relative ``servers`` URL against a description fetched over HTTP."""
    if urlsplit(server).scheme:
        return server
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return urljoin(source, server)
    msg = f"Server URL {server!r} is relative; configure a base URL"
    raise ConfigurationError(msg)
