"""Load raw API description text from a file, a URL, or an inline string."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from openapi_bridge.errors import ParseError

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30.0


def load_description(source: str | Path) -> str:
    """Return the description text behind *source*.

    Supports:
    - URL (``http://`` / ``https://``): fetched with a GET request
    - Local file path: read as UTF-8
    - Anything else: treated as inline JSON/YAML text

    Raises:
        ParseError: If the file cannot be read or the fetch fails.
    """
    if isinstance(source, Path):
        return _read_file(source)

    if source.startswith(("http://", "https://")):
        return _fetch(source)

    stripped = source.lstrip()
    if stripped.startswith(("{", "openapi:", "swagger:")) or "\n" in source:
        return source

    path = Path(source)
    if path.is_file():
        return _read_file(path)
    if path.suffix in (".json", ".yaml", ".yml"):
        raise ParseError(f"Description file not found: {source}")
    return source


def _read_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(f"Cannot read {path}: {exc}") from exc


def _fetch(url: str) -> str:
    logger.info("Fetching API description from %s", url)
    try:
        with httpx.Client(timeout=FETCH_TIMEOUT, follow_redirects=True) as client:
            response = client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as exc:
        raise ParseError(f"Cannot fetch description from {url}: {exc}") from exc
    return response.text
