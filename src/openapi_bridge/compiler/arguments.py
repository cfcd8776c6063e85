"""Argument classification and scalar rendering.

Tool arguments arrive as a flat mapping. Their role is encoded in the key:
the reserved ``body`` key, a ``header_`` or ``auth_`` prefix, a path
placeholder name, or anything else (a query parameter).
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

BODY_KEY = "body"
HEADER_PREFIX = "header_"
AUTH_PREFIX = "auth_"


class ArgumentClass(str, Enum):
    """Where a call argument ends up in the HTTP request."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    AUTH = "auth"
    BODY = "body"


def classify_argument(key: str, placeholders: frozenset[str] | set[str]) -> tuple[ArgumentClass, str]:
    """Return the class of argument *key* and its key with any prefix stripped.

    Precedence: path placeholder, ``body``, ``header_``, ``auth_``, query.
    """
    if key in placeholders:
        return ArgumentClass.PATH, key
    if key == BODY_KEY:
        return ArgumentClass.BODY, key
    if key.startswith(HEADER_PREFIX):
        return ArgumentClass.HEADER, key[len(HEADER_PREFIX) :]
    if key.startswith(AUTH_PREFIX):
        return ArgumentClass.AUTH, key[len(AUTH_PREFIX) :]
    return ArgumentClass.QUERY, key


def render_value(value: Any) -> str:
    """Render a JSON-compatible value as a string for a URL or header.

    Booleans become ``true``/``false``; objects and arrays become compact
    JSON; everything else goes through ``str``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)
