"""Request Compiler — turn an operation plus call arguments into an HTTP request."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlencode, urlsplit

from openapi_bridge.compiler.arguments import ArgumentClass, classify_argument, render_value
from openapi_bridge.compiler.auth import auth_header
from openapi_bridge.description.index import PLACEHOLDER_RE, path_placeholders
from openapi_bridge.description.models import OperationSpec
from openapi_bridge.errors import InvalidHeaderError, InvalidURLError, MissingPathParameterError
from openapi_bridge.models import CompiledRequest

logger = logging.getLogger(__name__)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def compile_request(
    op: OperationSpec,
    arguments: Mapping[str, Any],
    base_url: str,
) -> CompiledRequest:
    """Compile *arguments* for *op* into a :class:`CompiledRequest`.

    Raises:
        MissingPathParameterError: A path placeholder has no (non-null) argument.
        InvalidURLError: The resolved URL is not an absolute http(s) URL.
        InvalidHeaderError: A header name or value is not ASCII.
    """
    placeholders = frozenset(path_placeholders(op.path))
    path = resolve_path(op.path, arguments)

    query: list[tuple[str, str]] = []
    headers: list[tuple[str, str]] = []
    body: Any = None

    for key, value in arguments.items():
        if value is None:
            continue
        arg_class, name = classify_argument(key, placeholders)
        if arg_class is ArgumentClass.PATH:
            continue
        if arg_class is ArgumentClass.BODY:
            body = value
        elif arg_class is ArgumentClass.HEADER:
            headers.append((name, render_value(value)))
        elif arg_class is ArgumentClass.AUTH:
            headers.append(auth_header(name, render_value(value)))
        else:
            query.append((name, render_value(value)))

    url = join_url(base_url, path)
    if query:
        url = f"{url}?{urlencode(query)}"
    validate_url(url)
    for name, value in headers:
        validate_header(name, value)

    payload: bytes | None = None
    if body is not None:
        if op.method in BODY_METHODS:
            declared = op.request_body.content_type if op.request_body else JSON_CONTENT_TYPE
            content_type, payload = serialize_body(body, declared)
            headers.append(("Content-Type", content_type))
        else:
            logger.debug("Ignoring body argument for %s %s", op.method, op.path)

    return CompiledRequest(method=op.method, url=url, headers=headers, body=payload)


def resolve_path(template: str, arguments: Mapping[str, Any]) -> str:
    """Substitute every ``{name}`` in *template* with its percent-encoded argument."""

    def _substitute(match: Any) -> str:
        name = match.group(1)
        value = arguments.get(name)
        if value is None:
            raise MissingPathParameterError(name, template)
        return quote(render_value(value), safe="")

    return PLACEHOLDER_RE.sub(_substitute, template)


def join_url(base_url: str, path: str) -> str:
    """Join *base_url* and *path* with exactly one separating slash."""
    if not path:
        return base_url
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def validate_url(url: str) -> None:
    """Raise :class:`InvalidURLError` unless *url* is an absolute http(s) URL."""
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise InvalidURLError(url, str(exc)) from exc
    if parts.scheme not in ("http", "https"):
        raise InvalidURLError(url, "scheme must be http or https")
    if not parts.netloc:
        raise InvalidURLError(url, "missing host")


def validate_header(name: str, value: str) -> None:
    """Raise :class:`InvalidHeaderError` unless *name* and *value* are ASCII."""
    if not (name.isascii() and value.isascii()):
        raise InvalidHeaderError(name)


def serialize_body(value: Any, content_type: str) -> tuple[str, bytes]:
    """Serialize *value* for *content_type*; returns the effective content type."""
    media = content_type.split(";", 1)[0].strip().lower()
    if media == FORM_CONTENT_TYPE and isinstance(value, Mapping):
        pairs = [(str(k), render_value(v)) for k, v in value.items() if v is not None]
        return content_type, urlencode(pairs).encode("utf-8")
    if media.startswith("text/") or (isinstance(value, str) and not _is_json(media)):
        return content_type, render_value(value).encode("utf-8")
    if _is_json(media):
        return content_type, json.dumps(value).encode("utf-8")
    return JSON_CONTENT_TYPE, json.dumps(value).encode("utf-8")


def _is_json(media: str) -> bool:
    return media == JSON_CONTENT_TYPE or media.endswith("+json")
