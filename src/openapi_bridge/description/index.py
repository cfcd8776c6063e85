"""Description Index — parse an API description into operation specs."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

import yaml
from pydantic import ValidationError

from openapi_bridge.description.models import (
    HTTP_METHODS,
    DescriptionIndex,
    OperationSpec,
    ParameterSpec,
    RequestBodySpec,
    SecurityRequirement,
    SecurityScheme,
)
from openapi_bridge.description.refs import RefResolver
from openapi_bridge.errors import ParseError

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{([^{}]+)\}")

RESERVED_PREFIXES = ("header_", "auth_")

_PREFERRED_CONTENT_TYPES = (
    "application/json",
    "application/x-www-form-urlencoded",
    "text/plain",
)


def path_placeholders(path: str) -> list[str]:
    """Return the ``{name}`` placeholders of *path* in order of appearance."""
    return PLACEHOLDER_RE.findall(path)


def parse_document(raw: str | bytes | Mapping[str, Any]) -> dict[str, Any]:
    """Parse JSON or YAML text into a mapping.

    JSON is attempted first, then YAML.

    Raises:
        ParseError: If the text is neither, or does not hold a mapping.
    """
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Description is not valid UTF-8: {exc}") from exc
    else:
        text = raw
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ParseError(f"Description is neither valid JSON nor YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError("Description must be a mapping at the top level")
    return data


def build_index(raw: str | bytes | Mapping[str, Any]) -> DescriptionIndex:
    """Build a :class:`DescriptionIndex` from a raw description.

    Raises:
        ParseError: On malformed input, a missing ``paths`` table, an
            unresolvable reference, or a path parameter without a matching
            placeholder. There is no partial-success mode.
    """
    document = parse_document(raw)
    paths = document.get("paths")
    if not isinstance(paths, dict):
        raise ParseError("Description has no 'paths' table")

    resolver = RefResolver(document)
    info = _mapping(document.get("info"))
    components = _mapping(document.get("components"))
    schemes = _security_schemes(resolver.resolve(_mapping(components.get("securitySchemes"))))
    root_security = document.get("security")

    operations: list[OperationSpec] = []
    used_ids: set[str] = set()
    for path, raw_item in paths.items():
        item = resolver.resolve(raw_item)
        if not isinstance(item, dict):
            logger.debug("Skipping non-object path item %s", path)
            continue
        for method in HTTP_METHODS:
            raw_op = item.get(method)
            if not isinstance(raw_op, dict):
                continue
            op = _build_operation(
                str(path),
                method,
                item,
                raw_op,
                schemes=schemes,
                root_security=root_security,
                used_ids=used_ids,
            )
            operations.append(op)
            logger.debug("Indexed %s %s as %s", op.method, op.path, op.operation_id)

    try:
        return DescriptionIndex(
            title=str(info.get("title") or "API"),
            version=str(info.get("version") or ""),
            description=str(info.get("description") or ""),
            external_docs=_external_docs(document.get("externalDocs")),
            servers=_servers(document.get("servers")),
            tag_descriptions=_tag_descriptions(document.get("tags")),
            security_schemes=schemes,
            linked_data=info.get("x-linkedData"),
            operations=operations,
        )
    except ValidationError as exc:
        raise ParseError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def _build_operation(
    path: str,
    method: str,
    item: dict[str, Any],
    op: dict[str, Any],
    *,
    schemes: dict[str, SecurityScheme],
    root_security: Any,
    used_ids: set[str],
) -> OperationSpec:
    parameters = _parameters(path, _merge_parameters(item, op))
    security_source = op["security"] if "security" in op else root_security
    declared_id = op.get("operationId")
    base_id = (
        str(declared_id)
        if declared_id
        else synthetic_operation_id(method, path)
    )
    try:
        return OperationSpec(
            operation_id=_dedupe(base_id, used_ids),
            method=method.upper(),
            path=path,
            parameters=parameters,
            request_body=_request_body(op.get("requestBody")),
            security=_security(security_source, schemes),
            summary=str(op.get("summary") or ""),
            description=str(op.get("description") or ""),
            tags=[str(t) for t in op.get("tags") or []],
            deprecated=bool(op.get("deprecated", False)),
            external_docs=_external_docs(op.get("externalDocs")),
            extensions={k: v for k, v in op.items() if str(k).startswith("x-")},
        )
    except ValidationError as exc:
        raise ParseError(f"Invalid operation {method.upper()} {path}: {exc}") from exc


def synthetic_operation_id(method: str, path: str) -> str:
    """Derive a stable operation id from *method* and *path*.

    ``GET /pets/{petId}`` becomes ``get_pets_petId``.
    """
    raw = f"{method.lower()}_{path.strip('/')}"
    cleaned = re.sub(r"[^A-Za-z0-9_]+", "_", raw)
    return re.sub(r"_+", "_", cleaned).strip("_") or method.lower()


def _dedupe(candidate: str, used: set[str]) -> str:
    name = candidate
    suffix = 2
    while name in used:
        name = f"{candidate}_{suffix}"
        suffix += 1
    if name != candidate:
        logger.warning("Duplicate operation id %r renamed to %r", candidate, name)
    used.add(name)
    return name


def _merge_parameters(item: dict[str, Any], op: dict[str, Any]) -> list[dict[str, Any]]:
    """Merge path-item and operation parameters; the operation wins on (in, name)."""
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for source in (item.get("parameters") or [], op.get("parameters") or []):
        for param in source:
            if not isinstance(param, dict) or "name" not in param or "in" not in param:
                raise ParseError(f"Malformed parameter object: {param!r}")
            merged[(str(param["in"]), str(param["name"]))] = param
    return list(merged.values())


def _parameters(path: str, raw_params: list[dict[str, Any]]) -> list[ParameterSpec]:
    placeholders = set(path_placeholders(path))
    params: list[ParameterSpec] = []
    for raw in raw_params:
        name = str(raw["name"])
        location = raw["in"]
        if location not in ("path", "query", "header"):
            logger.debug("Skipping %s parameter %r on %s", location, name, path)
            continue
        if location == "path" and name not in placeholders:
            raise ParseError(f"Path parameter '{name}' has no placeholder in {path}")
        if location != "header" and (name == "body" or name.startswith(RESERVED_PREFIXES)):
            logger.warning(
                "Parameter %r on %s uses a reserved argument name and will be "
                "classified by it at call time",
                name,
                path,
            )
        params.append(
            ParameterSpec(
                name=name,
                location=location,
                required=location == "path" or bool(raw.get("required", False)),
                schema=_mapping(raw.get("schema")),
                description=str(raw.get("description") or ""),
            )
        )
    return params


def _request_body(raw: Any) -> RequestBodySpec | None:
    if not isinstance(raw, dict):
        return None
    content = _mapping(raw.get("content"))
    if not content:
        return None
    content_type = next(
        (ct for ct in _PREFERRED_CONTENT_TYPES if ct in content),
        next(iter(content)),
    )
    media = _mapping(content.get(content_type))
    return RequestBodySpec(
        content_type=str(content_type),
        schema=_mapping(media.get("schema")),
        required=bool(raw.get("required", False)),
        description=str(raw.get("description") or ""),
    )


# ---------------------------------------------------------------------------
# Security
# ---------------------------------------------------------------------------


def _security_schemes(raw: dict[str, Any]) -> dict[str, SecurityScheme]:
    schemes: dict[str, SecurityScheme] = {}
    for name, value in raw.items():
        if not isinstance(value, dict) or "type" not in value:
            raise ParseError(f"Malformed security scheme: {name}")
        schemes[str(name)] = SecurityScheme(
            type=str(value["type"]),
            description=str(value.get("description") or ""),
            location=value.get("in"),
            name=value.get("name"),
            scheme=value.get("scheme"),
        )
    return schemes


def _security(raw: Any, schemes: dict[str, SecurityScheme]) -> list[SecurityRequirement]:
    if not isinstance(raw, list):
        return []
    requirements: list[SecurityRequirement] = []
    seen: set[str] = set()
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        for name, scopes in entry.items():
            if name in seen:
                continue
            seen.add(name)
            scheme = schemes.get(name)
            if scheme is None:
                logger.warning("Security requirement %r names an undeclared scheme", name)
            requirements.append(
                SecurityRequirement(
                    scheme_name=str(name),
                    scopes=[str(s) for s in scopes or []],
                    scheme=scheme,
                )
            )
    return requirements


# ---------------------------------------------------------------------------
# Document metadata
# ---------------------------------------------------------------------------


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _external_docs(raw: Any) -> str:
    docs = _mapping(raw)
    text = str(docs.get("description") or "")
    if docs.get("url"):
        text = f"{text} - {docs['url']}" if text else str(docs["url"])
    return text


def _servers(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [str(s["url"]) for s in raw if isinstance(s, dict) and s.get("url")]


def _tag_descriptions(raw: Any) -> dict[str, str]:
    if not isinstance(raw, list):
        return {}
    return {
        str(tag["name"]): str(tag["description"])
        for tag in raw
        if isinstance(tag, dict) and tag.get("name") and tag.get("description")
    }
