"""Argument Schema Synthesizer — one ToolDefinition per OperationSpec."""

from __future__ import annotations

import copy
import logging
from typing import Any

from openapi_bridge.compiler.arguments import AUTH_PREFIX, BODY_KEY, HEADER_PREFIX
from openapi_bridge.description.index import path_placeholders
from openapi_bridge.description.models import (
    DescriptionIndex,
    OperationSpec,
    ParameterSpec,
    SecurityRequirement,
)
from openapi_bridge.models import ToolDefinition
from openapi_bridge.synthesis.describe import describe_operation, filter_text
from openapi_bridge.synthesis.naming import tool_name_for

logger = logging.getLogger(__name__)

_LOCATION_LABELS = {
    "path": "Path parameter",
    "query": "Query parameter",
    "header": "HTTP Header",
}


def synthesize(op: OperationSpec, index: DescriptionIndex) -> ToolDefinition:
    """Produce the tool definition for *op*.

    Pure: the same operation and index always give an identical definition.
    """
    return ToolDefinition(
        name=tool_name_for(op.operation_id, op.method),
        description=describe_operation(op, index),
        input_schema=build_input_schema(op, index),
        operation_id=op.operation_id,
        method=op.method,
        path=op.path,
    )


def synthesize_all(index: DescriptionIndex) -> list[ToolDefinition]:
    """Synthesize every operation in *index*, renaming tool-name collisions.

    Distinct operation ids can still collide once a verb is prefixed
    (``pet`` and ``getPet`` on GET); later tools get ``_2``, ``_3``, ...
    """
    tools: list[ToolDefinition] = []
    used: set[str] = set()
    for op in index.operations:
        tool = synthesize(op, index)
        name = tool.name
        suffix = 2
        while name in used:
            name = f"{tool.name}_{suffix}"
            suffix += 1
        if name != tool.name:
            logger.warning("Tool name %r already taken; using %r", tool.name, name)
            tool = tool.model_copy(update={"name": name})
        used.add(name)
        tools.append(tool)
    return tools


def build_input_schema(op: OperationSpec, index: DescriptionIndex) -> dict[str, Any]:
    """Build the JSON argument schema for *op*."""
    properties: dict[str, Any] = {}
    required: list[str] = []

    for location in ("path", "query", "header"):
        for param in op.parameters_in(location):
            key = property_name(param)
            if key in properties:
                logger.warning(
                    "%s parameter %r on %s %s shadows an earlier argument of the same name; skipped",
                    location,
                    param.name,
                    op.method,
                    op.path,
                )
                continue
            properties[key] = _parameter_schema(param)
            if param.required:
                required.append(key)

    declared = {p.name for p in op.parameters_in("path")}
    for placeholder in path_placeholders(op.path):
        if placeholder in declared:
            continue
        if placeholder in properties:
            if placeholder not in required:
                required.append(placeholder)
            continue
        properties[placeholder] = {
            "type": "string",
            "description": f"Path parameter: value for {{{placeholder}}}",
        }
        required.append(placeholder)

    body = op.request_body
    if body is not None:
        body_schema = _filter_descriptions(copy.deepcopy(body.schema_))
        body_schema["description"] = "Request Body: " + (
            filter_text(body.description) if body.description else "Data to be sent in the request"
        )
        properties[BODY_KEY] = body_schema
        if body.required:
            required.append(BODY_KEY)

    for requirement in op.security:
        properties[AUTH_PREFIX + requirement.scheme_name] = _auth_schema(requirement)

    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required

    annotations = _semantic_annotations(op, index)
    if annotations:
        schema["x-semantic-annotations"] = annotations
    return schema


def property_name(param: ParameterSpec) -> str:
    """The argument key a caller uses for *param*."""
    if param.location == "header":
        return HEADER_PREFIX + param.name
    return param.name


def _parameter_schema(param: ParameterSpec) -> dict[str, Any]:
    schema = _filter_descriptions(copy.deepcopy(param.schema_)) or {"type": "string"}
    if param.description:
        label = _LOCATION_LABELS[param.location]
        schema["description"] = f"{label}: {filter_text(param.description)}"
    return schema


def _filter_descriptions(node: Any) -> Any:
    """Run every string ``description`` in a schema tree through the content filter."""
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "description" and isinstance(value, str):
                node[key] = filter_text(value)
            else:
                _filter_descriptions(value)
    elif isinstance(node, list):
        for item in node:
            _filter_descriptions(item)
    return node


def _auth_schema(requirement: SecurityRequirement) -> dict[str, Any]:
    description = "Authentication: Required for this operation."
    if requirement.scopes:
        description += " Required scopes: " + ", ".join(requirement.scopes)
    return {"type": "string", "description": description}


def _semantic_annotations(op: OperationSpec, index: DescriptionIndex) -> dict[str, Any]:
    annotations: dict[str, Any] = {}
    for key, value in op.extensions.items():
        if key == "x-linkedData":
            annotations["linkedData"] = copy.deepcopy(value)
        else:
            annotations[key[2:]] = copy.deepcopy(value)
    if index.linked_data is not None:
        annotations["apiContext"] = copy.deepcopy(index.linked_data)
    return annotations
