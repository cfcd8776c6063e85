"""Description Index — parsed API description and operation specs."""

from openapi_bridge.description.index import build_index, parse_document, path_placeholders
from openapi_bridge.description.loader import load_description
from openapi_bridge.description.models import (
    DescriptionIndex,
    OperationSpec,
    ParameterSpec,
    RequestBodySpec,
    SecurityRequirement,
    SecurityScheme,
)

__all__ = [
    "DescriptionIndex",
    "OperationSpec",
    "ParameterSpec",
    "RequestBodySpec",
    "SecurityRequirement",
    "SecurityScheme",
    "build_index",
    "load_description",
    "parse_document",
    "path_placeholders",
]
