"""Argument Schema Synthesizer — tool names, descriptions and argument schemas."""

from openapi_bridge.synthesis.describe import describe_operation, filter_text
from openapi_bridge.synthesis.naming import ensure_action_oriented, tool_name_for
from openapi_bridge.synthesis.schema import build_input_schema, synthesize, synthesize_all

__all__ = [
    "build_input_schema",
    "describe_operation",
    "ensure_action_oriented",
    "filter_text",
    "synthesize",
    "synthesize_all",
    "tool_name_for",
]
