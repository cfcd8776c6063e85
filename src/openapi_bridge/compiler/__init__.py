"""Request Compiler — arguments in, concrete HTTP request out."""

from openapi_bridge.compiler.arguments import ArgumentClass, classify_argument, render_value
from openapi_bridge.compiler.auth import auth_header
from openapi_bridge.compiler.compiler import compile_request, join_url

__all__ = [
    "ArgumentClass",
    "auth_header",
    "classify_argument",
    "compile_request",
    "join_url",
    "render_value",
]
