"""Dispatcher — HTTP execution and response normalization."""

from openapi_bridge.dispatch.dispatcher import USER_AGENT, HttpDispatcher
from openapi_bridge.dispatch.formatting import format_response, response_type_hint, status_legend

__all__ = [
    "USER_AGENT",
    "HttpDispatcher",
    "format_response",
    "response_type_hint",
    "status_legend",
]
