"""OpenTelemetry tracing for tool calls.

Only the OpenTelemetry *API* is a hard dependency. Until
:func:`configure_telemetry` installs an SDK tracer provider, every span is a
no-op::

    from openapi_bridge.utils.telemetry import ATTR_TOOL_NAME, get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("bridge.call_tool") as span:
        span.set_attribute(ATTR_TOOL_NAME, "getPetById")

Exporting spans needs the ``otel`` extra: ``pip install openapi-bridge[otel]``.
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Span names and attribute keys
# ---------------------------------------------------------------------------

SPAN_CALL_TOOL = "bridge.call_tool"

ATTR_TOOL_NAME = "bridge.tool.name"
ATTR_OPERATION_ID = "bridge.operation.id"
ATTR_HTTP_METHOD = "bridge.http.method"
ATTR_HTTP_STATUS_CODE = "bridge.http.status_code"
ATTR_RESULT_IS_ERROR = "bridge.result.is_error"

_INSTRUMENTATION_NAME = "openapi_bridge"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a tracer for *name* (no-op until an SDK provider is installed)."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def set_current_attribute(key: str, value: Any) -> None:
    """Set *key* on the active span, if any."""
    trace.get_current_span().set_attribute(key, value)


def configure_telemetry(
    *,
    service_name: str = "openapi-bridge",
    export_to_console: bool = False,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider.

    Console export writes to stdout, which the stdio server owns, so it is
    off by default; use *otlp_endpoint* when serving.

    Raises:
        ImportError: If ``opentelemetry-sdk`` (or, for OTLP,
            ``opentelemetry-exporter-otlp``) is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install openapi-bridge[otel]"
        )
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    if export_to_console:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    if otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(_otlp_exporter(otlp_endpoint)))
    trace.set_tracer_provider(provider)


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
            OTLPSpanExporter,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install openapi-bridge[otel]"
        )
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)
