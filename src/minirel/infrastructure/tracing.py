"""OpenTelemetry tracing for statements.

Without :func:`setup_tracing` the global no-op provider is used, so spans
cost next to nothing in tests and in the shell.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Status, StatusCode

from minirel.domain.errors import EngineError

DB_SYSTEM = "minirel"

_tracer: trace.Tracer | None = None


def setup_tracing(
    service_name: str = "minirel",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Set up OpenTelemetry tracing.

    Args:
        service_name: Name of the service for tracing
        otlp_endpoint: OTLP collector endpoint (e.g., "http://localhost:4317")
        console_export: Whether to also export to console (for debugging)

    Returns:
        Configured tracer instance
    """
    global _tracer

    from minirel import __version__

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": service_name,
                "service.version": __version__,
                "db.system": DB_SYSTEM,
            }
        )
    )
    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(service_name)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the global tracer instance."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer("minirel")
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Context manager for creating a trace span.

    Args:
        name: Name of the span
        attributes: Optional attributes to add to the span

    Yields:
        The created span
    """
    with get_tracer().start_as_current_span(name, attributes=attributes) as span:
        yield span


@contextmanager
def trace_statement(operation: str, statement_id: int) -> Generator[trace.Span, None, None]:
    """Span for one engine statement, named ``minirel.<operation>``."""
    attributes = {
        "db.system": DB_SYSTEM,
        "db.operation": operation,
        "minirel.statement_id": statement_id,
    }
    with trace_span(f"minirel.{operation}", attributes) as span:
        yield span


def record_rejection(span: trace.Span, error: EngineError) -> None:
    """Mark a span as failed with the error's kind and detail.

    No exception event is attached to the span.
    """
    span.set_attribute("minirel.error", error.kind)
    span.set_attribute("minirel.error_detail", error.detail)
    span.set_status(Status(StatusCode.ERROR, str(error)))
