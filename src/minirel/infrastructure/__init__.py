"""Infrastructure layer - cross-cutting concerns."""

from minirel.infrastructure.config import Config, get_config
from minirel.infrastructure.logging import get_logger, setup_logging, statement_context
from minirel.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from minirel.infrastructure.tracing import (
    get_tracer,
    record_rejection,
    setup_tracing,
    trace_span,
    trace_statement,
)

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "statement_context",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
    "trace_statement",
    "record_rejection",
]
