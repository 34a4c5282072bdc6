"""Prometheus metrics for minirel."""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
)


class MetricsRegistry:
    """Registry of all engine metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        self.statements_total = Counter(
            "minirel_statements_total",
            "Total number of statements executed",
            ["operation", "status"],  # status: success, or the error kind
            registry=self._registry,
        )

        self.statement_latency_seconds = Histogram(
            "minirel_statement_latency_seconds",
            "Statement latency in seconds",
            ["operation"],
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
            registry=self._registry,
        )

        self.rows_modified_total = Counter(
            "minirel_rows_modified_total",
            "Total rows inserted or updated",
            ["operation"],  # insert_row, update
            registry=self._registry,
        )

        self.tables = Gauge(
            "minirel_tables",
            "Number of tables in the database",
            registry=self._registry,
        )

        self.info = Info(
            "minirel",
            "minirel engine information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(
    port: int | None = None, registry: CollectorRegistry | None = None
) -> MetricsRegistry:
    """
    Set up the global metrics registry.

    Args:
        port: If given, also start a standalone Prometheus HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from minirel import __version__
    _metrics.info.info({"version": __version__})

    if port is not None:
        start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
