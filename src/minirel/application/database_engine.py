"""Database Engine - unified entry point for minirel.

Ties the command parser and the table engine together and wraps every
statement with tracing, metrics and logging. Statement failures come back
as failed :class:`ExecutionResult` objects, never as exceptions, so one bad
statement cannot disturb the caller or the statements after it.

Usage:
    from minirel.application import DatabaseEngine

    db = DatabaseEngine()
    db.execute("CREATE TABLE users (id INT, name STRING)")
    db.execute("INSERT INTO users (id, name) VALUES (1, 'Alice')")
    result = db.execute("SELECT id, name FROM users WHERE id = 1")
"""

from __future__ import annotations

import time
from typing import Any

from minirel.adapters.inbound.sql_parser import SQLParser
from minirel.application.table_engine import TableEngine
from minirel.domain.errors import EngineError, StatementSyntaxError
from minirel.infrastructure.config import Config
from minirel.infrastructure.logging import get_logger, statement_context
from minirel.infrastructure.metrics import MetricsRegistry, get_metrics
from minirel.infrastructure.tracing import record_rejection, trace_statement
from minirel.ports.inbound import (
    ExecutionResult,
    InsertRowRequest,
    OperationRequest,
    UpdateRequest,
)

logger = get_logger(__name__)

PARSE_OPERATION = "parse"


class DatabaseEngine:
    """Text and request front door to a single table engine.

    Thread Safety:
        Safe to share across threads; serialization happens inside the
        table engine, one statement at a time.
    """

    def __init__(
        self,
        engine: TableEngine | None = None,
        parser: SQLParser | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the database engine.

        Args:
            engine: Table engine to execute against. A fresh one if None.
            parser: Statement parser. A default SQLParser if None.
            metrics: Metrics registry. The global registry if None.
        """
        self._engine = engine if engine is not None else TableEngine()
        self._parser = parser if parser is not None else SQLParser()
        self._metrics = metrics if metrics is not None else get_metrics()

    @classmethod
    def from_config(
        cls, config: Config, metrics: MetricsRegistry | None = None
    ) -> DatabaseEngine:
        """Build an engine honouring the engine section of ``config``."""
        engine = TableEngine(null_equals_null=config.engine.null_equals_null)
        return cls(engine=engine, metrics=metrics)

    @property
    def table_engine(self) -> TableEngine:
        return self._engine

    @property
    def metrics(self) -> MetricsRegistry:
        return self._metrics

    def execute(self, sql: str) -> ExecutionResult:
        """Parse and execute one statement.

        Args:
            sql: The statement text.

        Returns:
            The statement's result, failed if parsing or execution failed.
        """
        start = time.perf_counter()
        try:
            request = self._parser.parse(sql)
        except StatementSyntaxError as e:
            return self.reject(PARSE_OPERATION, e, start, position=e.position)
        return self.submit(request)

    def execute_many(self, statements: list[str]) -> list[ExecutionResult]:
        """Execute statements in order. A failure does not stop the rest."""
        return [self.execute(sql) for sql in statements]

    def submit(self, request: OperationRequest) -> ExecutionResult:
        """Execute an already-parsed operation request."""
        operation = request.operation
        start = time.perf_counter()

        with statement_context(operation) as statement_id, trace_statement(
            operation, statement_id
        ) as span:
            try:
                result = self._engine.execute(request)
            except EngineError as e:
                record_rejection(span, e)
                self._record(operation, e.kind, start)
                logger.warning("statement_rejected", error=e.kind, detail=e.detail)
                return ExecutionResult.failure(operation, e)

        self._record(operation, "success", start)
        if isinstance(request, (InsertRowRequest, UpdateRequest)):
            self._metrics.rows_modified_total.labels(operation=operation).inc(
                result.affected_rows
            )
        self._metrics.tables.set(self._engine.table_count)
        return result

    def reject(
        self,
        operation: str,
        error: EngineError,
        start: float | None = None,
        **context: Any,
    ) -> ExecutionResult:
        """Count, log and report a statement rejected before execution.

        Used for parse failures and for requests that could not be built,
        e.g. a REST body naming an unknown column type.
        """
        self._record(operation, error.kind, start if start is not None else time.perf_counter())
        logger.warning(
            "statement_rejected",
            operation=operation,
            error=error.kind,
            detail=error.detail,
            **context,
        )
        return ExecutionResult.failure(operation, error)

    def list_tables(self) -> list[str]:
        return self._engine.list_tables()

    def describe(self) -> dict[str, Any]:
        """Snapshot of every table, as served at the API root."""
        return self._engine.describe()

    def _record(self, operation: str, status: str, start: float) -> None:
        self._metrics.statements_total.labels(operation=operation, status=status).inc()
        self._metrics.statement_latency_seconds.labels(operation=operation).observe(
            time.perf_counter() - start
        )
