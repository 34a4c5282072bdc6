"""Table engine - the operations over one shared Database.

Every public operation takes the engine lock for exactly one statement,
validates everything it needs before touching any table, and only then
mutates. A failed statement therefore leaves the database exactly as it
was. Errors are raised as :class:`~minirel.domain.errors.EngineError`
subclasses; turning them into responses is the caller's job.

Example:
    >>> engine = TableEngine()
    >>> engine.create_table("users", [ColumnSpec("id", ColumnType.INT)])
    >>> engine.insert_row("users", {"id": Value.int(1)})
    1
    >>> engine.select("users").rows
    [[Int(1)]]
"""

from __future__ import annotations

import threading
from typing import Any, Sequence

from minirel.domain.entities import Database, Row, Table
from minirel.domain.errors import DuplicateColumn
from minirel.domain.services import BoundCondition, Condition, matching_rows
from minirel.domain.value_objects import Value
from minirel.infrastructure.logging import get_logger
from minirel.ports.inbound import (
    Assignment,
    ColumnSpec,
    CreateTableRequest,
    DropTableRequest,
    ExecutionResult,
    InsertColumnRequest,
    InsertRowRequest,
    OperationRequest,
    RenameTableRequest,
    SelectRequest,
    UpdateRequest,
)

logger = get_logger(__name__)


class TableEngine:
    """Create/drop/rename tables, add columns, insert, select and update.

    Thread Safety:
        All operations, reads included, hold a single re-entrant lock for
        their whole duration. No operation spans two acquisitions.
    """

    def __init__(
        self,
        database: Database | None = None,
        null_equals_null: bool = False,
    ) -> None:
        """Initialize the engine.

        Args:
            database: The database to operate on. A new empty one if None.
            null_equals_null: Whether ``Null = Null`` holds in conditions.
        """
        self._database = database if database is not None else Database()
        self._null_equals_null = null_equals_null
        self._lock = threading.RLock()

    @property
    def null_equals_null(self) -> bool:
        return self._null_equals_null

    @property
    def table_count(self) -> int:
        with self._lock:
            return len(self._database)

    # Table lifecycle

    def create_table(self, name: str, columns: Sequence[ColumnSpec] = ()) -> None:
        """Create an empty table.

        Raises:
            TableAlreadyExists: If the name is taken.
            DuplicateColumn: If two column definitions share a name.
        """
        with self._lock:
            table = Table(name=name)
            for spec in columns:
                if table.has_column(spec.name):
                    raise DuplicateColumn(name, spec.name)
                table.columns.append(spec.to_column())
            self._database.add(table)
            logger.info("table_created", table=name, columns=table.column_names)

    def drop_table(self, name: str) -> None:
        """Remove a table and all of its rows.

        Raises:
            TableNotFound: If no such table exists.
        """
        with self._lock:
            table = self._database.remove(name)
            logger.info("table_dropped", table=name, rows=len(table.rows))

    def rename_table(self, current_name: str, new_name: str) -> None:
        """Change a table's key. Columns and rows are untouched.

        Raises:
            TableNotFound: If ``current_name`` does not exist.
            TableAlreadyExists: If ``new_name`` is taken.
        """
        with self._lock:
            self._database.rename(current_name, new_name)
            logger.info("table_renamed", table=current_name, new_name=new_name)

    def insert_column(self, table_name: str, column: ColumnSpec) -> None:
        """Append a column; existing rows get Null in the new field.

        Raises:
            TableNotFound: If the table does not exist.
            DuplicateColumn: If the column name is already declared.
        """
        with self._lock:
            table = self._database.get(table_name)
            table.add_column(column.to_column())
            logger.info(
                "column_inserted",
                table=table_name,
                column=column.name,
                backfilled_rows=len(table.rows),
            )

    # Data

    def insert_row(self, table_name: str, values: dict[str, Value]) -> int:
        """Append one row. Columns not named in ``values`` are set to Null.

        Returns:
            The number of rows inserted (always 1).

        Raises:
            TableNotFound: If the table does not exist.
            UnknownColumn: If a named column is not declared.
            TypeMismatch: If a value does not fit its column type.
        """
        with self._lock:
            table = self._database.get(table_name)
            row = Row([Value.null() for _ in table.columns])
            for column_name, value in values.items():
                index = table.column_index(column_name)
                table.check_assignable(index, value)
                row.set(index, value)
            table.append_row(row)
            logger.info("row_inserted", table=table_name)
            return 1

    def select(
        self,
        table_name: str,
        columns: Sequence[str] = (),
        condition: Condition | None = None,
    ) -> ExecutionResult:
        """Return matching rows projected onto ``columns``.

        Args:
            table_name: Table to read.
            columns: Projection in output order; empty means all columns.
            condition: Optional predicate; None matches every row.

        Raises:
            TableNotFound: If the table does not exist.
            UnknownColumn: If a projected or filtered column is not declared.
            TypeMismatch: If the condition cannot be evaluated on its column.
        """
        with self._lock:
            table = self._database.get(table_name)
            if columns:
                indexes = [table.column_index(name) for name in columns]
                names = list(columns)
            else:
                indexes = list(range(len(table.columns)))
                names = table.column_names
            bound = self._bind(table, condition)
            rows = [
                row.project(indexes).values
                for row in matching_rows(table.rows, bound)
            ]
            return ExecutionResult(
                operation=SelectRequest.operation,
                rows=rows,
                columns=names,
                message=f"OK: {len(rows)} row(s) selected",
            )

    def update(
        self,
        table_name: str,
        assignments: Sequence[Assignment],
        condition: Condition | None = None,
    ) -> int:
        """Set assigned columns on every matching row.

        Returns:
            The number of rows modified.

        Raises:
            TableNotFound: If the table does not exist.
            UnknownColumn: If an assigned or filtered column is not declared.
            TypeMismatch: If an assigned value does not fit its column type,
                or the condition cannot be evaluated on its column.
        """
        with self._lock:
            table = self._database.get(table_name)
            resolved: list[tuple[int, Value]] = []
            for assignment in assignments:
                index = table.column_index(assignment.column)
                table.check_assignable(index, assignment.value)
                resolved.append((index, assignment.value))
            bound = self._bind(table, condition)

            targets = list(matching_rows(table.rows, bound))
            for row in targets:
                for index, value in resolved:
                    row.set(index, value)
            logger.info("rows_updated", table=table_name, rows=len(targets))
            return len(targets)

    # Introspection

    def list_tables(self) -> list[str]:
        with self._lock:
            return self._database.names()

    def describe(self) -> dict[str, Any]:
        """Snapshot every table's schema and rows."""
        with self._lock:
            return {"tables": [table.describe() for table in self._database]}

    # Dispatch

    def execute(self, request: OperationRequest) -> ExecutionResult:
        """Run an operation request and wrap its outcome.

        Raises:
            EngineError: Propagated from the underlying operation.
            TypeError: If ``request`` is not an operation request.
        """
        if isinstance(request, CreateTableRequest):
            self.create_table(request.name, request.columns)
            return _ack(request.operation, f"OK: Table '{request.name}' created")
        elif isinstance(request, DropTableRequest):
            self.drop_table(request.name)
            return _ack(request.operation, f"OK: Table '{request.name}' dropped")
        elif isinstance(request, RenameTableRequest):
            self.rename_table(request.current_name, request.new_name)
            return _ack(
                request.operation,
                f"OK: Table '{request.current_name}' renamed to '{request.new_name}'",
            )
        elif isinstance(request, InsertColumnRequest):
            self.insert_column(request.table_name, request.column)
            return _ack(
                request.operation,
                f"OK: Column '{request.column.name}' added to '{request.table_name}'",
            )
        elif isinstance(request, InsertRowRequest):
            count = self.insert_row(request.table_name, request.values)
            return ExecutionResult(
                operation=request.operation,
                affected_rows=count,
                message=f"OK: {count} row(s) inserted",
            )
        elif isinstance(request, SelectRequest):
            return self.select(request.table_name, request.columns, request.condition)
        elif isinstance(request, UpdateRequest):
            count = self.update(request.table_name, request.assignments, request.condition)
            return ExecutionResult(
                operation=request.operation,
                affected_rows=count,
                message=f"OK: {count} row(s) updated",
            )
        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    def _bind(self, table: Table, condition: Condition | None) -> BoundCondition | None:
        if condition is None:
            return None
        return condition.bind(table, self._null_equals_null)


def _ack(operation: str, message: str) -> ExecutionResult:
    return ExecutionResult(operation=operation, message=message)
