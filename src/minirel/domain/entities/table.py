"""Tables: ordered columns and insertion-ordered rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from minirel.domain.entities.column import Column
from minirel.domain.entities.row import Row
from minirel.domain.errors import DuplicateColumn, TypeMismatch, UnknownColumn
from minirel.domain.value_objects import Value


@dataclass
class Table:
    """A named collection of typed columns and rows.

    Invariant: every row holds exactly one value per column, in column
    order. Missing values are stored as Null.
    """

    name: str
    columns: list[Column] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def has_column(self, name: str) -> bool:
        return any(column.name == name for column in self.columns)

    def column_index(self, name: str) -> int:
        """Resolve a column name to its position.

        Raises:
            UnknownColumn: If no such column is declared.
        """
        for index, column in enumerate(self.columns):
            if column.name == name:
                return index
        raise UnknownColumn(self.name, name)

    def add_column(self, column: Column) -> None:
        """Append a column and back-fill existing rows with Null.

        Raises:
            DuplicateColumn: If a column with the same name exists.
        """
        if self.has_column(column.name):
            raise DuplicateColumn(self.name, column.name)
        self.columns.append(column)
        for row in self.rows:
            row.append(Value.null())

    def check_assignable(self, index: int, value: Value) -> None:
        """Check that ``value`` may be stored in the column at ``index``.

        Raises:
            TypeMismatch: If the value kind does not match the declared type.
        """
        column = self.columns[index]
        if not column.declared_type.accepts(value):
            raise TypeMismatch(
                f"column '{column.name}' is {column.declared_type.value}, "
                f"got {value.kind.value} {value!r}"
            )

    def append_row(self, row: Row) -> None:
        """Append a fully-aligned row. Callers validate values beforehand."""
        if len(row) != len(self.columns):
            raise ValueError(
                f"Row has {len(row)} values, table '{self.name}' has "
                f"{len(self.columns)} columns"
            )
        self.rows.append(row)

    def describe(self) -> dict[str, Any]:
        """Return a JSON-friendly snapshot of the schema and data."""
        return {
            "name": self.name,
            "columns": [
                {
                    "name": column.name,
                    "type": column.declared_type.value,
                    "primary_key": column.constraints.primary_key,
                    "non_null": column.constraints.non_null,
                    "unique": column.constraints.unique,
                }
                for column in self.columns
            ],
            "rows": [[value.to_python() for value in row] for row in self.rows],
        }
