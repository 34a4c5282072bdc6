"""Operation requests consumed by the table engine.

One request type per statement kind. The command parser and the REST API
both produce these; the engine never sees statement text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Union

from minirel.domain.entities import Column, ColumnConstraints, ColumnType
from minirel.domain.services import Condition
from minirel.domain.value_objects import Value


@dataclass(frozen=True)
class ColumnSpec:
    """A column definition as requested by a client."""

    name: str
    declared_type: ColumnType
    primary_key: bool = False
    non_null: bool = False
    unique: bool = False

    def to_column(self) -> Column:
        return Column(
            name=self.name,
            declared_type=self.declared_type,
            constraints=ColumnConstraints(
                primary_key=self.primary_key,
                non_null=self.non_null,
                unique=self.unique,
            ),
        )


@dataclass(frozen=True)
class Assignment:
    """``column = value`` in an UPDATE."""

    column: str
    value: Value


@dataclass(frozen=True)
class CreateTableRequest:
    operation: ClassVar[str] = "create_table"

    name: str
    columns: list[ColumnSpec] = field(default_factory=list)


@dataclass(frozen=True)
class DropTableRequest:
    operation: ClassVar[str] = "drop_table"

    name: str


@dataclass(frozen=True)
class RenameTableRequest:
    operation: ClassVar[str] = "rename_table"

    current_name: str
    new_name: str


@dataclass(frozen=True)
class InsertColumnRequest:
    operation: ClassVar[str] = "insert_column"

    table_name: str
    column: ColumnSpec


@dataclass(frozen=True)
class InsertRowRequest:
    """Insert one row; columns absent from ``values`` default to Null.

    ``values`` keeps the client's column order so that errors are reported
    against the first offending column.
    """

    operation: ClassVar[str] = "insert_row"

    table_name: str
    values: dict[str, Value] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectRequest:
    """Select rows; an empty ``columns`` list means all columns."""

    operation: ClassVar[str] = "select"

    table_name: str
    columns: list[str] = field(default_factory=list)
    condition: Condition | None = None


@dataclass(frozen=True)
class UpdateRequest:
    operation: ClassVar[str] = "update"

    table_name: str
    assignments: list[Assignment] = field(default_factory=list)
    condition: Condition | None = None


OperationRequest = Union[
    CreateTableRequest,
    DropTableRequest,
    RenameTableRequest,
    InsertColumnRequest,
    InsertRowRequest,
    SelectRequest,
    UpdateRequest,
]
