"""Column definitions: declared type plus descriptive constraints."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from minirel.domain.errors import TypeMismatch
from minirel.domain.value_objects import Value, ValueKind


class ColumnType(Enum):
    """Declarable column types. Null is a value, never a column type."""

    STRING = "STRING"
    INT = "INT"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOL"

    @property
    def value_kind(self) -> ValueKind:
        return _VALUE_KINDS[self]

    @classmethod
    def from_name(cls, name: str) -> ColumnType:
        """Resolve a type name such as 'INT' or 'STRING'.

        Raises:
            TypeMismatch: If the name is not a supported type.
        """
        try:
            return _TYPE_NAMES[name.upper()]
        except KeyError:
            raise TypeMismatch(f"unsupported column type '{name}'") from None

    def accepts(self, value: Value) -> bool:
        """Check whether a value may be stored in a column of this type."""
        return value.is_null or value.kind is self.value_kind


_VALUE_KINDS = {
    ColumnType.STRING: ValueKind.STRING,
    ColumnType.INT: ValueKind.INT,
    ColumnType.FLOAT: ValueKind.FLOAT,
    ColumnType.BOOLEAN: ValueKind.BOOLEAN,
}

_TYPE_NAMES = {
    "STRING": ColumnType.STRING,
    "TEXT": ColumnType.STRING,
    "INT": ColumnType.INT,
    "INTEGER": ColumnType.INT,
    "FLOAT": ColumnType.FLOAT,
    "BOOL": ColumnType.BOOLEAN,
    "BOOLEAN": ColumnType.BOOLEAN,
}


@dataclass(frozen=True, slots=True)
class ColumnConstraints:
    """Constraint flags recorded on a column.

    These are metadata only. Nothing in the engine checks them on insert,
    select or update.
    """

    primary_key: bool = False
    non_null: bool = False
    unique: bool = False

    def __str__(self) -> str:
        parts = []
        if self.primary_key:
            parts.append("PRIMARY KEY")
        if self.non_null:
            parts.append("NOT NULL")
        if self.unique:
            parts.append("UNIQUE")
        return " ".join(parts)


@dataclass(frozen=True, slots=True)
class Column:
    """A named, typed field definition."""

    name: str
    declared_type: ColumnType
    constraints: ColumnConstraints = field(default_factory=ColumnConstraints)

    def __str__(self) -> str:
        text = f"{self.name} {self.declared_type.value}"
        flags = str(self.constraints)
        return f"{text} {flags}" if flags else text
