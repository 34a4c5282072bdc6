"""Single-predicate condition evaluation.

A condition compares one column of a row against a literal:

    Condition("age", ComparisonOp.GE, Value.int(18))

Conditions are bound against a table before any row is visited. Binding
resolves the column name to a position and rejects ordering comparisons the
column type cannot support, so evaluation itself never fails part-way
through a scan.

Null handling:
    By default any comparison with a Null operand is false, including
    ``Null = Null`` and ``Null != 1``. With ``null_equals_null`` enabled,
    ``Null = Null`` is true and ``!=`` is the negation of ``=``. Ordering
    comparisons with Null are always false.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Iterator

from minirel.domain.errors import TypeMismatch
from minirel.domain.value_objects import Value, ValueKind

if TYPE_CHECKING:
    from minirel.domain.entities import Row, Table


class ComparisonOp(Enum):
    """Comparison operators for predicates."""

    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    @property
    def is_ordering(self) -> bool:
        return self not in (ComparisonOp.EQ, ComparisonOp.NE)

    @classmethod
    def from_symbol(cls, symbol: str) -> ComparisonOp:
        if symbol == "<>":
            return cls.NE
        return cls(symbol)


@dataclass(frozen=True)
class Condition:
    """An unbound predicate: ``column op value``."""

    column: str
    op: ComparisonOp
    value: Value

    def bind(self, table: Table, null_equals_null: bool = False) -> BoundCondition:
        """Resolve the condition against a table schema.

        Raises:
            UnknownColumn: If the column is not declared on the table.
            TypeMismatch: If an ordering operator is applied to a column
                type and literal kind that cannot be ordered together.
        """
        index = table.column_index(self.column)
        if self.op.is_ordering and not self.value.is_null:
            column_kind = table.columns[index].declared_type.value_kind
            if not ValueKind.orderable(column_kind, self.value.kind):
                raise TypeMismatch(
                    f"cannot apply '{self.op.value}' to column '{self.column}' "
                    f"({column_kind.value}) and {self.value.kind.value} {self.value!r}"
                )
        return BoundCondition(
            index=index,
            op=self.op,
            value=self.value,
            null_equals_null=null_equals_null,
        )

    def __str__(self) -> str:
        literal = f"'{self.value}'" if self.value.kind is ValueKind.STRING else str(self.value)
        return f"{self.column} {self.op.value} {literal}"


@dataclass(frozen=True)
class BoundCondition:
    """A condition resolved to a column position."""

    index: int
    op: ComparisonOp
    value: Value
    null_equals_null: bool = False

    def matches(self, row: Row) -> bool:
        """Evaluate the predicate against one row."""
        actual = row[self.index]

        if self.op is ComparisonOp.EQ:
            return actual.equals(self.value, self.null_equals_null)

        if self.op is ComparisonOp.NE:
            if (actual.is_null or self.value.is_null) and not self.null_equals_null:
                return False
            return not actual.equals(self.value, self.null_equals_null)

        if actual.is_null or self.value.is_null:
            return False

        order = actual.compare(self.value)
        if self.op is ComparisonOp.LT:
            return order < 0
        if self.op is ComparisonOp.LE:
            return order <= 0
        if self.op is ComparisonOp.GT:
            return order > 0
        return order >= 0


def matching_rows(
    rows: Iterable[Row], condition: BoundCondition | None
) -> Iterator[Row]:
    """Yield the rows satisfying ``condition``; every row if it is None."""
    for row in rows:
        if condition is None or condition.matches(row):
            yield row
