"""Scalar values stored in table rows.

A Value is a tagged union over five kinds: String, Int, Float, Boolean and
Null. Instances are immutable; the dataclass equality (``==``) is structural
and is what tests use to compare stored rows. SQL comparison semantics live
in :meth:`Value.equals` and :meth:`Value.compare`.

Comparison rules:
    - String/String and numeric/numeric (Int or Float on either side)
      pairs are comparable for equality and ordering.
    - Any other cross-kind pair is "not equal" and cannot be ordered
      (ordering raises TypeMismatch). Booleans are never ordered.
    - Null equals nothing, not even Null, unless the caller opts into the
      ``null_equals_null`` policy.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from minirel.domain.errors import TypeMismatch

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

PythonScalar = Union[str, int, float, bool, None]


class ValueKind(Enum):
    """The five scalar kinds."""

    STRING = "String"
    INT = "Int"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    NULL = "Null"

    @property
    def is_numeric(self) -> bool:
        return self in (ValueKind.INT, ValueKind.FLOAT)

    @staticmethod
    def orderable(left: ValueKind, right: ValueKind) -> bool:
        """Check whether values of these kinds support <, <=, >, >=."""
        if left.is_numeric and right.is_numeric:
            return True
        return left is ValueKind.STRING and right is ValueKind.STRING


_PAYLOAD_TYPES: dict[ValueKind, type | tuple[type, ...]] = {
    ValueKind.STRING: str,
    ValueKind.INT: int,
    ValueKind.FLOAT: float,
    ValueKind.BOOLEAN: bool,
}


@dataclass(frozen=True, slots=True)
class Value:
    """An immutable tagged scalar.

    Prefer the named constructors over building instances directly:

        >>> Value.int(1)
        Int(1)
        >>> Value.string("Alice")
        String('Alice')
        >>> Value.null().is_null
        True
    """

    kind: ValueKind
    data: PythonScalar = None

    def __post_init__(self) -> None:
        if self.kind is ValueKind.NULL:
            if self.data is not None:
                raise TypeMismatch(f"Null carries no payload, got {self.data!r}")
            return

        expected = _PAYLOAD_TYPES[self.kind]
        # bool is an int subclass; keep the two kinds apart
        if not isinstance(self.data, expected) or (
            self.kind is not ValueKind.BOOLEAN and isinstance(self.data, bool)
        ):
            raise TypeMismatch(f"{self.kind.value} cannot hold {self.data!r}")

        if self.kind is ValueKind.INT and not INT64_MIN <= self.data <= INT64_MAX:
            raise TypeMismatch(f"integer {self.data} is outside the 64-bit range")

        if self.kind is ValueKind.FLOAT and not math.isfinite(self.data):
            raise TypeMismatch(f"Float must be finite, got {self.data!r}")

    # Constructors

    @classmethod
    def string(cls, text: str) -> Value:
        return cls(ValueKind.STRING, text)

    @classmethod
    def int(cls, number: int) -> Value:
        return cls(ValueKind.INT, number)

    @classmethod
    def float(cls, number: float) -> Value:
        if isinstance(number, int) and not isinstance(number, bool):
            number = float(number)
        return cls(ValueKind.FLOAT, number)

    @classmethod
    def boolean(cls, flag: bool) -> Value:
        return cls(ValueKind.BOOLEAN, flag)

    @classmethod
    def null(cls) -> Value:
        return cls(ValueKind.NULL)

    @classmethod
    def from_python(cls, raw: Any) -> Value:
        """Build a Value from a plain Python scalar (e.g. decoded JSON).

        Raises:
            TypeMismatch: If ``raw`` is not str, int, float, bool or None.
        """
        if raw is None:
            return cls.null()
        if isinstance(raw, bool):
            return cls.boolean(raw)
        if isinstance(raw, int):
            return cls.int(raw)
        if isinstance(raw, float):
            return cls.float(raw)
        if isinstance(raw, str):
            return cls.string(raw)
        raise TypeMismatch(f"unsupported value {raw!r} of type {type(raw).__name__}")

    # Accessors

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def to_python(self) -> PythonScalar:
        """Return the plain Python scalar for serialization."""
        return self.data

    # Comparison

    def equals(self, other: Value, null_equals_null: bool = False) -> bool:
        """SQL equality between two values.

        Args:
            other: The value to compare against.
            null_equals_null: When True, Null = Null holds.
        """
        if self.is_null or other.is_null:
            return null_equals_null and self.is_null and other.is_null
        if self.kind.is_numeric and other.kind.is_numeric:
            return self.data == other.data
        return self.kind is other.kind and self.data == other.data

    def compare(self, other: Value) -> int:
        """Order two values.

        Returns:
            -1, 0 or 1 as ``self`` sorts before, equal to, or after ``other``.

        Raises:
            TypeMismatch: If the pair is not orderable (cross-kind, Boolean
                or Null operands).
        """
        if not ValueKind.orderable(self.kind, other.kind):
            raise TypeMismatch(
                f"cannot order {self.kind.value} against {other.kind.value}"
            )
        left, right = self.data, other.data
        return (left > right) - (left < right)  # type: ignore[operator]

    def __str__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "NULL"
        if self.kind is ValueKind.BOOLEAN:
            return "true" if self.data else "false"
        return str(self.data)

    def __repr__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "Null"
        return f"{self.kind.value}({self.data!r})"
