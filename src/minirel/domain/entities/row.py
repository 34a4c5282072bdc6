"""Table rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from minirel.domain.value_objects import Value


@dataclass
class Row:
    """Ordered values aligned 1:1 with the owning table's columns.

    Rows belong to exactly one table; callers outside the engine only ever
    receive copies.
    """

    values: list[Value] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> Value:
        return self.values[index]

    def __iter__(self) -> Iterator[Value]:
        return iter(self.values)

    def set(self, index: int, value: Value) -> None:
        self.values[index] = value

    def append(self, value: Value) -> None:
        self.values.append(value)

    def project(self, indexes: list[int]) -> Row:
        """Return a new row holding the values at ``indexes``, in order."""
        return Row([self.values[i] for i in indexes])
