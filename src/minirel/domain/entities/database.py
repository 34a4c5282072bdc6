"""The table catalog."""

from __future__ import annotations

from typing import Iterator

from minirel.domain.entities.table import Table
from minirel.domain.errors import TableAlreadyExists, TableNotFound


class Database:
    """Mapping from table name to Table.

    Not thread-safe on its own; the table engine serializes access.
    """

    def __init__(self) -> None:
        self._tables: dict[str, Table] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[Table]:
        return iter(self._tables.values())

    def names(self) -> list[str]:
        return list(self._tables)

    def get(self, name: str) -> Table:
        """Look up a table.

        Raises:
            TableNotFound: If no table has this name.
        """
        table = self._tables.get(name)
        if table is None:
            raise TableNotFound(name)
        return table

    def add(self, table: Table) -> None:
        if table.name in self._tables:
            raise TableAlreadyExists(table.name)
        self._tables[table.name] = table

    def remove(self, name: str) -> Table:
        if name not in self._tables:
            raise TableNotFound(name)
        return self._tables.pop(name)

    def rename(self, old: str, new: str) -> Table:
        """Re-key a table. The Table object and its rows are kept."""
        if old not in self._tables:
            raise TableNotFound(old)
        if new in self._tables:
            raise TableAlreadyExists(new)
        table = self._tables.pop(old)
        table.name = new
        self._tables[new] = table
        return table
