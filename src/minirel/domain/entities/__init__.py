"""Schema entities.

Exports:
    Column:
        - ColumnType: Declarable column types (STRING, INT, FLOAT, BOOL)
        - ColumnConstraints: Primary key / non-null / unique flags (metadata only)
        - Column: Named, typed field definition

    Data:
        - Row: Values aligned to a table's columns
        - Table: Named columns plus insertion-ordered rows
        - Database: Table catalog keyed by name
"""

from minirel.domain.entities.column import Column, ColumnConstraints, ColumnType
from minirel.domain.entities.database import Database
from minirel.domain.entities.row import Row
from minirel.domain.entities.table import Table

__all__ = [
    "Column",
    "ColumnConstraints",
    "ColumnType",
    "Database",
    "Row",
    "Table",
]
