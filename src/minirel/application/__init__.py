"""Application layer for minirel.

Exports:
    DatabaseEngine:
        - DatabaseEngine: Text/request entry point with tracing and metrics
    Table engine:
        - TableEngine: Lock-guarded operations over one Database
        - ExecutionResult: Outcome of one statement
    Requests:
        - CreateTableRequest, DropTableRequest, RenameTableRequest,
          InsertColumnRequest, InsertRowRequest, SelectRequest,
          UpdateRequest: One request type per statement kind
        - ColumnSpec, Assignment: Request building blocks
"""

from minirel.application.database_engine import DatabaseEngine
from minirel.application.table_engine import TableEngine
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

__all__ = [
    "DatabaseEngine",
    "TableEngine",
    "ExecutionResult",
    "Assignment",
    "ColumnSpec",
    "CreateTableRequest",
    "DropTableRequest",
    "InsertColumnRequest",
    "InsertRowRequest",
    "OperationRequest",
    "RenameTableRequest",
    "SelectRequest",
    "UpdateRequest",
]
