"""Inbound ports - request and response shapes of the engine.

Exports:
    Requests:
        - CreateTableRequest, DropTableRequest, RenameTableRequest,
          InsertColumnRequest, InsertRowRequest, SelectRequest,
          UpdateRequest: One request type per statement kind
        - OperationRequest: Union of all request types
        - ColumnSpec, Assignment: Request building blocks
    Results:
        - ExecutionResult: Success payload or tagged error
"""

from minirel.ports.inbound.requests import (
    Assignment,
    ColumnSpec,
    CreateTableRequest,
    DropTableRequest,
    InsertColumnRequest,
    InsertRowRequest,
    OperationRequest,
    RenameTableRequest,
    SelectRequest,
    UpdateRequest,
)
from minirel.ports.inbound.results import ExecutionResult

__all__ = [
    "Assignment",
    "ColumnSpec",
    "CreateTableRequest",
    "DropTableRequest",
    "ExecutionResult",
    "InsertColumnRequest",
    "InsertRowRequest",
    "OperationRequest",
    "RenameTableRequest",
    "SelectRequest",
    "UpdateRequest",
]
