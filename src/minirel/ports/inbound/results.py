"""Results returned for executed statements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from minirel.domain.errors import EngineError
from minirel.domain.value_objects import Value


@dataclass
class ExecutionResult:
    """Outcome of one statement.

    Exactly one of the success payloads is meaningful per operation:
    ``rows``/``columns`` for select, ``affected_rows`` for insert and
    update, ``message`` as acknowledgement for everything else. A failed
    statement carries ``error`` and nothing else.
    """

    operation: str = ""
    rows: list[list[Value]] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    affected_rows: int = 0
    message: str = ""
    error: EngineError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, operation: str, error: EngineError) -> ExecutionResult:
        return cls(operation=operation, message=str(error), error=error)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with values as plain JSON scalars."""
        if self.error is not None:
            return {"success": False, "operation": self.operation, **self.error.to_dict()}
        return {
            "success": True,
            "operation": self.operation,
            "message": self.message,
            "columns": self.columns,
            "rows": [[value.to_python() for value in row] for row in self.rows],
            "affected_rows": self.affected_rows,
        }
