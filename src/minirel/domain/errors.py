"""Error kinds raised by the engine and the command parser.

Every error is terminal for the statement that raised it. Each carries a
``kind`` tag, stable across layers, and a ``detail`` naming the offending
table, column or token.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for all statement failures."""

    kind: str = "EngineError"

    def __init__(self, detail: str, message: str | None = None) -> None:
        self.detail = detail
        super().__init__(message or f"{self.kind}: {detail}")

    def to_dict(self) -> dict[str, str]:
        """Serialize to the tagged error payload used in responses."""
        return {"error": self.kind, "detail": self.detail, "message": str(self)}


class TableAlreadyExists(EngineError):
    """A table with the requested name already exists."""

    kind = "TableAlreadyExists"

    def __init__(self, table: str) -> None:
        super().__init__(table, f"Table '{table}' already exists")


class TableNotFound(EngineError):
    """No table with the requested name exists."""

    kind = "TableNotFound"

    def __init__(self, table: str) -> None:
        super().__init__(table, f"Table '{table}' does not exist")


class DuplicateColumn(EngineError):
    """A column with the requested name already exists on the table."""

    kind = "DuplicateColumn"

    def __init__(self, table: str, column: str) -> None:
        self.table = table
        super().__init__(column, f"Column '{column}' already exists in table '{table}'")


class UnknownColumn(EngineError):
    """A referenced column is not declared on the table."""

    kind = "UnknownColumn"

    def __init__(self, table: str, column: str) -> None:
        self.table = table
        super().__init__(column, f"Unknown column '{column}' in table '{table}'")


class TypeMismatch(EngineError):
    """A value kind is incompatible with a column type or an operator."""

    kind = "TypeMismatch"

    def __init__(self, detail: str) -> None:
        super().__init__(detail, f"Type mismatch: {detail}")


class StatementSyntaxError(EngineError):
    """Malformed statement text.

    Attributes:
        token: The offending token text ('' at end of input).
        position: Character offset of the token in the statement.
    """

    kind = "SyntaxError"

    def __init__(self, message: str, token: str = "", position: int = 0) -> None:
        self.token = token
        self.position = position
        where = f"'{token}'" if token else "end of input"
        super().__init__(token, f"Syntax error at {where} (position {position}): {message}")
