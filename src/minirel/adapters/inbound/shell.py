"""Interactive shell for minirel.

Reads one statement per line, executes it against an in-process
:class:`~minirel.application.DatabaseEngine` and prints the outcome. On a
failed statement the error is printed together with syntax examples.

Special inputs:
    exit / quit   Leave the shell
    help          Show the syntax examples
    tables        List tables
    show          Print every table with its rows
"""

from __future__ import annotations

import sys
from typing import TextIO

from minirel.application import DatabaseEngine
from minirel.infrastructure.logging import get_logger
from minirel.ports.inbound import ExecutionResult

logger = get_logger(__name__)

GREETING = """Welcome to the minirel interactive shell!
Available operations:
1. CREATE TABLE table_name (column1 TYPE, column2 TYPE, ...)
2. INSERT INTO table_name (column1, column2) VALUES (value1, value2)
3. SELECT column1, column2 FROM table_name WHERE condition
4. UPDATE table_name SET column1 = value1 WHERE condition
5. RENAME TABLE old_table_name TO new_table_name
6. DROP TABLE table_name
Type 'help' for examples, 'exit' to quit."""

SYNTAX_EXAMPLES = """Example Syntax:
1. CREATE TABLE table_name (column1 TYPE, column2 TYPE, ...)
   Example: CREATE TABLE users (id INT PRIMARY KEY, name STRING, email STRING)
2. INSERT INTO table_name (column1, column2, ...) VALUES (value1, value2, ...)
   Example: INSERT INTO users (id, name, email) VALUES (1, 'Alice', 'alice@example.com')
3. SELECT column1, column2, ... FROM table_name [WHERE condition]
   Example: SELECT id, name FROM users WHERE email = 'alice@example.com'
4. UPDATE table_name SET column1 = value1, column2 = value2, ... [WHERE condition]
   Example: UPDATE users SET name = 'Alice Smith' WHERE id = 1
5. RENAME TABLE old_table_name TO new_table_name
   Example: RENAME TABLE users TO customers
6. DROP TABLE table_name
   Example: DROP TABLE customers"""

PROMPT = "minirel> "
MAX_WIDTH = 40


class Shell:
    """Line-oriented read-eval-print loop over a DatabaseEngine."""

    def __init__(
        self,
        db: DatabaseEngine | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.db = db if db is not None else DatabaseEngine()
        self._in = stdin if stdin is not None else sys.stdin
        self._out = stdout if stdout is not None else sys.stdout
        self.running = False

    def run(self) -> None:
        """Greet, then process lines until exit or end of input."""
        self.running = True
        self._print(GREETING)

        while self.running:
            if self._in is sys.stdin:
                try:
                    line = input(PROMPT)
                except EOFError:
                    self._print("")
                    break
                except KeyboardInterrupt:
                    self._print("\n(Type 'exit' to quit)")
                    continue
            else:
                line = self._in.readline()
                if not line:
                    break
            self.handle(line)

        self.running = False
        self._print("Goodbye!")

    def handle(self, line: str) -> ExecutionResult | None:
        """Process one input line.

        Returns:
            The statement result, or None for blank lines and shell commands.
        """
        line = line.strip()
        if not line:
            return None

        command = line.lower()
        if command in ("exit", "quit"):
            self.running = False
            return None
        if command == "help":
            self._print(SYNTAX_EXAMPLES)
            return None
        if command == "tables":
            self._show_tables()
            return None
        if command == "show":
            self._show_database()
            return None

        result = self.db.execute(line)
        if result.success:
            self._print_result(result)
        else:
            logger.debug("shell_statement_failed", operation=result.operation)
            self._print(f"Error: {result.message}")
            self._print(SYNTAX_EXAMPLES)
        return result

    def _print(self, text: str) -> None:
        print(text, file=self._out)

    def _show_tables(self) -> None:
        names = self.db.list_tables()
        if not names:
            self._print("No tables found.")
            return
        for name in names:
            self._print(f"  {name}")

    def _show_database(self) -> None:
        tables = self.db.describe()["tables"]
        if not tables:
            self._print("No tables found.")
            return
        for table in tables:
            self._print(f"Table: {table['name']}")
            columns = [column["name"] for column in table["columns"]]
            rows = [["NULL" if v is None else _scalar(v) for v in row] for row in table["rows"]]
            self._print_grid(columns, rows)

    def _print_result(self, result: ExecutionResult) -> None:
        if result.operation == "select":
            self._print_grid(result.columns, [[str(v) for v in row] for row in result.rows])
            self._print(f"({len(result.rows)} row(s))")
        else:
            self._print(result.message)

    def _print_grid(self, columns: list[str], rows: list[list[str]]) -> None:
        if not columns:
            self._print("(no columns)")
            return
        widths = [len(name) for name in columns]
        for row in rows:
            for i, text in enumerate(row):
                widths[i] = max(widths[i], len(text))
        widths = [min(w, MAX_WIDTH) for w in widths]

        self._print(" | ".join(name.ljust(w)[:w] for name, w in zip(columns, widths)))
        self._print("-+-".join("-" * w for w in widths))
        for row in rows:
            self._print(" | ".join(text.ljust(w)[:w] for text, w in zip(row, widths)))


def _scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
