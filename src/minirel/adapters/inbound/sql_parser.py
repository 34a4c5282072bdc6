"""Command parser for the SQL-like statement language.

Statement text is tokenized with sqlglot's tokenizer and parsed here, by
recursive descent, into one of the engine's operation requests.

Supported statements (keywords are case-sensitive):
    - CREATE TABLE name (col TYPE [PRIMARY KEY] [NOT NULL] [UNIQUE], ...)
    - INSERT INTO name (col, ...) VALUES (literal, ...)
    - SELECT col, ... | * FROM name [WHERE col op literal]
    - UPDATE name SET col = literal, ... [WHERE col op literal]
    - RENAME TABLE old TO new
    - DROP TABLE name

Column types are INT, FLOAT, STRING and BOOL (with INTEGER, TEXT and
BOOLEAN as aliases). Literals are single-quoted strings, unquoted integers
and floats, true/false and NULL. A trailing semicolon is allowed.
Identifiers may contain any Unicode letters and digits. SQL comments are
rejected.

The parser performs no schema lookups; whether a table or column exists,
and whether a literal fits its column, is for the engine to decide.

Example:
    >>> parser = SQLParser()
    >>> parser.parse("SELECT id, name FROM users WHERE id = 1")
    SelectRequest(table_name='users', columns=['id', 'name'], condition=...)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from sqlglot.errors import TokenError
from sqlglot.tokens import Tokenizer, TokenType

from minirel.domain.entities import ColumnType
from minirel.domain.errors import StatementSyntaxError, TypeMismatch
from minirel.domain.services import ComparisonOp, Condition
from minirel.domain.value_objects import Value
from minirel.ports.inbound import (
    Assignment,
    ColumnSpec,
    CreateTableRequest,
    DropTableRequest,
    InsertRowRequest,
    OperationRequest,
    RenameTableRequest,
    SelectRequest,
    UpdateRequest,
)

_WORD = re.compile(r"[^\W\d]\w*")
_INTEGER = re.compile(r"\d+")

RESERVED_WORDS = frozenset(
    {
        "CREATE",
        "TABLE",
        "INSERT",
        "INTO",
        "VALUES",
        "SELECT",
        "FROM",
        "WHERE",
        "UPDATE",
        "SET",
        "RENAME",
        "TO",
        "DROP",
        "NULL",
    }
)

COMPARISON_SYMBOLS = frozenset({"=", "!=", "<>", "<", "<=", ">", ">="})


class LexemeKind(Enum):
    """Token classes seen by the parser."""

    WORD = "word"  # bare word: keyword or identifier
    NAME = "name"  # double-quoted identifier
    STRING = "string"
    NUMBER = "number"
    SYMBOL = "symbol"
    END = "end"


@dataclass(frozen=True)
class Lexeme:
    """A token with its character offset in the statement."""

    kind: LexemeKind
    text: str
    position: int


def tokenize(sql: str) -> list[Lexeme]:
    """Split statement text into lexemes, terminated by an END lexeme.

    Raises:
        StatementSyntaxError: If the text cannot be tokenized (e.g. an
            unterminated string literal).
    """
    try:
        tokens = Tokenizer().tokenize(sql)
    except TokenError as e:
        raise StatementSyntaxError(f"could not tokenize statement: {e}") from e

    lexemes: list[Lexeme] = []
    for token in tokens:
        if token.comments:
            raise StatementSyntaxError(
                "comments are not allowed in statements",
                token=token.text,
                position=token.start,
            )
        if token.token_type == TokenType.STRING:
            lexemes.append(Lexeme(LexemeKind.STRING, token.text, token.start))
        elif token.token_type == TokenType.NUMBER:
            lexemes.append(Lexeme(LexemeKind.NUMBER, token.text, token.start))
        elif token.token_type == TokenType.IDENTIFIER:
            lexemes.append(Lexeme(LexemeKind.NAME, token.text, token.start))
        else:
            # Multi-word keywords such as "PRIMARY KEY" arrive as one token
            words = list(re.finditer(r"\S+", token.text))
            if words and all(_WORD.fullmatch(w.group()) for w in words):
                for w in words:
                    lexemes.append(
                        Lexeme(LexemeKind.WORD, w.group(), token.start + w.start())
                    )
            else:
                lexemes.append(Lexeme(LexemeKind.SYMBOL, token.text, token.start))

    lexemes.append(Lexeme(LexemeKind.END, "", len(sql.rstrip())))
    return lexemes


class SQLParser:
    """Parser from statement text to operation requests.

    The parser is stateless between calls and safe to share.
    """

    def parse(self, sql: str) -> OperationRequest:
        """Parse a single statement.

        Args:
            sql: The statement text.

        Returns:
            The operation request the statement describes.

        Raises:
            StatementSyntaxError: On any malformed input. No partially
                built request is ever returned.
        """
        return _StatementParser(tokenize(sql)).parse_statement()


class _StatementParser:
    """Recursive-descent parser over one statement's lexemes."""

    def __init__(self, lexemes: list[Lexeme]) -> None:
        self._lexemes = lexemes
        self._pos = 0

    # Statements

    def parse_statement(self) -> OperationRequest:
        lexeme = self._peek()
        if lexeme.kind is LexemeKind.END:
            raise self._error("empty statement", lexeme)

        handlers = {
            "CREATE": self._parse_create,
            "INSERT": self._parse_insert,
            "SELECT": self._parse_select,
            "UPDATE": self._parse_update,
            "RENAME": self._parse_rename,
            "DROP": self._parse_drop,
        }
        handler = handlers.get(lexeme.text) if lexeme.kind is LexemeKind.WORD else None
        if handler is None:
            raise self._error("expected a statement keyword", lexeme)

        request = handler()
        self._accept_symbol(";")
        end = self._peek()
        if end.kind is not LexemeKind.END:
            raise self._error("unexpected token after end of statement", end)
        return request

    def _parse_create(self) -> CreateTableRequest:
        self._expect_keyword("CREATE")
        self._expect_keyword("TABLE")
        name = self._expect_identifier("table name")

        columns: list[ColumnSpec] = []
        if self._accept_symbol("("):
            columns.append(self._parse_column_def())
            while self._accept_symbol(","):
                columns.append(self._parse_column_def())
            self._expect_symbol(")")
        return CreateTableRequest(name=name, columns=columns)

    def _parse_column_def(self) -> ColumnSpec:
        name = self._expect_identifier("column name")
        type_lexeme = self._advance()
        if type_lexeme.kind is not LexemeKind.WORD:
            raise self._error("expected a column type", type_lexeme)
        try:
            declared_type = ColumnType.from_name(type_lexeme.text)
        except TypeMismatch:
            raise self._error(
                "unknown column type (expected INT, FLOAT, STRING or BOOL)", type_lexeme
            ) from None

        primary_key = non_null = unique = False
        while True:
            if self._accept_keyword("PRIMARY"):
                self._expect_keyword("KEY")
                primary_key = True
            elif self._accept_keyword("NOT"):
                self._expect_keyword("NULL")
                non_null = True
            elif self._accept_keyword("UNIQUE"):
                unique = True
            else:
                break

        return ColumnSpec(
            name=name,
            declared_type=declared_type,
            primary_key=primary_key,
            non_null=non_null,
            unique=unique,
        )

    def _parse_insert(self) -> InsertRowRequest:
        self._expect_keyword("INSERT")
        self._expect_keyword("INTO")
        table_name = self._expect_identifier("table name")

        self._expect_symbol("(")
        column_lexemes = [self._peek()]
        columns = [self._expect_identifier("column name")]
        while self._accept_symbol(","):
            column_lexemes.append(self._peek())
            columns.append(self._expect_identifier("column name"))
        self._expect_symbol(")")

        self._expect_keyword("VALUES")
        self._expect_symbol("(")
        values = [self._parse_literal()]
        while self._accept_symbol(","):
            values.append(self._parse_literal())
        closing = self._peek()
        self._expect_symbol(")")

        if len(columns) != len(values):
            raise self._error(
                f"{len(columns)} column(s) but {len(values)} value(s)", closing
            )

        by_column: dict[str, Value] = {}
        for lexeme, column, value in zip(column_lexemes, columns, values):
            if column in by_column:
                raise self._error(f"column '{column}' listed twice", lexeme)
            by_column[column] = value
        return InsertRowRequest(table_name=table_name, values=by_column)

    def _parse_select(self) -> SelectRequest:
        self._expect_keyword("SELECT")
        columns: list[str] = []
        if not self._accept_symbol("*"):
            columns.append(self._expect_identifier("column name or '*'"))
            while self._accept_symbol(","):
                columns.append(self._expect_identifier("column name"))

        self._expect_keyword("FROM")
        table_name = self._expect_identifier("table name")
        condition = self._parse_where()
        return SelectRequest(table_name=table_name, columns=columns, condition=condition)

    def _parse_update(self) -> UpdateRequest:
        self._expect_keyword("UPDATE")
        table_name = self._expect_identifier("table name")
        self._expect_keyword("SET")

        assignments = [self._parse_assignment()]
        while self._accept_symbol(","):
            assignments.append(self._parse_assignment())

        condition = self._parse_where()
        return UpdateRequest(
            table_name=table_name, assignments=assignments, condition=condition
        )

    def _parse_assignment(self) -> Assignment:
        column = self._expect_identifier("column name")
        self._expect_symbol("=")
        return Assignment(column=column, value=self._parse_literal())

    def _parse_rename(self) -> RenameTableRequest:
        self._expect_keyword("RENAME")
        self._expect_keyword("TABLE")
        current_name = self._expect_identifier("table name")
        self._expect_keyword("TO")
        new_name = self._expect_identifier("new table name")
        return RenameTableRequest(current_name=current_name, new_name=new_name)

    def _parse_drop(self) -> DropTableRequest:
        self._expect_keyword("DROP")
        self._expect_keyword("TABLE")
        return DropTableRequest(name=self._expect_identifier("table name"))

    # Clauses

    def _parse_where(self) -> Condition | None:
        if not self._accept_keyword("WHERE"):
            return None
        column = self._expect_identifier("column name")
        op_lexeme = self._advance()
        if op_lexeme.kind is not LexemeKind.SYMBOL or op_lexeme.text not in COMPARISON_SYMBOLS:
            raise self._error("expected a comparison operator", op_lexeme)
        value = self._parse_literal()
        return Condition(column=column, op=ComparisonOp.from_symbol(op_lexeme.text), value=value)

    def _parse_literal(self) -> Value:
        lexeme = self._advance()

        if lexeme.kind is LexemeKind.STRING:
            return Value.string(lexeme.text)

        if lexeme.kind is LexemeKind.WORD:
            if lexeme.text == "NULL":
                return Value.null()
            if lexeme.text in ("true", "TRUE"):
                return Value.boolean(True)
            if lexeme.text in ("false", "FALSE"):
                return Value.boolean(False)
            raise self._error("expected a literal value", lexeme)

        negative = False
        if lexeme.kind is LexemeKind.SYMBOL and lexeme.text == "-":
            negative = True
            lexeme = self._advance()
            if lexeme.kind is not LexemeKind.NUMBER:
                raise self._error("expected a number after '-'", lexeme)

        if lexeme.kind is LexemeKind.NUMBER:
            text = f"-{lexeme.text}" if negative else lexeme.text
            try:
                if _INTEGER.fullmatch(lexeme.text):
                    return Value.int(int(text))
                return Value.float(float(text))
            except (TypeMismatch, ValueError):
                raise self._error("unparseable numeric literal", lexeme) from None

        raise self._error("expected a literal value", lexeme)

    # Token helpers

    def _peek(self) -> Lexeme:
        return self._lexemes[self._pos]

    def _advance(self) -> Lexeme:
        lexeme = self._lexemes[self._pos]
        if lexeme.kind is not LexemeKind.END:
            self._pos += 1
        return lexeme

    def _accept_keyword(self, keyword: str) -> bool:
        lexeme = self._peek()
        if lexeme.kind is LexemeKind.WORD and lexeme.text == keyword:
            self._pos += 1
            return True
        return False

    def _expect_keyword(self, keyword: str) -> None:
        if not self._accept_keyword(keyword):
            raise self._error(f"expected {keyword}", self._peek())

    def _accept_symbol(self, symbol: str) -> bool:
        lexeme = self._peek()
        if lexeme.kind is LexemeKind.SYMBOL and lexeme.text == symbol:
            self._pos += 1
            return True
        return False

    def _expect_symbol(self, symbol: str) -> None:
        if not self._accept_symbol(symbol):
            raise self._error(f"expected '{symbol}'", self._peek())

    def _expect_identifier(self, what: str) -> str:
        lexeme = self._peek()
        if lexeme.kind is LexemeKind.NAME or (
            lexeme.kind is LexemeKind.WORD and lexeme.text not in RESERVED_WORDS
        ):
            self._pos += 1
            return lexeme.text
        raise self._error(f"expected {what}", lexeme)

    @staticmethod
    def _error(message: str, lexeme: Lexeme) -> StatementSyntaxError:
        return StatementSyntaxError(message, token=lexeme.text, position=lexeme.position)
