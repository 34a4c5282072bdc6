"""Unit tests for the table engine."""

from __future__ import annotations

import threading

import pytest

from minirel.application import TableEngine
from minirel.domain.entities import ColumnType
from minirel.domain.errors import (
    DuplicateColumn,
    TableAlreadyExists,
    TableNotFound,
    TypeMismatch,
    UnknownColumn,
)
from minirel.domain.services import ComparisonOp, Condition
from minirel.domain.value_objects import Value
from minirel.ports.inbound import (
    Assignment,
    ColumnSpec,
    CreateTableRequest,
    DropTableRequest,
    InsertColumnRequest,
    InsertRowRequest,
    RenameTableRequest,
    SelectRequest,
    UpdateRequest,
)


@pytest.mark.unit
class TestTableLifecycle:
    """Tests for create, drop, rename and insert_column."""

    def test_select_after_create_is_empty(self, engine: TableEngine) -> None:
        engine.create_table("t", [ColumnSpec("a", ColumnType.INT)])

        result = engine.select("t")

        assert result.rows == []
        assert result.columns == ["a"]

    def test_create_without_columns(self, engine: TableEngine) -> None:
        engine.create_table("bare")
        assert engine.select("bare").columns == []

    def test_create_existing(self, users_engine: TableEngine) -> None:
        with pytest.raises(TableAlreadyExists):
            users_engine.create_table("users", [ColumnSpec("x", ColumnType.INT)])
        assert users_engine.select("users").columns == ["id", "name", "age"]

    def test_create_duplicate_column(self, engine: TableEngine) -> None:
        with pytest.raises(DuplicateColumn):
            engine.create_table(
                "t", [ColumnSpec("a", ColumnType.INT), ColumnSpec("a", ColumnType.STRING)]
            )
        assert engine.list_tables() == []

    def test_constraints_are_not_enforced(self, users_engine: TableEngine) -> None:
        """A repeated primary key is accepted."""
        users_engine.insert_row("users", {"id": Value.int(1), "name": Value.string("Dup")})
        assert len(users_engine.select("users").rows) == 4

    def test_drop_table(self, users_engine: TableEngine) -> None:
        users_engine.drop_table("users")

        assert users_engine.list_tables() == []
        with pytest.raises(TableNotFound):
            users_engine.select("users")
        with pytest.raises(TableNotFound):
            users_engine.drop_table("users")

    def test_rename_preserves_rows(self, users_engine: TableEngine) -> None:
        before = users_engine.select("users").rows

        users_engine.rename_table("users", "people")

        assert users_engine.select("people").rows == before
        with pytest.raises(TableNotFound):
            users_engine.select("users")

    def test_rename_errors(self, users_engine: TableEngine) -> None:
        users_engine.create_table("other")
        with pytest.raises(TableNotFound):
            users_engine.rename_table("missing", "x")
        with pytest.raises(TableAlreadyExists):
            users_engine.rename_table("users", "other")
        assert sorted(users_engine.list_tables()) == ["other", "users"]

    def test_insert_column_backfills(self, users_engine: TableEngine) -> None:
        users_engine.insert_column("users", ColumnSpec("email", ColumnType.STRING))

        result = users_engine.select("users")
        assert result.columns == ["id", "name", "age", "email"]
        assert all(len(row) == 4 for row in result.rows)
        assert all(row[3] == Value.null() for row in result.rows)

    def test_insert_column_errors(self, users_engine: TableEngine) -> None:
        with pytest.raises(DuplicateColumn):
            users_engine.insert_column("users", ColumnSpec("name", ColumnType.STRING))
        with pytest.raises(TableNotFound):
            users_engine.insert_column("nope", ColumnSpec("x", ColumnType.INT))


@pytest.mark.unit
class TestRows:
    """Tests for insert_row, select and update."""

    def test_insert_fills_missing_with_null(self, users_engine: TableEngine) -> None:
        rows = users_engine.select("users").rows
        assert rows[2] == [Value.int(3), Value.string("Carol"), Value.null()]

    def test_insert_order_independent_of_value_order(self, engine: TableEngine) -> None:
        engine.create_table(
            "t", [ColumnSpec("a", ColumnType.INT), ColumnSpec("b", ColumnType.STRING)]
        )
        engine.insert_row("t", {"b": Value.string("x"), "a": Value.int(1)})
        assert engine.select("t").rows == [[Value.int(1), Value.string("x")]]

    def test_insert_type_mismatch_leaves_table_unchanged(
        self, users_engine: TableEngine
    ) -> None:
        before = users_engine.select("users").rows
        with pytest.raises(TypeMismatch):
            users_engine.insert_row(
                "users", {"id": Value.int(9), "age": Value.string("old")}
            )
        assert users_engine.select("users").rows == before

    def test_insert_unknown_column(self, users_engine: TableEngine) -> None:
        with pytest.raises(UnknownColumn):
            users_engine.insert_row("users", {"email": Value.string("a@b.c")})
        assert len(users_engine.select("users").rows) == 3

    def test_insert_missing_table(self, engine: TableEngine) -> None:
        with pytest.raises(TableNotFound):
            engine.insert_row("nope", {})

    def test_insert_null_into_any_column(self, users_engine: TableEngine) -> None:
        assert users_engine.insert_row("users", {"id": Value.null()}) == 1

    def test_select_projection_order(self, users_engine: TableEngine) -> None:
        result = users_engine.select("users", ["name", "id"])

        assert result.columns == ["name", "id"]
        assert result.rows[0] == [Value.string("Alice"), Value.int(1)]

    def test_select_with_condition(self, users_engine: TableEngine) -> None:
        result = users_engine.select(
            "users", ["name"], Condition("age", ComparisonOp.GE, Value.int(18))
        )
        assert result.rows == [[Value.string("Alice")]]

    def test_select_unknown_column(self, users_engine: TableEngine) -> None:
        with pytest.raises(UnknownColumn):
            users_engine.select("users", ["email"])

    def test_select_returns_copies(self, users_engine: TableEngine) -> None:
        result = users_engine.select("users")
        result.rows[0][0] = Value.int(100)
        assert users_engine.select("users").rows[0][0] == Value.int(1)

    def test_update_matching_rows(self, users_engine: TableEngine) -> None:
        count = users_engine.update(
            "users",
            [Assignment("name", Value.string("Adult"))],
            Condition("age", ComparisonOp.GT, Value.int(18)),
        )

        assert count == 1
        names = [row[0] for row in users_engine.select("users", ["name"]).rows]
        assert names == [Value.string("Adult"), Value.string("Bob"), Value.string("Carol")]

    def test_update_without_condition(self, users_engine: TableEngine) -> None:
        assert users_engine.update("users", [Assignment("age", Value.int(0))]) == 3

    def test_update_zero_matches(self, users_engine: TableEngine) -> None:
        before = users_engine.select("users").rows
        count = users_engine.update(
            "users",
            [Assignment("age", Value.int(99))],
            Condition("id", ComparisonOp.EQ, Value.int(42)),
        )
        assert count == 0
        assert users_engine.select("users").rows == before

    def test_update_type_mismatch_is_atomic(self, users_engine: TableEngine) -> None:
        before = users_engine.select("users").rows
        with pytest.raises(TypeMismatch):
            users_engine.update(
                "users",
                [Assignment("name", Value.string("X")), Assignment("age", Value.string("y"))],
            )
        assert users_engine.select("users").rows == before

    def test_update_unorderable_condition(self, users_engine: TableEngine) -> None:
        before = users_engine.select("users").rows
        with pytest.raises(TypeMismatch):
            users_engine.update(
                "users",
                [Assignment("age", Value.int(1))],
                Condition("name", ComparisonOp.GT, Value.int(3)),
            )
        assert users_engine.select("users").rows == before

    def test_null_equals_null_engine(self) -> None:
        engine = TableEngine(null_equals_null=True)
        engine.create_table("t", [ColumnSpec("a", ColumnType.INT)])
        engine.insert_row("t", {})
        engine.insert_row("t", {"a": Value.int(1)})

        result = engine.select("t", condition=Condition("a", ComparisonOp.EQ, Value.null()))
        assert result.rows == [[Value.null()]]


@pytest.mark.unit
class TestExecuteDispatch:
    """Tests for TableEngine.execute."""

    def test_requests_round_trip(self, engine: TableEngine) -> None:
        result = engine.execute(
            CreateTableRequest("t", [ColumnSpec("a", ColumnType.INT)])
        )
        assert result.success
        assert result.message == "OK: Table 't' created"

        result = engine.execute(InsertRowRequest("t", {"a": Value.int(5)}))
        assert result.affected_rows == 1

        result = engine.execute(InsertColumnRequest("t", ColumnSpec("b", ColumnType.BOOLEAN)))
        assert result.operation == "insert_column"

        result = engine.execute(
            UpdateRequest("t", [Assignment("b", Value.boolean(True))], None)
        )
        assert result.affected_rows == 1

        result = engine.execute(RenameTableRequest("t", "u"))
        assert "renamed" in result.message

        result = engine.execute(SelectRequest("u"))
        assert result.rows == [[Value.int(5), Value.boolean(True)]]

        result = engine.execute(DropTableRequest("u"))
        assert result.success
        assert engine.table_count == 0

    def test_errors_propagate(self, engine: TableEngine) -> None:
        with pytest.raises(TableNotFound):
            engine.execute(SelectRequest("missing"))

    def test_unsupported_request(self, engine: TableEngine) -> None:
        with pytest.raises(TypeError):
            engine.execute("SELECT 1")  # type: ignore[arg-type]

    def test_describe(self, users_engine: TableEngine) -> None:
        snapshot = users_engine.describe()
        assert [t["name"] for t in snapshot["tables"]] == ["users"]
        assert snapshot["tables"][0]["rows"][2] == [3, "Carol", None]


@pytest.mark.unit
class TestConcurrency:
    """Concurrent statements are serialized."""

    def test_concurrent_inserts(self, engine: TableEngine) -> None:
        engine.create_table("t", [ColumnSpec("n", ColumnType.INT)])

        def worker(start: int) -> None:
            for i in range(start, start + 100):
                engine.insert_row("t", {"n": Value.int(i)})

        threads = [threading.Thread(target=worker, args=(k * 100,)) for k in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        rows = engine.select("t").rows
        assert len(rows) == 400
        assert sorted(row[0].data for row in rows) == list(range(400))
