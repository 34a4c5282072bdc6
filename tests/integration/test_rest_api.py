"""Integration tests for the REST API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from minirel.adapters.inbound.rest_api import create_app
from minirel.application import DatabaseEngine


@pytest.fixture
def client(db: DatabaseEngine) -> TestClient:
    return TestClient(create_app(db))


@pytest.fixture
def users(client: TestClient) -> TestClient:
    """A client whose database holds a ``users`` table with two rows."""
    response = client.post(
        "/create_table",
        json={
            "name": "users",
            "columns": [
                {"name": "id", "type": "INT", "primary_key": True},
                {"name": "name", "type": "STRING"},
            ],
        },
    )
    assert response.status_code == 200
    client.post("/insert_row", json={"table_name": "users", "values": {"id": 1, "name": "Alice"}})
    client.post("/insert_row", json={"table_name": "users", "values": {"id": 2}})
    return client


@pytest.mark.integration
class TestRestApi:
    """Tests for the operation endpoints."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["tables"] == 0

    def test_root_shows_database(self, users: TestClient) -> None:
        body = users.get("/").json()

        assert body["tables"][0]["name"] == "users"
        assert body["tables"][0]["columns"][0]["primary_key"] is True
        assert body["tables"][0]["rows"] == [[1, "Alice"], [2, None]]

    def test_select(self, users: TestClient) -> None:
        response = users.post(
            "/select",
            json={
                "table_name": "users",
                "columns": ["name"],
                "condition": {"column": "id", "op": "=", "value": 1},
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["columns"] == ["name"]
        assert body["rows"] == [["Alice"]]

    def test_select_all_columns(self, users: TestClient) -> None:
        body = users.post("/select", json={"table_name": "users"}).json()
        assert body["columns"] == ["id", "name"]
        assert len(body["rows"]) == 2

    def test_update_table(self, users: TestClient) -> None:
        response = users.post(
            "/update_table",
            json={
                "table_name": "users",
                "updates": [{"column": "name", "value": "Bob"}],
                "condition": {"column": "id", "op": ">=", "value": 2},
            },
        )

        assert response.status_code == 200
        assert response.json()["affected_rows"] == 1
        rows = users.post("/select", json={"table_name": "users"}).json()["rows"]
        assert rows == [[1, "Alice"], [2, "Bob"]]

    def test_insert_column_and_rename(self, users: TestClient) -> None:
        response = users.post(
            "/insert_column",
            json={"table_name": "users", "column": {"name": "active", "type": "BOOL"}},
        )
        assert response.status_code == 200

        response = users.post(
            "/rename_table", json={"current_name": "users", "new_name": "people"}
        )
        assert response.status_code == 200

        rows = users.post("/select", json={"table_name": "people"}).json()["rows"]
        assert rows == [[1, "Alice", None], [2, None, None]]

    def test_drop_table(self, users: TestClient) -> None:
        assert users.post("/drop_table", json={"name": "users"}).status_code == 200
        assert users.get("/").json() == {"tables": []}

    def test_execute_statement(self, client: TestClient) -> None:
        client.post("/execute", json={"sql": "CREATE TABLE t (a FLOAT)"})
        client.post("/execute", json={"sql": "INSERT INTO t (a) VALUES (1.5)"})

        body = client.post("/execute", json={"sql": "SELECT * FROM t"}).json()

        assert body["rows"] == [[1.5]]


@pytest.mark.integration
class TestRestApiErrors:
    """Failed statements map to error payloads and statuses."""

    def test_table_not_found(self, client: TestClient) -> None:
        response = client.post("/select", json={"table_name": "ghost"})

        assert response.status_code == 404
        assert response.json()["success"] is False
        assert response.json()["error"] == "TableNotFound"
        assert response.json()["detail"] == "ghost"

    def test_table_already_exists(self, users: TestClient) -> None:
        response = users.post("/create_table", json={"name": "users"})
        assert response.status_code == 409
        assert response.json()["error"] == "TableAlreadyExists"

    def test_duplicate_column(self, users: TestClient) -> None:
        response = users.post(
            "/insert_column",
            json={"table_name": "users", "column": {"name": "id", "type": "INT"}},
        )
        assert response.status_code == 409
        assert response.json()["error"] == "DuplicateColumn"

    def test_unknown_column(self, users: TestClient) -> None:
        response = users.post(
            "/insert_row", json={"table_name": "users", "values": {"email": "x"}}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "UnknownColumn"

    def test_type_mismatch(self, users: TestClient) -> None:
        response = users.post(
            "/insert_row", json={"table_name": "users", "values": {"id": "one"}}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "TypeMismatch"
        assert len(users.get("/").json()["tables"][0]["rows"]) == 2

    def test_unknown_column_type(self, client: TestClient) -> None:
        response = client.post(
            "/create_table", json={"name": "t", "columns": [{"name": "a", "type": "BLOB"}]}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "TypeMismatch"
        assert response.json()["operation"] == "create_table"

    def test_syntax_error(self, client: TestClient) -> None:
        response = client.post("/execute", json={"sql": "SELECT FROM"})
        assert response.status_code == 400
        assert response.json()["error"] == "SyntaxError"

    def test_invalid_body(self, client: TestClient) -> None:
        response = client.post("/rename_table", json={"current_name": "a"})
        assert response.status_code == 422


@pytest.mark.integration
class TestMetricsEndpoint:
    """Tests for /metrics."""

    def test_metrics_exposed(self, client: TestClient) -> None:
        client.post("/execute", json={"sql": "CREATE TABLE t"})

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "minirel_statements_total" in response.text

    def test_metrics_disabled(self, db: DatabaseEngine) -> None:
        client = TestClient(create_app(db, metrics_enabled=False))
        assert client.get("/metrics").status_code == 404


@pytest.mark.integration
class TestRestApiNonFiniteFloats:
    """Infinite and NaN floats are rejected and never reach a table."""

    @pytest.fixture
    def floats(self, client: TestClient) -> TestClient:
        client.post("/execute", json={"sql": "CREATE TABLE t (f FLOAT)"})
        return client

    def test_nan_in_body(self, floats: TestClient) -> None:
        response = floats.post(
            "/insert_row",
            content='{"table_name": "t", "values": {"f": NaN}}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "TypeMismatch"
        select = floats.post("/select", json={"table_name": "t"})
        assert select.status_code == 200
        assert select.json()["rows"] == []

    def test_overflowing_literal(self, floats: TestClient) -> None:
        response = floats.post("/execute", json={"sql": "INSERT INTO t (f) VALUES (1e999)"})

        assert response.status_code == 400
        assert response.json()["error"] == "SyntaxError"
        select = floats.post("/execute", json={"sql": "SELECT * FROM t"})
        assert select.status_code == 200
        assert select.json()["rows"] == []


@pytest.mark.integration
class TestRestApiRejectionMetrics:
    """Requests that fail before execution are still counted."""

    def test_unbuildable_request_counted(self, db: DatabaseEngine, client: TestClient) -> None:
        client.post(
            "/create_table", json={"name": "t", "columns": [{"name": "a", "type": "BLOB"}]}
        )

        assert (
            db.metrics.registry.get_sample_value(
                "minirel_statements_total",
                {"operation": "create_table", "status": "TypeMismatch"},
            )
            == 1
        )
