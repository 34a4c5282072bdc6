"""REST API adapter for minirel.

This module provides a FastAPI-based REST API exposing one endpoint per
engine operation, plus a raw statement endpoint. Values travel as plain
JSON scalars: strings, integers, floats, booleans and null.

Endpoints:
    GET  /              - Snapshot of every table (schema and rows)
    GET  /health        - Health check
    GET  /metrics       - Prometheus metrics (when enabled)
    POST /execute       - Execute one statement given as text
    POST /create_table  - Create a table
    POST /drop_table    - Drop a table
    POST /rename_table  - Rename a table
    POST /insert_column - Append a column to a table
    POST /insert_row    - Insert one row
    POST /select        - Select rows
    POST /update_table  - Update rows

Failed statements are answered with ``{"success": false, "error": kind,
"detail": ..., "message": ...}`` and a status chosen by error kind.

Usage:
    from minirel.adapters.inbound.rest_api import create_app
    from minirel.application import DatabaseEngine

    app = create_app(DatabaseEngine())
    # Run with uvicorn: uvicorn app:app --host 0.0.0.0 --port 3000
"""

from __future__ import annotations

from typing import Any, Callable, Literal, Optional, Union

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from minirel import __version__
from minirel.application import DatabaseEngine
from minirel.domain.entities import ColumnType
from minirel.domain.errors import EngineError
from minirel.domain.services import ComparisonOp, Condition
from minirel.domain.value_objects import Value
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

JSONScalar = Optional[Union[StrictBool, StrictInt, StrictFloat, StrictStr]]

ERROR_STATUS: dict[str, int] = {
    "TableNotFound": 404,
    "TableAlreadyExists": 409,
    "DuplicateColumn": 409,
    "UnknownColumn": 400,
    "TypeMismatch": 400,
    "SyntaxError": 400,
}


class ColumnModel(BaseModel):
    """A column definition."""

    name: str = Field(..., description="Column name")
    type: str = Field(..., description="Column type: INT, FLOAT, STRING or BOOL")
    primary_key: bool = Field(False, description="Primary key flag (not enforced)")
    non_null: bool = Field(False, description="Non-null flag (not enforced)")
    unique: bool = Field(False, description="Unique flag (not enforced)")

    def to_spec(self) -> ColumnSpec:
        return ColumnSpec(
            name=self.name,
            declared_type=ColumnType.from_name(self.type),
            primary_key=self.primary_key,
            non_null=self.non_null,
            unique=self.unique,
        )


class ConditionModel(BaseModel):
    """A single ``column op value`` predicate."""

    column: str = Field(..., description="Column to compare")
    op: Literal["=", "!=", "<>", "<", "<=", ">", ">="] = Field("=", description="Operator")
    value: JSONScalar = Field(None, description="Literal to compare against")

    def to_condition(self) -> Condition:
        return Condition(
            column=self.column,
            op=ComparisonOp.from_symbol(self.op),
            value=Value.from_python(self.value),
        )


class AssignmentModel(BaseModel):
    """``column = value`` in an update."""

    column: str = Field(..., description="Column to set")
    value: JSONScalar = Field(None, description="New value")


class StatementRequest(BaseModel):
    """Request model for statement execution."""

    sql: str = Field(..., description="Statement to execute")


class CreateTableBody(BaseModel):
    name: str = Field(..., description="Table name")
    columns: list[ColumnModel] = Field(default_factory=list, description="Column definitions")


class DropTableBody(BaseModel):
    name: str = Field(..., description="Table name")


class RenameTableBody(BaseModel):
    current_name: str = Field(..., description="Existing table name")
    new_name: str = Field(..., description="New table name")


class InsertColumnBody(BaseModel):
    table_name: str = Field(..., description="Table name")
    column: ColumnModel = Field(..., description="Column to append")


class InsertRowBody(BaseModel):
    table_name: str = Field(..., description="Table name")
    values: dict[str, JSONScalar] = Field(
        default_factory=dict, description="Values by column; missing columns are null"
    )


class SelectBody(BaseModel):
    table_name: str = Field(..., description="Table name")
    columns: list[str] | None = Field(None, description="Projection; null or [] for all")
    condition: ConditionModel | None = Field(None, description="Optional predicate")


class UpdateBody(BaseModel):
    table_name: str = Field(..., description="Table name")
    updates: list[AssignmentModel] = Field(..., description="Assignments to apply")
    condition: ConditionModel | None = Field(None, description="Optional predicate")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    tables: int = Field(..., description="Number of tables")


def _to_response(result: ExecutionResult) -> JSONResponse:
    """Convert an ExecutionResult to a JSON response."""
    status = 200 if result.error is None else ERROR_STATUS.get(result.error.kind, 400)
    return JSONResponse(status_code=status, content=result.to_dict())


def create_app(db: DatabaseEngine, metrics_enabled: bool = True) -> FastAPI:
    """Create a FastAPI application for the engine.

    Args:
        db: The database engine to serve.
        metrics_enabled: Whether to expose ``/metrics``.

    Returns:
        A configured FastAPI application.
    """
    app = FastAPI(
        title="minirel API",
        description="REST API for the minirel table engine",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def submit(operation: str, build: Callable[[], OperationRequest]) -> JSONResponse:
        # Building a request can itself fail, e.g. on an unknown column type
        try:
            request = build()
        except EngineError as e:
            return _to_response(db.reject(operation, e))
        return _to_response(db.submit(request))

    @app.get("/", tags=["Database"])
    def show_database() -> dict[str, Any]:
        """Show every table with its columns and rows."""
        return db.describe()

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            tables=len(db.list_tables()),
        )

    if metrics_enabled:

        @app.get("/metrics", tags=["Health"])
        def metrics() -> Response:
            """Prometheus scrape endpoint."""
            return Response(
                content=generate_latest(db.metrics.registry),
                media_type=CONTENT_TYPE_LATEST,
            )

    @app.post("/execute", tags=["SQL"])
    def execute_statement(body: StatementRequest) -> JSONResponse:
        """Execute one statement given as text."""
        return _to_response(db.execute(body.sql))

    @app.post("/create_table", tags=["Tables"])
    def create_table(body: CreateTableBody) -> JSONResponse:
        return submit(
            CreateTableRequest.operation,
            lambda: CreateTableRequest(
                name=body.name, columns=[c.to_spec() for c in body.columns]
            )
        )

    @app.post("/drop_table", tags=["Tables"])
    def drop_table(body: DropTableBody) -> JSONResponse:
        return submit(DropTableRequest.operation, lambda: DropTableRequest(name=body.name))

    @app.post("/rename_table", tags=["Tables"])
    def rename_table(body: RenameTableBody) -> JSONResponse:
        return submit(
            RenameTableRequest.operation,
            lambda: RenameTableRequest(
                current_name=body.current_name, new_name=body.new_name
            )
        )

    @app.post("/insert_column", tags=["Tables"])
    def insert_column(body: InsertColumnBody) -> JSONResponse:
        return submit(
            InsertColumnRequest.operation,
            lambda: InsertColumnRequest(
                table_name=body.table_name, column=body.column.to_spec()
            )
        )

    @app.post("/insert_row", tags=["Rows"])
    def insert_row(body: InsertRowBody) -> JSONResponse:
        return submit(
            InsertRowRequest.operation,
            lambda: InsertRowRequest(
                table_name=body.table_name,
                values={k: Value.from_python(v) for k, v in body.values.items()},
            )
        )

    @app.post("/select", tags=["Rows"])
    def select(body: SelectBody) -> JSONResponse:
        return submit(
            SelectRequest.operation,
            lambda: SelectRequest(
                table_name=body.table_name,
                columns=body.columns or [],
                condition=body.condition.to_condition() if body.condition else None,
            )
        )

    @app.post("/update_table", tags=["Rows"])
    def update_table(body: UpdateBody) -> JSONResponse:
        return submit(
            UpdateRequest.operation,
            lambda: UpdateRequest(
                table_name=body.table_name,
                assignments=[
                    Assignment(column=u.column, value=Value.from_python(u.value))
                    for u in body.updates
                ],
                condition=body.condition.to_condition() if body.condition else None,
            )
        )

    return app


def run_server(
    db: DatabaseEngine,
    host: str = "0.0.0.0",
    port: int = 3000,
    metrics_enabled: bool = True,
) -> None:
    """Run the REST API server.

    Args:
        db: The database engine.
        host: Host to bind to.
        port: Port to bind to.
        metrics_enabled: Whether to expose ``/metrics``.
    """
    import uvicorn

    app = create_app(db, metrics_enabled=metrics_enabled)
    uvicorn.run(app, host=host, port=port, log_config=None)
