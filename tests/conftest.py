"""Pytest configuration and fixtures for minirel tests."""

from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from minirel.adapters.inbound.sql_parser import SQLParser
from minirel.application import DatabaseEngine, TableEngine
from minirel.domain.entities import ColumnType
from minirel.domain.value_objects import Value
from minirel.infrastructure.metrics import MetricsRegistry
from minirel.ports.inbound import ColumnSpec


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def engine() -> TableEngine:
    """Provide an empty table engine."""
    return TableEngine()


@pytest.fixture
def users_engine(engine: TableEngine) -> TableEngine:
    """Provide an engine holding a ``users`` table with three rows."""
    engine.create_table(
        "users",
        [
            ColumnSpec("id", ColumnType.INT, primary_key=True),
            ColumnSpec("name", ColumnType.STRING),
            ColumnSpec("age", ColumnType.INT),
        ],
    )
    engine.insert_row("users", {"id": Value.int(1), "name": Value.string("Alice"), "age": Value.int(30)})
    engine.insert_row("users", {"id": Value.int(2), "name": Value.string("Bob"), "age": Value.int(17)})
    engine.insert_row("users", {"id": Value.int(3), "name": Value.string("Carol")})
    return engine


@pytest.fixture
def parser() -> SQLParser:
    """Provide a statement parser."""
    return SQLParser()


@pytest.fixture
def db(metrics_registry: MetricsRegistry) -> DatabaseEngine:
    """Provide a database engine wired to a private metrics registry."""
    return DatabaseEngine(metrics=metrics_registry)


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
