"""Shared pytest fixtures for prepSQL unit and integration tests."""
from __future__ import annotations

import pytest

from prepsql.schema import FieldSchema
from tests.fixtures import FakeExecutor, load_field_schemas


@pytest.fixture(scope="session")
def schemas() -> dict[str, FieldSchema]:
    """Sample field schemas shared across all tests."""
    return load_field_schemas()


@pytest.fixture(scope="session")
def feedback_fields(schemas: dict[str, FieldSchema]) -> FieldSchema:
    return schemas["feedbacks"]


@pytest.fixture(scope="session")
def user_fields(schemas: dict[str, FieldSchema]) -> FieldSchema:
    return schemas["users"]


@pytest.fixture
def executor() -> FakeExecutor:
    """Executor whose EXPLAIN output reports 3 rows."""
    return FakeExecutor()
