"""
Shared test fixtures.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings require Supabase credentials; tests never connect
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from unittest.mock import patch
from typing import Generator

from models.geometry import MarginConfig
from services.layout_service import LayoutService

# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """
    Mock Supabase query builder with chainable methods.

    Filters are recorded in `filters` but not applied; set the table
    data to what the query should return. Every query is also kept in
    `MockSupabaseClient.queries`.
    """

    def __init__(self, data: list = None, count: int = None):
        self._data = data or []
        self._count = count
        self.filters = []

    def select(self, *args, **kwargs):
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def gt(self, column, value):
        self.filters.append(("gt", column, value))
        return self

    def or_(self, filters):
        self.filters.append(("or", filters))
        return self

    def order(self, column, **kwargs):
        return self

    def limit(self, count):
        return self

    def execute(self) -> MockSupabaseResponse:
        return MockSupabaseResponse(
            data=self._data,
            count=self._count if self._count is not None else len(self._data)
        )


class MockSupabaseTable:
    """Mock Supabase table with configurable responses."""

    def __init__(self, data: list = None, count: int = None, queries: list = None):
        self._data = data or []
        self._count = count
        self._queries = queries if queries is not None else []

    def select(self, *args, **kwargs):
        query = MockSupabaseQuery(self._data.copy(), self._count)
        self._queries.append(query)
        return query


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables = {}
        self.queries = []

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count}

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        config = self._tables.get(name, {"data": [], "count": None})
        return MockSupabaseTable(config["data"], config["count"], self.queries)


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("materials", [
                {"id": 1, "name": "Coated 300", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("materials", [...])
            # Now any code using get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.material_service.get_supabase_client", return_value=mock_supabase):
            with patch("services.product_config_service.get_supabase_client", return_value=mock_supabase):
                yield mock_supabase


@pytest.fixture
def default_margins() -> MarginConfig:
    """Production margins: bleed 2, gap 2, gripper 5, safety 3."""
    return MarginConfig()


@pytest.fixture
def layout_service(default_margins) -> LayoutService:
    """LayoutService with default margins, independent of .env."""
    return LayoutService(default_margins)


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Lifespan is not run, so no database connection is attempted.

    Usage:
        def test_endpoint(test_client):
            response = test_client.post("/api/layout/calculate", json={...})
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
