"""
Shared test fixtures.

MockSupabaseClient returns canned rows for every query.
InMemorySupabaseClient keeps rows between calls and honours filters, for
insert-then-update flows such as re-running an import.
"""

import re
import sys
from pathlib import Path

# Add project root to Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

import pytest
from unittest.mock import patch
from datetime import datetime, timezone
from typing import Any, Callable, Generator, Optional
from uuid import uuid4


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """Mock Supabase query builder with chainable methods."""

    def __init__(self, data: list = None, count: int = None):
        self._data = data or []
        self._count = count

    def select(self, *args, **kwargs):
        return self

    def insert(self, data):
        # Simulate insert - add id and timestamps
        if isinstance(data, dict):
            data = [data]
        for item in data:
            item["id"] = "test-uuid-123"
            item["created_at"] = _now()
            item["updated_at"] = _now()
        self._data = data
        return self

    def update(self, data):
        # Simulate update - merge with existing data
        updated_data = []
        for item in self._data:
            merged = {**item, **data}
            merged["updated_at"] = _now()
            updated_data.append(merged)
        self._data = updated_data if updated_data else [data]
        return self

    def delete(self):
        return self

    def eq(self, column, value):
        return self

    def neq(self, column, value):
        return self

    def is_(self, column, value):
        return self

    def ilike(self, column, pattern):
        return self

    def or_(self, filters):
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

    def __init__(self, data: list = None, count: int = None):
        self._data = data or []
        self._count = count

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self._data.copy(), self._count)

    def insert(self, data):
        query = MockSupabaseQuery(self._data.copy(), self._count)
        return query.insert(data)

    def update(self, data):
        # For update, pass the existing data so it can be merged
        query = MockSupabaseQuery(self._data.copy(), self._count)
        return query.update(data)

    def delete(self):
        return MockSupabaseQuery(self._data.copy(), self._count)


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables = {}

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count}

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        config = self._tables.get(name, {"data": [], "count": None})
        return MockSupabaseTable(config["data"], config["count"])


class FailingSupabaseClient:
    """Client whose every query raises, for DatabaseError paths."""

    def __init__(self, message: str = "connection refused"):
        self.message = message

    def table(self, name: str):
        raise RuntimeError(self.message)


# ===================
# IN-MEMORY SUPABASE CLIENT
# ===================

def _like_to_regex(pattern: str) -> re.Pattern:
    escaped = re.escape(pattern).replace(r"\*", ".*").replace("%", ".*")
    return re.compile(f"^{escaped}$", re.IGNORECASE)


def _predicate(column: str, operator: str, value: Any) -> Callable[[dict], bool]:
    if operator == "eq":
        return lambda row: row.get(column) == value
    if operator == "neq":
        return lambda row: row.get(column) != value
    if operator == "is":
        expected = None if value in (None, "null") else value
        return lambda row: row.get(column) is expected
    if operator == "ilike":
        regex = _like_to_regex(value)
        return lambda row: bool(regex.match(str(row.get(column) or "")))
    raise ValueError(f"Unsupported operator: {operator}")


class InMemoryQuery:
    """Chainable query that runs against InMemoryTable rows on execute()."""

    def __init__(self, table: "InMemoryTable"):
        self._table = table
        self._operation = "select"
        self._payload: Any = None
        self._filters: list[Callable[[dict], bool]] = []
        self._limit: Optional[int] = None

    def select(self, *args, **kwargs):
        self._operation = "select"
        return self

    def insert(self, data):
        self._operation = "insert"
        self._payload = data
        return self

    def update(self, data):
        self._operation = "update"
        self._payload = data
        return self

    def delete(self):
        self._operation = "delete"
        return self

    def eq(self, column, value):
        self._filters.append(_predicate(column, "eq", value))
        return self

    def neq(self, column, value):
        self._filters.append(_predicate(column, "neq", value))
        return self

    def is_(self, column, value):
        self._filters.append(_predicate(column, "is", value))
        return self

    def ilike(self, column, pattern):
        self._filters.append(_predicate(column, "ilike", pattern))
        return self

    def or_(self, filters: str):
        """PostgREST or-syntax: "col.op.value,col.op.value"."""
        predicates = []
        for part in filters.split(","):
            column, operator, value = part.split(".", 2)
            predicates.append(_predicate(column, operator, value))
        self._filters.append(lambda row: any(p(row) for p in predicates))
        return self

    def order(self, column, **kwargs):
        return self

    def limit(self, count):
        self._limit = count
        return self

    def execute(self) -> MockSupabaseResponse:
        self._table.operations.append(self._operation)

        if self._operation == "insert":
            items = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = []
            for item in items:
                row = {"created_at": _now(), "updated_at": _now(), **item}
                row.setdefault("id", str(uuid4()))
                self._table.rows.append(row)
                inserted.append(dict(row))
            return MockSupabaseResponse(data=inserted)

        matched = [row for row in self._table.rows if all(f(row) for f in self._filters)]

        if self._operation == "update":
            for row in matched:
                row.update(self._payload)
                row["updated_at"] = _now()
            return MockSupabaseResponse(data=[dict(row) for row in matched])

        if self._operation == "delete":
            removed_ids = {id(row) for row in matched}
            self._table.rows = [row for row in self._table.rows if id(row) not in removed_ids]
            return MockSupabaseResponse(data=[dict(row) for row in matched])

        data = matched[:self._limit] if self._limit is not None else matched
        return MockSupabaseResponse(data=[dict(row) for row in data], count=len(matched))


class InMemoryTable:
    def __init__(self):
        self.rows: list[dict] = []
        self.operations: list[str] = []

    def _query(self) -> InMemoryQuery:
        return InMemoryQuery(self)

    def select(self, *args, **kwargs):
        return self._query().select(*args, **kwargs)

    def insert(self, data):
        return self._query().insert(data)

    def update(self, data):
        return self._query().update(data)

    def delete(self):
        return self._query().delete()


class InMemorySupabaseClient:
    """
    Stateful stand-in for the Supabase client.

    Usage:
        def test_something(memory_db):
            memory_db.seed("perfumes", [{"id": "p1", "name": "Sauvage", ...}])
            ...
            assert len(memory_db.rows("perfumes")) == 1
    """

    def __init__(self):
        self._tables: dict[str, InMemoryTable] = {}

    def table(self, name: str) -> InMemoryTable:
        return self._tables.setdefault(name, InMemoryTable())

    def seed(self, name: str, rows: list[dict]) -> None:
        self.table(name).rows.extend(dict(row) for row in rows)

    def rows(self, name: str) -> list[dict]:
        return self.table(name).rows

    def operations(self, name: str) -> list[str]:
        return self.table(name).operations


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("perfumes", [
                {"id": "1", "name": "Sauvage", "brand": "Dior", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def memory_db() -> InMemorySupabaseClient:
    """Empty stateful Supabase stand-in."""
    return InMemorySupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the cached database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("perfumes", [...])
            # Now any code using get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        yield mock_supabase


@pytest.fixture
def sample_perfume_data() -> dict:
    """Sample persisted perfume row."""
    return {
        "id": "test-uuid-123",
        "name": "Sauvage Eau de Toilette 100ml",
        "brand": "Dior",
        "price": 1899.0,
        "currency": "ZAR",
        "amazon_url": "https://www.amazon.co.za/dp/B01MTP6A7Q",
        "amazon_asin": "B01MTP6A7Q",
        "image_url": None,
        "is_available": True,
        "created_at": "2025-12-05T10:00:00Z",
        "updated_at": "2025-12-05T10:00:00Z"
    }


@pytest.fixture
def sample_rows() -> list:
    """Raw spreadsheet rows using a mix of header spellings."""
    return [
        {
            "Product Name": "Sauvage Eau de Toilette 100ml",
            "Brand": "Dior",
            "Price": "R1,899.00",
            "ASIN": "B01MTP6A7Q",
            "Notes": "bergamot, pepper; ambroxan",
        },
        {
            "Title": "Tom Ford Oud Wood Eau de Parfum 50ml",
            "Price": 4250,
            "Amazon Link": "https://www.amazon.co.za/dp/B000TFOUD1",
            "Longevity": 4,
        },
        {
            "Product Name": "Mystery Scent",
            "Brand": "Unknown House",
            "Longevity": 7,
        },
    ]


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/health")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
