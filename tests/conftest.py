"""
Shared test fixtures.
"""

import os
import sys
from copy import deepcopy
from pathlib import Path

# Add project root to Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

# Settings require Supabase credentials; tests never connect
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from datetime import datetime, timezone
from typing import Any, Optional
from unittest.mock import MagicMock

from models.price_history import week_column
from services.storage_service import StorageResult


# ===================
# IN-MEMORY STORAGE
# ===================

class InMemoryStorage:
    """
    Stand-in for StorageService backed by dicts.

    Records every write in `writes` so tests can assert on what was (and
    was not) persisted.
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.writes: list[tuple] = []
        self.fail_operations: set[str] = set()
        self.upsert_errors: dict[str, tuple[str, Optional[str]]] = {}
        self._next_id = 1

    # Test helpers

    def set_table_data(self, table: str, rows: list[dict]) -> None:
        self.tables[table] = deepcopy(rows)

    def row(self, table: str, slug: str) -> Optional[dict]:
        for row in self.tables.get(table, []):
            if row.get("slug") == slug:
                return row
        return None

    def _failed(self, operation: str) -> Optional[StorageResult]:
        if operation in self.fail_operations:
            return StorageResult(error=f"{operation} failed", error_code="XX000")
        return None

    # StorageService interface

    def select_data(self, table: str, columns: str = "*") -> StorageResult:
        failed = self._failed("select")
        if failed:
            return failed
        names = [c.strip() for c in columns.split(",")]
        rows = self.tables.get(table, [])
        if columns == "*":
            return StorageResult(data=deepcopy(rows))
        return StorageResult(data=[{n: r.get(n) for n in names} for r in rows])

    def select_specific_data(self, table: str, column: str, value: Any) -> StorageResult:
        failed = self._failed("select")
        if failed:
            return failed
        rows = [r for r in self.tables.get(table, []) if r.get(column) == value]
        return StorageResult(data=deepcopy(rows))

    def insert_week_data_if_not_exist(self, table: str, value: dict, slug: str, week: int) -> StorageResult:
        self.writes.append(("insert_week", table, slug, week, deepcopy(value)))
        failed = self._failed("insert_week")
        if failed:
            return failed
        row = self.row(table, slug)
        if row is None:
            row = {"id": self._next_id, "slug": slug}
            self._next_id += 1
            self.tables.setdefault(table, []).append(row)
        row[week_column(week)] = deepcopy(value)
        return StorageResult(data=[deepcopy(row)])

    def update_week_data(self, table: str, week: int, value: dict, eq_column: str, eq_value: Any) -> StorageResult:
        self.writes.append(("update_week", table, eq_value, week, deepcopy(value)))
        failed = self._failed("update_week")
        if failed:
            return failed
        updated = []
        for row in self.tables.get(table, []):
            if row.get(eq_column) == eq_value:
                row[week_column(week)] = deepcopy(value)
                updated.append(deepcopy(row))
        return StorageResult(data=updated)

    def upsert_data(self, table: str, row: dict, on_conflict: Optional[str] = None) -> StorageResult:
        self.writes.append(("upsert", table, row.get("slug"), None, deepcopy(row)))
        if row.get("slug") in self.upsert_errors:
            error, code = self.upsert_errors[row["slug"]]
            return StorageResult(error=error, error_code=code)
        failed = self._failed("upsert")
        if failed:
            return failed
        existing = self.row(table, row.get("slug")) if on_conflict == "slug" else None
        if existing is not None:
            existing.update(deepcopy(row))
        else:
            self.tables.setdefault(table, []).append(deepcopy(row))
        return StorageResult(data=[deepcopy(row)])


# ===================
# FIXTURES
# ===================

@pytest.fixture
def storage() -> InMemoryStorage:
    """
    In-memory storage.

    Usage:
        def test_something(storage):
            storage.set_table_data("boat_availability_2025", [...])
    """
    return InMemoryStorage()


@pytest.fixture
def fixed_now() -> datetime:
    """Frozen run moment: 2025-01-01 06:00 UTC."""
    return datetime(2025, 1, 1, 6, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def rate_limiter() -> MagicMock:
    limiter = MagicMock()
    limiter.wait.return_value = None
    return limiter


@pytest.fixture
def availability_payload() -> dict:
    """Availability endpoint response for one boat."""
    return {
        "status": "Success",
        "statusCode": 200,
        "data": [
            {
                "_id": 1234,
                "title": "Bali 4.1",
                "slug": "bali-41-avaler",
                "availabilities": [
                    {"chin": "2025-06-07", "chout": "2025-06-14"}
                ]
            }
        ]
    }


@pytest.fixture
def price_payload() -> dict:
    """Price endpoint response for one slot."""
    return {
        "status": "Success",
        "statusCode": 200,
        "data": [
            {
                "_id": None,
                "totalResults": 1,
                "data": [
                    {"slug": "bali-41-avaler", "price": 5200, "totalPrice": 7800, "discount": 33}
                ]
            }
        ]
    }
