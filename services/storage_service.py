"""
Storage access for the sync jobs.

Narrow select/insert/update/upsert surface over the Supabase client. Every
method returns a StorageResult instead of raising, so callers decide
whether a failed write is worth more than a log line.
"""

from dataclasses import dataclass
from typing import Any, Optional

import structlog
from supabase import Client

from models.price_history import week_column

logger = structlog.get_logger(__name__)


@dataclass
class StorageResult:
    """Outcome of one storage call."""
    data: Optional[list[dict]] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def first(self) -> Optional[dict]:
        return self.data[0] if self.data else None


def _failure(operation: str, table: str, e: Exception, **context: Any) -> StorageResult:
    code = getattr(e, "code", None)
    logger.error(
        "storage_operation_failed",
        operation=operation,
        table=table,
        error=str(e),
        error_type=type(e).__name__,
        error_code=code,
        **context
    )
    return StorageResult(error=str(e), error_code=str(code) if code is not None else None)


class StorageService:
    """
    Supabase-backed storage.

    Rows in boat_availability_{year} are keyed by slug; week columns are
    addressed by integer week and translated to week_N here.
    """

    def __init__(self, client: Client):
        self.db = client

    # ===================
    # READ OPERATIONS
    # ===================

    def select_data(self, table: str, columns: str = "*") -> StorageResult:
        """Select columns from every row of a table."""
        logger.debug("storage_select", table=table, columns=columns)
        try:
            result = self.db.table(table).select(columns).execute()
        except Exception as e:
            return _failure("select", table, e, columns=columns)
        return StorageResult(data=result.data or [])

    def select_specific_data(self, table: str, column: str, value: Any) -> StorageResult:
        """Select full rows where column == value."""
        logger.debug("storage_select_specific", table=table, column=column, value=value)
        try:
            result = self.db.table(table).select("*").eq(column, value).execute()
        except Exception as e:
            return _failure("select", table, e, column=column, value=value)
        return StorageResult(data=result.data or [])

    # ===================
    # WRITE OPERATIONS
    # ===================

    def insert_week_data_if_not_exist(
        self,
        table: str,
        value: dict,
        slug: str,
        week: int
    ) -> StorageResult:
        """
        Create the boat's row, or set one week column on an existing row.

        Upserts {week_N: value, slug} on the slug key; other week columns
        of an existing row are left alone.
        """
        column = week_column(week)
        logger.debug("storage_insert_week", table=table, slug=slug, column=column)
        try:
            result = (
                self.db.table(table)
                .upsert({column: value, "slug": slug}, on_conflict="slug")
                .execute()
            )
        except Exception as e:
            return _failure("insert_week", table, e, slug=slug, column=column)
        return StorageResult(data=result.data or [])

    def update_week_data(
        self,
        table: str,
        week: int,
        value: dict,
        eq_column: str,
        eq_value: Any
    ) -> StorageResult:
        """Replace one week column on the rows where eq_column == eq_value."""
        column = week_column(week)
        logger.debug("storage_update_week", table=table, column=column, eq_column=eq_column, eq_value=eq_value)
        try:
            result = (
                self.db.table(table)
                .update({column: value})
                .eq(eq_column, eq_value)
                .execute()
            )
        except Exception as e:
            return _failure("update_week", table, e, column=column, eq_value=eq_value)
        return StorageResult(data=result.data or [])

    def upsert_data(self, table: str, row: dict, on_conflict: Optional[str] = None) -> StorageResult:
        """Insert or update a full row."""
        logger.debug("storage_upsert", table=table, on_conflict=on_conflict)
        try:
            query = (
                self.db.table(table).upsert(row, on_conflict=on_conflict)
                if on_conflict
                else self.db.table(table).upsert(row)
            )
            result = query.execute()
        except Exception as e:
            return _failure("upsert", table, e, slug=row.get("slug"))
        return StorageResult(data=result.data or [])
