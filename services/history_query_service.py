"""
Read side of the price history tables.
"""

import structlog

from models.boat_listing import BOATS_LIST_TABLE, TrackedBoat
from models.price_history import (
    BoatYearRecord,
    WeeklyBucket,
    availability_table,
    validate_week,
)
from services.storage_service import StorageService
from exceptions import BoatHistoryNotFoundError, DatabaseError

logger = structlog.get_logger(__name__)


class HistoryQueryService:
    """Lookups used by the daily job and by dashboards."""

    def __init__(self, storage: StorageService):
        self.storage = storage

    def get_tracked_boats(self) -> list[TrackedBoat]:
        """
        Slugs of every boat in the catalog.

        Raises:
            DatabaseError: If the catalog cannot be read
        """
        result = self.storage.select_data(BOATS_LIST_TABLE, "slug")
        if not result.ok:
            raise DatabaseError("select", result.error or "unknown error", {"table": BOATS_LIST_TABLE})

        boats = [TrackedBoat(slug=row["slug"]) for row in result.data or [] if row.get("slug")]
        logger.info("tracked_boats_loaded", count=len(boats))
        return boats

    def get_week_history(self, slug: str, week: int, year: int) -> WeeklyBucket:
        """
        Stored snapshots of one boat for one ISO week.

        Raises:
            InvalidWeekError: If week is outside 1..53
            BoatHistoryNotFoundError: If nothing is stored for the week
            DatabaseError: If the table cannot be read
        """
        validate_week(week)
        table = availability_table(year)

        result = self.storage.select_specific_data(table, "slug", slug)
        if not result.ok:
            raise DatabaseError("select", result.error or "unknown error", {"table": table})

        row = result.first
        if row is None:
            raise BoatHistoryNotFoundError(slug, week, year)

        bucket = BoatYearRecord.from_db(row).bucket(week)
        if not bucket:
            raise BoatHistoryNotFoundError(slug, week, year)

        return bucket
