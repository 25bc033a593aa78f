"""
Price quote and weekly price history schemas.

Storage layout (one table per year, boat_availability_{year}):

    id | slug | week_1 | week_2 | ... | week_53

Each week_N column holds a bucket mapping the run timestamp to one
observation:

    {"2025-04-10T19:42:41.823Z": {"price": 5200, "discount": 33,
                                  "createdAt": "2025-04-10T19:43:00.700Z"}}

Inside the application weeks are plain integers; the week_N column names
only exist at the storage edge (week_column / parse_week_column).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from models.base import BaseSchema
from models.availability import FreeSlot
from exceptions import InvalidWeekError


# Constants
MIN_WEEK = 1
MAX_WEEK = 53
WEEK_COLUMN_PREFIX = "week_"
AVAILABILITY_TABLE_PREFIX = "boat_availability_"


def validate_week(week: Any) -> int:
    """Return week unchanged if it is a valid ISO week number, else raise."""
    if isinstance(week, bool) or not isinstance(week, int) or not MIN_WEEK <= week <= MAX_WEEK:
        raise InvalidWeekError(week)
    return week


def week_column(week: int) -> str:
    """Storage column for a week (7 -> "week_7")."""
    return f"{WEEK_COLUMN_PREFIX}{validate_week(week)}"


def parse_week_column(column: str) -> int:
    """Week number for a storage column ("week_7" -> 7)."""
    if not column.startswith(WEEK_COLUMN_PREFIX):
        raise InvalidWeekError(column)
    try:
        week = int(column[len(WEEK_COLUMN_PREFIX):])
    except ValueError:
        raise InvalidWeekError(column)
    return validate_week(week)


def availability_table(year: int) -> str:
    return f"{AVAILABILITY_TABLE_PREFIX}{year}"


def format_timestamp(moment: datetime) -> str:
    """
    Render a moment as a UTC ISO-8601 string with millisecond precision.

    Matches the keys already stored in the history buckets
    (e.g. "2025-04-10T19:42:41.823Z").
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class MergeOutcome(str, Enum):
    """What the history merger did with one snapshot."""
    INSERTED = "inserted"
    FILLED = "filled"
    APPENDED = "appended"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class PriceQuote(BaseSchema):
    """Price and discount for one free slot."""
    price: float = Field(..., ge=0)
    discount: float = Field(default=0)


class SlotQuote(BaseSchema):
    """A successful price quote together with the slot it was asked for."""
    slot: FreeSlot
    quote: PriceQuote

    @property
    def week(self) -> int:
        return self.slot.iso_week


class Snapshot(BaseSchema):
    """One timestamped observation of a quote."""

    timestamp: str
    price: float
    discount: float = 0
    created_at: Optional[str] = Field(None, alias="createdAt")

    @field_validator("discount", mode="before")
    @classmethod
    def null_discount_is_zero(cls, v):
        # Older rows stored the upstream discount as-is, including null
        return 0 if v is None else v

    @classmethod
    def from_quote(
        cls,
        quote: PriceQuote,
        timestamp: str,
        created_at: Optional[datetime] = None
    ) -> "Snapshot":
        created_at = created_at or datetime.now(timezone.utc)
        return cls(
            timestamp=timestamp,
            price=quote.price,
            discount=quote.discount,
            created_at=format_timestamp(created_at)
        )

    @classmethod
    def from_value(cls, timestamp: str, value: dict) -> "Snapshot":
        """Build from a stored bucket entry (legacy entries lack createdAt)."""
        return cls(timestamp=timestamp, **value)

    def to_value(self) -> dict:
        """Stored bucket entry, without the timestamp key."""
        return self.model_dump(by_alias=True, exclude={"timestamp"}, exclude_none=True)

    def same_quote(self, other: Optional["Snapshot"]) -> bool:
        """Same observation; createdAt is bookkeeping and is ignored."""
        return (
            other is not None
            and self.timestamp == other.timestamp
            and self.price == other.price
            and self.discount == other.discount
        )


# A bucket maps run timestamp -> Snapshot
WeeklyBucket = dict[str, Snapshot]


def bucket_from_db(value: Optional[dict]) -> Optional[WeeklyBucket]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValueError(f"week bucket must be an object, got {type(value).__name__}")
    return {ts: Snapshot.from_value(ts, entry) for ts, entry in value.items()}


def bucket_to_db(bucket: WeeklyBucket) -> dict:
    return {ts: snapshot.to_value() for ts, snapshot in bucket.items()}


class BoatYearRecord(BaseSchema):
    """
    Persisted row for one boat in one year's table.

    A week missing from weekly_buckets was never written; a week mapped to
    None has a column holding null. Weeks whose stored bucket cannot be
    read are listed in unreadable_weeks and left out of weekly_buckets.
    """

    id: Optional[int] = None
    slug: str
    weekly_buckets: dict[int, Optional[WeeklyBucket]] = Field(default_factory=dict)
    unreadable_weeks: dict[int, str] = Field(default_factory=dict)

    @classmethod
    def from_db(cls, row: dict) -> "BoatYearRecord":
        """
        Create record from a boat_availability_{year} row.

        A bad cell only affects its own week; columns that are not week
        columns are ignored.
        """
        buckets: dict[int, Optional[WeeklyBucket]] = {}
        unreadable: dict[int, str] = {}
        for column, value in row.items():
            if not column.startswith(WEEK_COLUMN_PREFIX):
                continue
            try:
                week = parse_week_column(column)
            except InvalidWeekError:
                continue
            try:
                buckets[week] = bucket_from_db(value)
            except (ValueError, TypeError) as e:
                unreadable[week] = str(e)

        return cls(
            id=row.get("id"),
            slug=row["slug"],
            weekly_buckets=buckets,
            unreadable_weeks=unreadable
        )

    def is_unreadable(self, week: int) -> bool:
        return validate_week(week) in self.unreadable_weeks

    def has_week(self, week: int) -> bool:
        return validate_week(week) in self.weekly_buckets

    def bucket(self, week: int) -> Optional[WeeklyBucket]:
        return self.weekly_buckets.get(validate_week(week))
