"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.availability import (
    ReservedInterval,
    FreeSlot,
    BoatAvailability,
    SLOT_LENGTH_DAYS,
)
from models.price_history import (
    PriceQuote,
    SlotQuote,
    Snapshot,
    WeeklyBucket,
    BoatYearRecord,
    MergeOutcome,
    MIN_WEEK,
    MAX_WEEK,
    validate_week,
    week_column,
    parse_week_column,
    availability_table,
    format_timestamp,
    bucket_to_db,
)
from models.boat_listing import (
    TrackedBoat,
    BoatListing,
    ListingSyncSummary,
    BOATS_LIST_TABLE,
)

__all__ = [
    # Base
    "BaseSchema",

    # Availability
    "ReservedInterval",
    "FreeSlot",
    "BoatAvailability",
    "SLOT_LENGTH_DAYS",

    # Price history
    "PriceQuote",
    "SlotQuote",
    "Snapshot",
    "WeeklyBucket",
    "BoatYearRecord",
    "MergeOutcome",
    "MIN_WEEK",
    "MAX_WEEK",
    "validate_week",
    "week_column",
    "parse_week_column",
    "availability_table",
    "format_timestamp",
    "bucket_to_db",

    # Boat listing
    "TrackedBoat",
    "BoatListing",
    "ListingSyncSummary",
    "BOATS_LIST_TABLE",
]
