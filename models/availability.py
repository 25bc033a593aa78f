"""
Reservation and free-week schemas.

Reservations come from the availability endpoint as {chin, chout} pairs;
free slots are the Saturday-to-Saturday windows derived from them.
"""

from datetime import date, timedelta
from typing import Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from models.base import BaseSchema, parse_api_date, format_api_date


# Constants
SLOT_LENGTH_DAYS = 7
SATURDAY = 5  # date.weekday()


class ReservedInterval(BaseSchema):
    """A booked date range for a boat. Read-only input."""

    model_config = ConfigDict(frozen=True)

    check_in: date = Field(..., alias="chin")
    check_out: date = Field(..., alias="chout")

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def strip_time(cls, v):
        return parse_api_date(v)

    def overlaps(self, slot: "FreeSlot") -> bool:
        """Inclusive-bounds overlap test against a candidate slot."""
        return self.check_in <= slot.check_out and self.check_out >= slot.check_in


class FreeSlot(BaseSchema):
    """
    A candidate 7-night window (Saturday to Saturday).

    Derived from reservations, never persisted directly.
    """

    model_config = ConfigDict(frozen=True)

    check_in: date
    check_out: date

    @model_validator(mode="after")
    def validate_shape(self) -> "FreeSlot":
        if self.check_in.weekday() != SATURDAY:
            raise ValueError("check_in must be a Saturday")
        if self.check_out - self.check_in != timedelta(days=SLOT_LENGTH_DAYS):
            raise ValueError(f"slot must span exactly {SLOT_LENGTH_DAYS} days")
        return self

    @classmethod
    def starting(cls, saturday: date) -> "FreeSlot":
        return cls(check_in=saturday, check_out=saturday + timedelta(days=SLOT_LENGTH_DAYS))

    @property
    def check_in_str(self) -> str:
        return format_api_date(self.check_in)

    @property
    def check_out_str(self) -> str:
        return format_api_date(self.check_out)

    @property
    def iso_week(self) -> int:
        """ISO week of the checkout date; this is the storage week key."""
        return self.check_out.isocalendar()[1]


class BoatAvailability(BaseSchema):
    """Reservations for one boat, as returned by the availability endpoint."""

    slug: str
    intervals: list[ReservedInterval] = Field(default_factory=list, alias="availabilities")

    @classmethod
    def from_api(cls, row: dict, slug: Optional[str] = None) -> "BoatAvailability":
        return cls(
            slug=row.get("slug") or slug,
            availabilities=row.get("availabilities") or []
        )
