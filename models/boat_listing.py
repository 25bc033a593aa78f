"""
Boat catalog schemas.

The search endpoint returns large boat documents; we keep them as-is and
only require the slug, which keys the boats_list table.
"""

from dataclasses import dataclass, field

from pydantic import ConfigDict, Field

from models.base import BaseSchema


BOATS_LIST_TABLE = "boats_list"

# Postgres foreign_key_violation
FOREIGN_KEY_VIOLATION = "23503"


class TrackedBoat(BaseSchema):
    """A boat whose availability and prices are synced."""
    slug: str = Field(..., min_length=1)


class BoatListing(BaseSchema):
    """One boat from the search endpoint. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    slug: str = Field(..., min_length=1)

    def to_db(self) -> dict:
        return self.model_dump(mode="json")


@dataclass
class ListingSyncSummary:
    """Counts from one listing refresh."""
    fetched: int = 0
    upserted: int = 0
    skipped: int = 0
    failed: int = 0
    skipped_slugs: list[str] = field(default_factory=list)
