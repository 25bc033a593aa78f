"""
Free week calculation.

Turns a boat's reservations into the Saturday-to-Saturday weeks that are
still bookable in a target year, and decides which year's table a quoted
slot belongs to.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

import structlog

from models.availability import FreeSlot, ReservedInterval, SATURDAY

logger = structlog.get_logger(__name__)


def iso_weeks_in_year(year: int) -> int:
    """Number of ISO weeks in a year (52 or 53). Dec 28 is always in the last one."""
    return date(year, 12, 28).isocalendar()[1]


def first_saturday_on_or_after(day: date) -> date:
    return day + timedelta(days=(SATURDAY - day.weekday()) % 7)


def compute_free_weeks(
    reservations: Iterable[ReservedInterval],
    year: int,
    today: Optional[date] = None
) -> list[FreeSlot]:
    """
    Compute free weekly slots for a boat in a given year.

    The anchor is today when `year` is the current year, otherwise Jan 1.
    One candidate [Sat, Sat + 7) slot is generated per ISO week of the
    anchor's year, starting on the first Saturday on or after the anchor,
    and every candidate touching a reservation (inclusive bounds) is dropped.

    Args:
        reservations: Booked intervals for the boat
        year: Target year
        today: Override for the current date

    Returns:
        Free slots in chronological order (possibly empty)
    """
    today = today or date.today()
    anchor = today if today.year == year else date(year, 1, 1)
    reservations = list(reservations)

    start = first_saturday_on_or_after(anchor)
    candidates = [
        FreeSlot.starting(start + timedelta(weeks=i))
        for i in range(iso_weeks_in_year(anchor.year))
    ]

    free = [
        slot for slot in candidates
        if not any(reservation.overlaps(slot) for reservation in reservations)
    ]

    logger.debug(
        "free_weeks_computed",
        year=year,
        anchor=anchor.isoformat(),
        candidates=len(candidates),
        reservations=len(reservations),
        free=len(free)
    )
    return free


def is_attributed_to_year(slot: FreeSlot, year: int) -> bool:
    """
    Whether a quoted slot is recorded in `year`'s table.

    A slot straddling New Year is recorded under both its check-in and its
    check-out year.
    """
    chin_year = slot.check_in.year
    chout_year = slot.check_out.year
    return (
        (chin_year < year <= chout_year)
        or (chin_year == year and chout_year == year)
        or (chin_year == year and chout_year > year)
    )
