"""
Boat availability and price synchronization.

For every tracked boat, in order:
    1. fetch reservations (skip the boat if the API has none)
    2. for each year from the current one to end_year:
       - derive free weeks
       - quote every free week concurrently (a failed quote is dropped)
       - load the stored record and merge one snapshot per quoted week
    3. pause before the next boat

One boat's failure never stops the run.
"""

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Iterable, Optional

import structlog

from integrations.boataround import BoatAroundClient
from models.availability import FreeSlot
from models.boat_listing import TrackedBoat
from models.price_history import (
    BoatYearRecord,
    MergeOutcome,
    SlotQuote,
    Snapshot,
    availability_table,
    format_timestamp,
)
from services.free_week_service import compute_free_weeks, is_attributed_to_year
from services.history_merge_service import WeeklyHistoryMerger
from services.rate_limiter import RateLimiter
from services.storage_service import StorageService

logger = structlog.get_logger(__name__)


DEFAULT_MAX_WORKERS = 16


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SyncSummary:
    """Counts from one synchronization run."""
    run_start: str
    boats_total: int = 0
    boats_processed: int = 0
    boats_skipped: int = 0
    boats_failed: int = 0
    quotes_fetched: int = 0
    outcomes: Counter = field(default_factory=Counter)
    failed_slugs: list[str] = field(default_factory=list)

    def record(self, outcome: MergeOutcome) -> None:
        self.outcomes[outcome] += 1

    @property
    def snapshots_written(self) -> int:
        return sum(
            self.outcomes[o]
            for o in (MergeOutcome.INSERTED, MergeOutcome.FILLED, MergeOutcome.APPENDED)
        )


class SyncOrchestrator:
    """
    Drives the availability/price pipeline.

    All collaborators are passed in; nothing here reads global state.
    """

    def __init__(
        self,
        boataround: BoatAroundClient,
        storage: StorageService,
        merger: WeeklyHistoryMerger,
        rate_limiter: RateLimiter,
        max_workers: int = DEFAULT_MAX_WORKERS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.boataround = boataround
        self.storage = storage
        self.merger = merger
        self.rate_limiter = rate_limiter
        self.max_workers = max_workers
        self._clock = clock

    # ===================
    # RUN
    # ===================

    def run(self, tracked_boats: Iterable[TrackedBoat], end_year: int) -> SyncSummary:
        """
        Synchronize every boat from the current year through end_year.

        Args:
            tracked_boats: Boats to process, in order
            end_year: Last year (inclusive)

        Returns:
            SyncSummary with per-run counts
        """
        started = self._clock()
        summary = SyncSummary(run_start=format_timestamp(started))
        today = started.date()
        boats = list(tracked_boats)
        summary.boats_total = len(boats)

        logger.info(
            "sync_started",
            boats=len(boats),
            start_year=today.year,
            end_year=end_year,
            run_start=summary.run_start
        )

        for boat in boats:
            logger.info("processing_boat", slug=boat.slug)
            try:
                if self.sync_boat(boat.slug, end_year, summary.run_start, today, summary):
                    summary.boats_processed += 1
                else:
                    summary.boats_skipped += 1
            except Exception as e:
                summary.boats_failed += 1
                summary.failed_slugs.append(boat.slug)
                logger.error(
                    "boat_sync_failed",
                    slug=boat.slug,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True
                )

            logger.info("finished_boat", slug=boat.slug)
            self.rate_limiter.wait()

        logger.info(
            "sync_complete",
            boats_processed=summary.boats_processed,
            boats_skipped=summary.boats_skipped,
            boats_failed=summary.boats_failed,
            quotes_fetched=summary.quotes_fetched,
            snapshots_written=summary.snapshots_written,
            unchanged=summary.outcomes[MergeOutcome.UNCHANGED],
            write_failures=summary.outcomes[MergeOutcome.FAILED]
        )
        return summary

    def sync_boat(
        self,
        slug: str,
        end_year: int,
        run_start: str,
        today: date,
        summary: SyncSummary
    ) -> bool:
        """
        Synchronize one boat for every year in range.

        Returns:
            False if the boat was skipped (no availability), True otherwise
        """
        availability = self.boataround.get_availability(slug)
        if availability is None:
            logger.warning("availability_not_found", slug=slug)
            return False

        for year in range(today.year, end_year + 1):
            slots = compute_free_weeks(availability.intervals, year, today=today)
            quotes = self.fetch_quotes(slug, slots)
            summary.quotes_fetched += len(quotes)

            logger.info(
                "boat_year_quoted",
                slug=slug,
                year=year,
                free_weeks=len(slots),
                quotes=len(quotes)
            )

            table = availability_table(year)
            result = self.storage.select_specific_data(table, "slug", slug)
            if not result.ok:
                logger.warning("boat_year_record_unavailable", slug=slug, year=year, error=result.error)
                continue

            row = result.first
            record = BoatYearRecord.from_db(row) if row else BoatYearRecord(slug=slug)

            for outcome in self.merge_quotes(record, slug, quotes, run_start, year):
                summary.record(outcome)

        return True

    # ===================
    # FAN-OUT
    # ===================

    def fetch_quotes(self, slug: str, slots: list[FreeSlot]) -> list[SlotQuote]:
        """
        Quote every slot concurrently.

        Each slot settles on its own: a miss or an exception yields nothing
        for that slot and never cancels the others. Results keep slot order.
        """
        if not slots:
            return []

        def quote(slot: FreeSlot) -> Optional[SlotQuote]:
            try:
                price = self.boataround.get_price(slug, slot)
            except Exception as e:
                logger.warning(
                    "price_fetch_failed",
                    slug=slug,
                    check_in=slot.check_in_str,
                    check_out=slot.check_out_str,
                    error=str(e),
                    error_type=type(e).__name__
                )
                return None
            if price is None:
                return None
            return SlotQuote(slot=slot, quote=price)

        workers = min(len(slots), self.max_workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="price_fetch") as executor:
            futures = [executor.submit(quote, slot) for slot in slots]
            results = [future.result() for future in futures]

        return [r for r in results if r is not None]

    # ===================
    # MERGE
    # ===================

    def merge_quotes(
        self,
        record: BoatYearRecord,
        slug: str,
        quotes: list[SlotQuote],
        run_start: str,
        year: int
    ) -> list[MergeOutcome]:
        """Merge every quote attributed to `year` into the record's week buckets."""
        outcomes: list[MergeOutcome] = []

        for slot_quote in quotes:
            if not is_attributed_to_year(slot_quote.slot, year):
                continue

            week = slot_quote.week
            try:
                snapshot = Snapshot.from_quote(slot_quote.quote, run_start, created_at=self._clock())
                outcomes.append(self.merger.merge(record, slug, week, snapshot, year))
            except Exception as e:
                logger.error(
                    "week_merge_failed",
                    slug=slug,
                    week=week,
                    year=year,
                    error=str(e),
                    error_type=type(e).__name__
                )
                outcomes.append(MergeOutcome.FAILED)

        return outcomes
