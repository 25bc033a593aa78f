"""
Weekly price history merge.

Decides, for one fresh snapshot and the stored record of a boat/year,
whether the week needs an insert, a fill of a null column, an append to
the existing bucket, or nothing at all. Buckets only ever gain keys, and
re-running with the same timestamp and quote writes nothing.
"""

from typing import Optional

import structlog

from models.price_history import (
    BoatYearRecord,
    MergeOutcome,
    Snapshot,
    WeeklyBucket,
    availability_table,
    bucket_to_db,
    validate_week,
)
from services.storage_service import StorageService

logger = structlog.get_logger(__name__)


class WeeklyHistoryMerger:
    """
    Merge snapshots into per-week buckets of boat_availability_{year}.

    The in-memory record passed to merge() is updated after each
    successful write so later merges in the same run see it.
    """

    def __init__(self, storage: StorageService):
        self.storage = storage

    def merge(
        self,
        record: Optional[BoatYearRecord],
        slug: str,
        week: int,
        snapshot: Snapshot,
        year: int
    ) -> MergeOutcome:
        """
        Persist one snapshot for a boat/week/year.

        Cases, in order:
            1. no record, or no entry for the week -> insert-if-not-exists
            2. the week's bucket is null -> update with a new bucket
            3. the week has a bucket -> append unless the same quote is
               already stored under this timestamp

        A week whose stored bucket could not be read is left untouched and
        reported as FAILED.

        Returns:
            MergeOutcome describing what was done
        """
        validate_week(week)
        table = availability_table(year)
        incoming: WeeklyBucket = {snapshot.timestamp: snapshot}

        if record is not None and record.is_unreadable(week):
            logger.error(
                "history_week_unreadable",
                slug=slug,
                week=week,
                year=year,
                error=record.unreadable_weeks[week]
            )
            return MergeOutcome.FAILED

        if record is None or not record.has_week(week):
            logger.debug("history_insert_week", slug=slug, week=week, year=year)
            result = self.storage.insert_week_data_if_not_exist(
                table, bucket_to_db(incoming), slug, week
            )
            return self._finish(result, record, slug, week, year, incoming, MergeOutcome.INSERTED)

        existing = record.bucket(week)

        if existing is None:
            logger.debug("history_fill_week", slug=slug, week=week, year=year)
            result = self.storage.update_week_data(
                table, week, bucket_to_db(incoming), "slug", slug
            )
            return self._finish(result, record, slug, week, year, incoming, MergeOutcome.FILLED)

        if snapshot.same_quote(existing.get(snapshot.timestamp)):
            logger.debug(
                "history_week_unchanged",
                slug=slug,
                week=week,
                year=year,
                timestamp=snapshot.timestamp
            )
            return MergeOutcome.UNCHANGED

        merged: WeeklyBucket = {**existing, **incoming}
        logger.debug(
            "history_append_week",
            slug=slug,
            week=week,
            year=year,
            snapshots=len(merged)
        )
        result = self.storage.update_week_data(
            table, week, bucket_to_db(merged), "slug", slug
        )
        return self._finish(result, record, slug, week, year, merged, MergeOutcome.APPENDED)

    def _finish(
        self,
        result,
        record: Optional[BoatYearRecord],
        slug: str,
        week: int,
        year: int,
        bucket: WeeklyBucket,
        outcome: MergeOutcome
    ) -> MergeOutcome:
        if not result.ok:
            logger.error(
                "history_write_failed",
                slug=slug,
                week=week,
                year=year,
                attempted=outcome.value,
                error=result.error
            )
            return MergeOutcome.FAILED

        if record is not None:
            record.weekly_buckets[week] = bucket
        return outcome
