"""
Unit tests for the price history schemas and storage-edge helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

from models.price_history import (
    BoatYearRecord,
    PriceQuote,
    Snapshot,
    availability_table,
    bucket_from_db,
    bucket_to_db,
    format_timestamp,
    parse_week_column,
    week_column,
)
from exceptions import InvalidWeekError
from tests.factories import BoatYearRowFactory, snapshot_value


# ===================
# WEEK KEYS
# ===================

class TestWeekColumns:

    @pytest.mark.parametrize("week,column", [(1, "week_1"), (27, "week_27"), (53, "week_53")])
    def test_round_trip(self, week, column):
        assert week_column(week) == column
        assert parse_week_column(column) == week

    @pytest.mark.parametrize("week", [0, 54, True, "7", 7.0])
    def test_rejects_out_of_range_and_non_int(self, week):
        with pytest.raises(InvalidWeekError):
            week_column(week)

    @pytest.mark.parametrize("column", ["week_0", "week_x", "slug", "week_54"])
    def test_rejects_bad_columns(self, column):
        with pytest.raises(InvalidWeekError):
            parse_week_column(column)

    def test_availability_table(self):
        assert availability_table(2026) == "boat_availability_2026"


# ===================
# TIMESTAMPS
# ===================

class TestFormatTimestamp:

    def test_millisecond_precision(self):
        moment = datetime(2025, 4, 10, 19, 42, 41, 823999, tzinfo=timezone.utc)

        assert format_timestamp(moment) == "2025-04-10T19:42:41.823Z"

    def test_converts_to_utc(self):
        moment = datetime(2025, 4, 10, 21, 42, 41, tzinfo=timezone(timedelta(hours=2)))

        assert format_timestamp(moment) == "2025-04-10T19:42:41.000Z"


# ===================
# SNAPSHOTS
# ===================

class TestSnapshot:

    def test_from_quote(self):
        snapshot = Snapshot.from_quote(
            PriceQuote(price=5200, discount=33),
            "2025-04-10T19:42:41.823Z",
            created_at=datetime(2025, 4, 10, 19, 43, 0, 700000, tzinfo=timezone.utc)
        )

        assert snapshot.to_value() == {"price": 5200, "discount": 33, "createdAt": "2025-04-10T19:43:00.700Z"}

    def test_legacy_value_has_no_created_at(self):
        snapshot = Snapshot.from_value("2025-04-09T19:18:01.552Z", {"price": 5200, "discount": 33})

        assert snapshot.created_at is None
        assert snapshot.to_value() == {"price": 5200, "discount": 33}

    def test_same_quote_ignores_created_at(self):
        a = Snapshot.from_value("t", snapshot_value(100, 5, "2025-01-01T00:00:00.000Z"))
        b = Snapshot.from_value("t", snapshot_value(100, 5, "2025-01-02T00:00:00.000Z"))

        assert a.same_quote(b)
        assert not a.same_quote(None)
        assert not a.same_quote(Snapshot.from_value("t", snapshot_value(101, 5)))
        assert not a.same_quote(Snapshot.from_value("u", snapshot_value(100, 5)))

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            PriceQuote(price=-1)


# ===================
# RECORDS
# ===================

class TestBoatYearRecord:

    def test_from_db_separates_missing_and_null_weeks(self):
        row = BoatYearRowFactory.create("lagoon-40", weeks={
            3: None,
            4: {"2025-01-01T06:00:00.000Z": snapshot_value()},
        }, id=12)

        record = BoatYearRecord.from_db(row)

        assert record.id == 12
        assert record.has_week(3) and record.bucket(3) is None
        assert record.has_week(4)
        assert not record.has_week(5)
        assert record.bucket(4)["2025-01-01T06:00:00.000Z"].price == 5200

    def test_bucket_round_trip_preserves_stored_shape(self):
        stored = {
            "2025-04-09T19:18:01.552Z": {"price": 5200, "discount": 33},
            "2025-04-10T19:42:41.823Z": snapshot_value(5100, 30),
        }

        assert bucket_to_db(bucket_from_db(stored)) == stored

    def test_non_object_bucket_rejected(self):
        with pytest.raises(ValueError):
            bucket_from_db([1, 2])


# ===================
# LEGACY AND DAMAGED ROWS
# ===================

class TestStoredRowTolerance:

    def test_null_discount_reads_as_zero(self):
        snapshot = Snapshot.from_value("2025-04-09T19:18:01.552Z", {"price": 5200, "discount": None})

        assert snapshot.discount == 0

    def test_row_with_null_discount_entry_loads(self):
        row = BoatYearRowFactory.create("bali-41-avaler", weeks={
            10: {"2025-04-09T19:18:01.552Z": {"price": 5200, "discount": None}},
        })

        record = BoatYearRecord.from_db(row)

        assert record.bucket(10)["2025-04-09T19:18:01.552Z"].discount == 0
        assert record.unreadable_weeks == {}

    def test_bad_cell_only_marks_its_own_week(self):
        row = BoatYearRowFactory.create("bali-41-avaler", weeks={
            10: {"2025-04-09T19:18:01.552Z": {"price": "n/a"}},
            11: {"2025-04-09T19:18:01.552Z": "garbage"},
            12: {"2025-04-09T19:18:01.552Z": snapshot_value()},
        })

        record = BoatYearRecord.from_db(row)

        assert set(record.unreadable_weeks) == {10, 11}
        assert record.is_unreadable(10)
        assert not record.has_week(10)
        assert record.bucket(12)["2025-04-09T19:18:01.552Z"].price == 5200

    def test_unknown_week_like_columns_are_ignored(self):
        row = {"id": 1, "slug": "bali-41-avaler", "week_notes": "x", "week_60": None}

        record = BoatYearRecord.from_db(row)

        assert record.weekly_buckets == {}
        assert record.unreadable_weeks == {}
