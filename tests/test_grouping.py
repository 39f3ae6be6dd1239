"""Tests for time-bucketed exchange grouping."""

from datetime import datetime, timezone

import pytest

from horizon_data.analysis.grouping import (
    Bucket,
    EmptyResultError,
    UnitType,
    add_units,
    end_of,
    group_exchanges,
    label_for,
    start_of,
    units_between,
    week_of_year,
    window_start,
)


def ms(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


def record(timestamp, usd, fees, address):
    return {
        "timestamp": timestamp,
        "fromAmountInUSD": usd,
        "feesInUSD": fees,
        "fromAddress": address,
    }


class TestBucket:
    """Tests for running bucket totals."""

    def test_rounds_after_every_addition(self):
        """Volume and fees are rounded half-up each time."""
        bucket = Bucket(label="15 Mar 20")
        bucket.add(0.4, 0.5, "0xa")
        bucket.add(0.4, 0.5, "0xa")

        assert bucket.volume == 0
        assert bucket.fees == 2

    def test_unique_counts_first_sight_only(self):
        bucket = Bucket(label="x")
        for address in ("0xa", "0xb", "0xa", "0xc", "0xb"):
            bucket.add(1, 0, address)

        assert bucket.unique == 3
        assert bucket.trades == 5

    def test_to_dict_hides_addresses(self):
        bucket = Bucket(label="Mar 20")
        bucket.add(10, 1, "0xa")

        assert bucket.to_dict() == {
            "volume": 10,
            "fees": 1,
            "unique": 1,
            "trades": 1,
            "label": "Mar 20",
        }


class TestCalendar:
    """Tests for UTC window arithmetic."""

    def test_start_of_week_is_sunday(self):
        wednesday = datetime(2020, 3, 18, 15, 30, tzinfo=timezone.utc)
        assert start_of(wednesday, UnitType.WEEKS) == datetime(2020, 3, 15, tzinfo=timezone.utc)

    def test_start_of_week_on_sunday(self):
        sunday = datetime(2020, 3, 15, 1, tzinfo=timezone.utc)
        assert start_of(sunday, UnitType.WEEKS) == datetime(2020, 3, 15, tzinfo=timezone.utc)

    def test_end_of_month(self):
        moment = datetime(2020, 2, 10, tzinfo=timezone.utc)
        assert end_of(moment, UnitType.MONTHS) == datetime(
            2020, 2, 29, 23, 59, 59, 999000, tzinfo=timezone.utc
        )

    def test_add_months_clamps_day(self):
        moment = datetime(2020, 3, 31, tzinfo=timezone.utc)
        assert add_units(moment, -1, UnitType.MONTHS) == datetime(2020, 2, 29, tzinfo=timezone.utc)

    def test_units_between_truncates(self):
        earlier = datetime(2020, 3, 13, 10, tzinfo=timezone.utc)
        later = datetime(2020, 3, 15, 9, tzinfo=timezone.utc)

        assert units_between(earlier, later, UnitType.DAYS) == 1
        assert units_between(later, earlier, UnitType.DAYS) == 1

    def test_units_between_months(self):
        earlier = datetime(2020, 1, 20, tzinfo=timezone.utc)
        later = datetime(2020, 3, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)

        assert units_between(earlier, later, UnitType.MONTHS) == 2

    def test_week_of_year(self):
        assert week_of_year(datetime(2020, 1, 1, tzinfo=timezone.utc)) == 1
        assert week_of_year(datetime(2020, 3, 15, tzinfo=timezone.utc)) == 12

    def test_week_holding_new_year_is_week_one(self):
        assert week_of_year(datetime(2019, 12, 31, tzinfo=timezone.utc)) == 1

    @pytest.mark.parametrize(
        "unit,expected",
        [
            (UnitType.DAYS, "15 Mar 20"),
            (UnitType.WEEKS, "Week 12, 20"),
            (UnitType.MONTHS, "Mar 20"),
        ],
    )
    def test_labels(self, unit, expected):
        moment = datetime(2020, 3, 15, 10, tzinfo=timezone.utc)
        assert label_for(moment, unit) == expected

    @pytest.mark.parametrize(
        "unit,offset,expected",
        [
            (UnitType.DAYS, 0, datetime(2020, 3, 15, tzinfo=timezone.utc)),
            (UnitType.DAYS, 3, datetime(2020, 3, 12, tzinfo=timezone.utc)),
            (UnitType.WEEKS, 1, datetime(2020, 3, 8, tzinfo=timezone.utc)),
            (UnitType.MONTHS, 2, datetime(2020, 1, 1, tzinfo=timezone.utc)),
        ],
    )
    def test_window_start(self, unit, offset, expected):
        now = datetime(2020, 3, 15, 12, tzinfo=timezone.utc)
        assert window_start(now, unit, offset) == int(expected.timestamp())


class TestGroupExchanges:
    """Tests for grouping exchanges into windows."""

    def test_daily_example(self):
        """Two trades today from one address, one yesterday from another."""
        day0 = ms(2020, 3, 15, 10)
        day1 = ms(2020, 3, 14, 10)
        records = [
            record(day0, 100, 1, "0xA"),
            record(day0, 50, 0.5, "0xA"),
            record(day1, 20, 0.2, "0xB"),
        ]

        grouping = group_exchanges(records, UnitType.DAYS)

        today, yesterday = grouping.as_list()
        assert (today.volume, today.fees, today.trades, today.unique) == (150, 2, 2, 1)
        assert (yesterday.volume, yesterday.fees, yesterday.trades, yesterday.unique) == (20, 0, 1, 1)
        assert today.label == "15 Mar 20"
        assert yesterday.label == "14 Mar 20"

    def test_accepts_unit_name(self):
        grouping = group_exchanges([record(ms(2020, 3, 15), 1, 0, "0xa")], "weeks")
        assert grouping.unit is UnitType.WEEKS

    def test_holes_are_preserved(self):
        records = [
            record(ms(2020, 3, 2), 10, 1, "0xa"),
            record(ms(2020, 1, 20), 5, 0, "0xb"),
        ]

        grouping = group_exchanges(records, UnitType.MONTHS)

        assert sorted(grouping.buckets) == [0, 2]
        assert grouping.as_list()[1] is None
        assert [b.label for b in grouping.ordered()] == ["Mar 20", "Jan 20"]

    def test_backfill_is_opt_in(self):
        records = [
            record(ms(2020, 3, 2), 10, 1, "0xa"),
            record(ms(2020, 1, 20), 5, 0, "0xb"),
        ]

        grouping = group_exchanges(records, UnitType.MONTHS)
        filled = grouping.backfilled()

        assert 1 not in grouping.buckets
        assert filled.buckets[1].to_dict() == {
            "volume": 0,
            "fees": 0,
            "unique": 0,
            "trades": 0,
            "label": "Feb 20",
        }
        assert [b.label for b in filled.ordered()] == ["Mar 20", "Feb 20", "Jan 20"]

    def test_window_anchored_on_most_recent_record(self):
        records = [
            record(ms(2020, 3, 11, 8), 1, 0, "0xa"),
            record(ms(2020, 3, 10, 23), 1, 0, "0xa"),
        ]

        grouping = group_exchanges(records, UnitType.DAYS)

        assert grouping.window_end == datetime(2020, 3, 11, 23, 59, 59, 999000, tzinfo=timezone.utc)
        assert sorted(grouping.buckets) == [0, 1]

    def test_weekly_unique_per_bucket(self):
        records = [
            record(ms(2020, 3, 17), 1, 0, "0xa"),
            record(ms(2020, 3, 16), 1, 0, "0xb"),
            record(ms(2020, 3, 12), 1, 0, "0xa"),
        ]

        grouping = group_exchanges(records, UnitType.WEEKS)

        assert grouping.buckets[0].unique == 2
        assert grouping.buckets[1].unique == 1
        assert grouping.buckets[1].label == "Week 11, 20"

    def test_empty_input_raises(self):
        with pytest.raises(EmptyResultError, match="No exchanges found"):
            group_exchanges([], UnitType.DAYS)

    def test_empty_backfill_is_empty(self):
        grouping = group_exchanges([record(ms(2020, 3, 15), 1, 0, "0xa")])
        grouping.buckets.clear()

        assert grouping.backfilled().as_list() == []
