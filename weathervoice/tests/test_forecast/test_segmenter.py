"""Tests for day-part bucketing and aggregation."""

from datetime import date, datetime, timedelta

from weathervoice.forecast.segmenter import (
    aggregate,
    bucket_records,
    most_frequent,
    segment_days,
)
from weathervoice.forecast.weather_codes import describe_code
from weathervoice.models.forecast import DayPart
from weathervoice.models.observation import HourlyRecord
from weathervoice.tests.conftest import BA


def _rec(day: int, hour: int, code=None, temp=None, hum=None) -> HourlyRecord:
    return HourlyRecord(
        timestamp=datetime(2024, 5, day, hour, 0, tzinfo=BA),
        weather_code=code,
        temperature=temp,
        humidity=hum,
    )


def _series(days: int = 2) -> list[HourlyRecord]:
    return [
        _rec(15 + d, h, code=3, temp=10 + h * 0.5, hum=80 - h)
        for d in range(days)
        for h in range(24)
    ]


class TestDayPart:
    def test_partition_covers_each_hour_once(self):
        for hour in range(24):
            assert sum(1 for part in DayPart if part.contains(hour)) == 1

    def test_boundaries(self):
        assert DayPart.for_hour(0) is DayPart.MADRUGADA
        assert DayPart.for_hour(5) is DayPart.MADRUGADA
        assert DayPart.for_hour(6) is DayPart.MANANA
        assert DayPart.for_hour(12) is DayPart.TARDE
        assert DayPart.for_hour(18) is DayPart.NOCHE
        assert DayPart.for_hour(23) is DayPart.NOCHE


class TestMostFrequent:
    def test_majority(self):
        assert most_frequent([61, 61, 63]) == 61

    def test_full_tie_first_seen(self):
        assert most_frequent([1, 2]) == 1
        assert most_frequent([2, 1]) == 2

    def test_nulls_ignored(self):
        assert most_frequent([None, 45, None]) == 45
        assert most_frequent([None]) is None
        assert most_frequent([]) is None


class TestBucketRecords:
    def test_buckets_partition_a_date(self):
        records = _series(days=2)
        target = date(2024, 5, 15)
        buckets = [bucket_records(records, target, part) for part in DayPart]
        assert [len(b) for b in buckets] == [6, 6, 6, 6]
        seen = [r.timestamp for b in buckets for r in b]
        assert len(seen) == len(set(seen)) == 24
        assert all(ts.date() == target for ts in seen)

    def test_other_dates_excluded(self):
        records = [_rec(14, 7), _rec(15, 7), _rec(16, 7)]
        bucket = bucket_records(records, date(2024, 5, 15), DayPart.MANANA)
        assert [r.timestamp.day for r in bucket] == [15]


class TestAggregate:
    def test_manana_scenario(self):
        bucket = [
            _rec(15, 6, code=3, temp=18),
            _rec(15, 7, code=3, temp=19),
            _rec(15, 8, code=1, temp=17),
        ]
        segment = aggregate(DayPart.MANANA, bucket)
        assert segment.description == describe_code(3) == "Nublado"
        assert (segment.temp_min, segment.temp_max) == (17, 19)

    def test_rounding_half_up(self):
        bucket = [_rec(15, 13, temp=17.5, hum=60), _rec(15, 14, temp=18.5, hum=61)]
        segment = aggregate(DayPart.TARDE, bucket)
        assert (segment.temp_min, segment.temp_max) == (18, 19)
        assert segment.humidity_avg == 61

    def test_humidity_optional(self):
        segment = aggregate(DayPart.TARDE, [_rec(15, 13, temp=20, hum=50)], include_humidity=False)
        assert segment.humidity_avg is None

    def test_empty_bucket_dropped(self):
        assert aggregate(DayPart.NOCHE, []) is None

    def test_unmapped_code_without_temps_dropped(self):
        assert aggregate(DayPart.NOCHE, [_rec(15, 19, code=42)]) is None

    def test_unmapped_code_with_temps_kept(self):
        segment = aggregate(DayPart.NOCHE, [_rec(15, 19, code=42, temp=12)])
        assert segment.description == ""
        assert segment.has_range

    def test_description_without_temps_kept(self):
        segment = aggregate(DayPart.NOCHE, [_rec(15, 19, code=0)])
        assert segment.description == "Despejado"
        assert not segment.has_range


class TestSegmentDays:
    def test_today_skips_earlier_parts_and_flags_current(self):
        now = datetime(2024, 5, 15, 14, 40, tzinfo=BA)
        days = segment_days(_series(days=2), now, days=2)

        assert [d.offset for d in days] == [0, 1]
        today = days[0]
        assert [s.part for s in today.segments] == [DayPart.TARDE, DayPart.NOCHE]
        assert today.segments[0].is_current
        assert not today.segments[1].is_current
        assert len(days[1].segments) == 4
        assert not any(s.is_current for s in days[1].segments)

    def test_first_part_of_day_is_current(self):
        now = datetime(2024, 5, 15, 0, 5, tzinfo=BA)
        days = segment_days(_series(days=1), now, days=1)
        assert days[0].segments[0].part is DayPart.MADRUGADA
        assert days[0].segments[0].is_current

    def test_days_without_data_dropped(self):
        now = datetime(2024, 5, 15, 10, 0, tzinfo=BA)
        days = segment_days(_series(days=1), now, days=3)
        assert [d.offset for d in days] == [0]

    def test_unsorted_input_tie_break_uses_time_order(self):
        now = datetime(2024, 5, 15, 6, 0, tzinfo=BA)
        records = [_rec(15, 9, code=2, temp=15), _rec(15, 7, code=1, temp=14)]
        days = segment_days(records, now, days=1)
        # 07:00 comes first in time, so code 1 wins the tie
        assert days[0].segments[0].description == describe_code(1)

    def test_counts_every_hour_once(self):
        now = datetime(2024, 5, 15, 0, 0, tzinfo=BA)
        records = [
            HourlyRecord(
                timestamp=datetime(2024, 5, 15, tzinfo=BA) + timedelta(hours=h),
                weather_code=None,
                temperature=float(h),
                humidity=None,
            )
            for h in range(24)
        ]
        days = segment_days(records, now, days=1)
        ranges = [(s.temp_min, s.temp_max) for s in days[0].segments]
        assert ranges == [(0, 5), (6, 11), (12, 17), (18, 23)]
