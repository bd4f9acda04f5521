"""Bucket hourly records into day parts and aggregate each bucket."""

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from weathervoice.forecast.weather_codes import describe_code
from weathervoice.models.common import round_half_up
from weathervoice.models.forecast import DayForecast, DayPart, Segment
from weathervoice.models.observation import HourlyRecord

logger = logging.getLogger(__name__)


def most_frequent(codes: Iterable[int | None]) -> int | None:
    """Most common non-null code; ties go to the first one seen."""
    counts = Counter(c for c in codes if c is not None)
    if not counts:
        return None
    # most_common orders equal counts by first insertion
    return counts.most_common(1)[0][0]


def bucket_records(
    records: list[HourlyRecord], target: date, part: DayPart
) -> list[HourlyRecord]:
    """Records on the target local date whose hour falls in the part."""
    return [
        r for r in records
        if r.timestamp.date() == target and part.contains(r.timestamp.hour)
    ]


def aggregate(
    part: DayPart,
    bucket: list[HourlyRecord],
    include_humidity: bool = True,
    is_current: bool = False,
) -> Segment | None:
    """Reduce one bucket to a segment, or None when nothing is renderable."""
    temps = [r.temperature for r in bucket if r.temperature is not None]
    humidities = [r.humidity for r in bucket if r.humidity is not None]

    description = describe_code(most_frequent(r.weather_code for r in bucket))
    temp_min = round_half_up(min(temps)) if temps else None
    temp_max = round_half_up(max(temps)) if temps else None
    humidity_avg = None
    if include_humidity and humidities:
        humidity_avg = round_half_up(sum(humidities) / len(humidities))

    if not description and temp_min is None:
        return None
    return Segment(
        part=part,
        description=description,
        temp_min=temp_min,
        temp_max=temp_max,
        humidity_avg=humidity_avg,
        is_current=is_current,
    )


def segment_days(
    records: list[HourlyRecord],
    now: datetime,
    days: int,
    include_humidity: bool = True,
) -> list[DayForecast]:
    """Build per-day segments for offsets 0..days-1 relative to now's date.

    now must already be in the target zone. Day parts of today that ended
    before the current one are skipped; days without any renderable segment
    are dropped.
    """
    ordered = sorted(records, key=lambda r: r.timestamp)
    today = now.date()
    current_part = DayPart.for_hour(now.hour)
    parts = list(DayPart)

    forecasts: list[DayForecast] = []
    for offset in range(days):
        target = today + timedelta(days=offset)
        segments: list[Segment] = []
        for part in parts:
            if offset == 0 and parts.index(part) < parts.index(current_part):
                continue
            segment = aggregate(
                part,
                bucket_records(ordered, target, part),
                include_humidity=include_humidity,
                is_current=offset == 0 and part is current_part,
            )
            if segment is not None:
                segments.append(segment)
        if segments:
            forecasts.append(DayForecast(offset=offset, date=target, segments=segments))
        else:
            logger.debug("No renderable segments for %s", target.isoformat())
    return forecasts
