"""Source timestamp resolution and freshness checks."""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo

from weathervoice.errors import StaleDataError, TimestampError

logger = logging.getLogger(__name__)

DAY_FIRST_FORMATS = ("%d/%m/%Y %H:%M", "%d/%m/%Y %H:%M:%S")
CLOCK_FORMAT = "%H:%M"
MIN_EPOCH_DIGITS = 9


def parse_iso(value: str, zone: ZoneInfo) -> datetime | None:
    """ISO-8601; naive values are read as local time in the target zone."""
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=zone)
    return dt.astimezone(zone)


def parse_day_first(value: str, zone: ZoneInfo) -> datetime | None:
    """'15/05/2024 14:30' or '15/05/2024 14:30:05' in the target zone."""
    for fmt in DAY_FIRST_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=zone)
        except ValueError:
            continue
    return None


def parse_clock(value: str, zone: ZoneInfo, now: datetime) -> datetime | None:
    """Bare 'HH:MM', taken as today in the target zone."""
    try:
        t = datetime.strptime(value, CLOCK_FORMAT)
    except ValueError:
        return None
    return now.astimezone(zone).replace(
        hour=t.hour, minute=t.minute, second=0, microsecond=0
    )


def parse_epoch(value: str, zone: ZoneInfo) -> datetime | None:
    """Unix epoch seconds, as published by the SMN map feed."""
    try:
        return datetime.fromtimestamp(int(value), UTC).astimezone(zone)
    except (OverflowError, OSError, ValueError):
        return None


def parse_timestamp(value: Any, zone: ZoneInfo, now: datetime) -> datetime | None:
    """Try each strategy in priority order on a single raw value."""
    s = str(value).strip()
    if not s:
        return None
    # long digit runs would otherwise be misread as basic-format ISO dates
    if s.isdigit() and len(s) >= MIN_EPOCH_DIGITS:
        return parse_epoch(s, zone)
    return (
        parse_iso(s, zone)
        or parse_day_first(s, zone)
        or parse_clock(s, zone, now)
    )


def resolve_timestamp(
    candidates: Iterable[Any], zone: ZoneInfo, now: datetime
) -> datetime:
    """Return the first candidate that parses, converted to the target zone.

    Raises TimestampError when none of the candidates parse.
    """
    tried: list[str] = []
    for raw in candidates:
        parsed = parse_timestamp(raw, zone, now)
        if parsed is not None:
            return parsed
        tried.append(str(raw))
    raise TimestampError(f"No parseable timestamp among {tried!r}")


def check_freshness(
    source_time: datetime,
    now: datetime,
    max_age_minutes: int = 120,
    future_tolerance_minutes: int = 10,
) -> float:
    """Validate the age of source data. Returns the age in minutes."""
    age_minutes = (now - source_time).total_seconds() / 60
    if age_minutes > max_age_minutes:
        raise StaleDataError(f"Source data is {round(age_minutes)} min old", age_minutes)
    if age_minutes < -future_tolerance_minutes:
        raise StaleDataError(
            f"Source timestamp is {round(-age_minutes)} min in the future", age_minutes
        )
    logger.debug("Source data age %.1f min", age_minutes)
    return age_minutes
