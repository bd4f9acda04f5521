"""Clock and timezone helpers shared across models."""

import math
from collections.abc import Callable
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def local_now(zone: ZoneInfo, clock: Clock = utc_now) -> datetime:
    """Current time converted to the target zone."""
    return clock().astimezone(zone)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (17.5 -> 18)."""
    return math.floor(value + 0.5)
