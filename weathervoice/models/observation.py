"""Normalized upstream data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class RawObservation:
    name: str
    description: str
    weather_code: int | None
    temperature: float | None
    apparent_temperature: float | None
    humidity: float | None
    observed_at: datetime


@dataclass(frozen=True)
class HourlyRecord:
    timestamp: datetime  # tz-aware, target zone
    weather_code: int | None
    temperature: float | None
    humidity: float | None


@dataclass(frozen=True)
class StationCandidate:
    name: str
    raw_fields: dict[str, Any]
    match_score: int


@dataclass(frozen=True)
class WeatherSnapshot:
    location_name: str
    observation: RawObservation | None = None
    hourly: list[HourlyRecord] = field(default_factory=list)
    source_time: datetime | None = None
