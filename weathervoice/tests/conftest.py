"""Shared test fixtures."""

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from weathervoice.config.schema import AppConfig, ScheduleConfig

BA = ZoneInfo("America/Argentina/Buenos_Aires")

# 2024-05-15 14:40 in Buenos Aires (UTC-3): the tarde day part.
FIXED_NOW_UTC = datetime(2024, 5, 15, 17, 40, tzinfo=UTC)

# Open-Meteo hourly codes per day part: madrugada, mañana, tarde, noche
PART_CODES = (0, 2, 61, 3)


def hourly_payload(start: str = "2024-05-15", days: int = 3) -> dict:
    """Columnar hourly block: temp = 10 + hour/2, humidity = 80 - hour."""
    first = datetime.fromisoformat(start)
    times, codes, temps, humidity = [], [], [], []
    for i in range(days * 24):
        ts = first + timedelta(hours=i)
        times.append(ts.strftime("%Y-%m-%dT%H:%M"))
        codes.append(PART_CODES[ts.hour // 6])
        temps.append(10 + ts.hour * 0.5)
        humidity.append(80 - ts.hour)
    return {
        "time": times,
        "weather_code": codes,
        "temperature_2m": temps,
        "relative_humidity_2m": humidity,
    }


def openmeteo_payload(days: int = 3, current_time: str = "2024-05-15T14:30") -> dict:
    return {
        "latitude": -34.625,
        "longitude": -58.375,
        "timezone": "America/Argentina/Buenos_Aires",
        "utc_offset_seconds": -10800,
        "current": {
            "time": current_time,
            "interval": 900,
            "temperature_2m": 17.3,
            "apparent_temperature": 16.8,
            "relative_humidity_2m": 68,
            "weather_code": 61,
        },
        "hourly": hourly_payload(days=days),
    }


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW_UTC


@pytest.fixture
def clock():
    return lambda: FIXED_NOW_UTC


@pytest.fixture
def local_now() -> datetime:
    return FIXED_NOW_UTC.astimezone(BA)


@pytest.fixture
def default_config() -> AppConfig:
    """Default config with the background scheduler disabled."""
    return AppConfig(schedule=ScheduleConfig(enabled=False))


@pytest.fixture
def om_payload() -> dict:
    return openmeteo_payload()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def smn_records(fixtures_dir: Path) -> list[dict]:
    with open(fixtures_dir / "smn_map_items.json") as f:
        return json.load(f)
