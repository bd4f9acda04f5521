"""Provider adapters: fetch upstream data and normalize it into a snapshot."""

import logging
import math
from datetime import datetime
from typing import Any

from weathervoice.config.schema import AppConfig, Provider
from weathervoice.errors import ParseError
from weathervoice.forecast.weather_codes import describe_code
from weathervoice.ingest.fetcher import WeatherFetcher
from weathervoice.ingest.fields import (
    OPEN_METEO_FIELDS,
    SMN_FIELDS,
    FieldTable,
    candidates,
    resolve,
)
from weathervoice.ingest.station_selector import select_station
from weathervoice.ingest.timestamps import check_freshness, parse_iso, resolve_timestamp
from weathervoice.models.observation import HourlyRecord, RawObservation, WeatherSnapshot

logger = logging.getLogger(__name__)

OPEN_METEO_CURRENT = (
    "temperature_2m", "apparent_temperature", "relative_humidity_2m", "weather_code",
)
OPEN_METEO_HOURLY = ("weather_code", "temperature_2m", "relative_humidity_2m")


def as_float(value: Any) -> float | None:
    """Numeric reading; None when it is missing or not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip().replace(",", "."))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def as_int(value: Any) -> int | None:
    number = as_float(value)
    return int(number) if number is not None else None


class WeatherSource:
    """Base adapter. Subclasses turn one upstream call into a snapshot."""

    provider: Provider
    fields: FieldTable

    def __init__(self, config: AppConfig, fetcher: WeatherFetcher):
        self.config = config
        self.fetcher = fetcher
        self.zone = config.location.zone

    def fetch(self, now: datetime) -> WeatherSnapshot:
        raise NotImplementedError

    def _resolve_source_time(self, record: Any, now: datetime) -> datetime:
        source_time = resolve_timestamp(
            candidates(record, self.fields, "timestamp"), self.zone, now
        )
        check_freshness(
            source_time,
            now,
            max_age_minutes=self.config.freshness.max_age_minutes,
            future_tolerance_minutes=self.config.freshness.future_tolerance_minutes,
        )
        return source_time


class OpenMeteoSource(WeatherSource):
    """Single-point source with current conditions and an hourly forecast."""

    provider = Provider.OPEN_METEO
    fields = OPEN_METEO_FIELDS

    def params(self) -> dict[str, Any]:
        report = self.config.report
        location = self.config.location
        params: dict[str, Any] = {
            "latitude": location.latitude,
            "longitude": location.longitude,
            "timezone": location.timezone,
        }
        if report.current:
            params["current"] = ",".join(OPEN_METEO_CURRENT)
        if report.forecast_days > 0:
            params["hourly"] = ",".join(OPEN_METEO_HOURLY)
            params["forecast_days"] = report.forecast_days
        return params

    def fetch(self, now: datetime) -> WeatherSnapshot:
        report = self.config.report
        required = []
        if report.current:
            required.append("current")
        if report.forecast_days > 0:
            required.append("hourly")

        raw = self.fetcher.fetch(self.params(), required_fields=required)

        observation = None
        source_time = None
        if report.current:
            source_time = self._resolve_source_time(raw, now)
            code = as_int(resolve(raw, self.fields, "weather_code"))
            observation = RawObservation(
                name=self.config.location.name,
                description=describe_code(code),
                weather_code=code,
                temperature=as_float(resolve(raw, self.fields, "temperature")),
                apparent_temperature=as_float(
                    resolve(raw, self.fields, "apparent_temperature")
                ),
                humidity=as_float(resolve(raw, self.fields, "humidity")),
                observed_at=source_time,
            )

        hourly = self.parse_hourly(raw) if report.forecast_days > 0 else []
        return WeatherSnapshot(
            location_name=self.config.location.name,
            observation=observation,
            hourly=hourly,
            source_time=source_time,
        )

    def parse_hourly(self, raw: dict) -> list[HourlyRecord]:
        """Zip the columnar hourly arrays into records."""
        times = resolve(raw, self.fields, "hourly_time")
        if not isinstance(times, list):
            raise ParseError("Hourly payload has no time array")

        columns = {}
        for field in ("hourly_weather_code", "hourly_temperature", "hourly_humidity"):
            values = resolve(raw, self.fields, field)
            if values is None:
                values = [None] * len(times)
            if not isinstance(values, list) or len(values) != len(times):
                raise ParseError(f"Hourly column {field} does not match time array")
            columns[field] = values

        records: list[HourlyRecord] = []
        for i, raw_time in enumerate(times):
            timestamp = parse_iso(str(raw_time), self.zone)
            if timestamp is None:
                raise ParseError(f"Unparseable hourly time: {raw_time!r}")
            records.append(
                HourlyRecord(
                    timestamp=timestamp,
                    weather_code=as_int(columns["hourly_weather_code"][i]),
                    temperature=as_float(columns["hourly_temperature"][i]),
                    humidity=as_float(columns["hourly_humidity"][i]),
                )
            )
        return records


class SmnSource(WeatherSource):
    """Multi-station current conditions from the SMN map feed."""

    provider = Provider.SMN
    fields = SMN_FIELDS

    def fetch(self, now: datetime) -> WeatherSnapshot:
        records = self.fetcher.fetch(expect_list=True)
        station = select_station(records, self.fields, self.config.station)
        rec = station.raw_fields

        source_time = self._resolve_source_time(rec, now)
        name = str(resolve(rec, self.fields, "name", self.config.location.name))
        observation = RawObservation(
            name=name,
            description=str(resolve(rec, self.fields, "description", "")),
            weather_code=as_int(resolve(rec, self.fields, "weather_code")),
            temperature=as_float(resolve(rec, self.fields, "temperature")),
            apparent_temperature=as_float(
                resolve(rec, self.fields, "apparent_temperature")
            ),
            humidity=as_float(resolve(rec, self.fields, "humidity")),
            observed_at=source_time,
        )
        if self.config.report.forecast_days > 0:
            logger.debug("SMN map feed carries no hourly forecast; skipping day parts")
        return WeatherSnapshot(
            location_name=name,
            observation=observation,
            hourly=[],
            source_time=source_time,
        )


SOURCES: dict[Provider, type[WeatherSource]] = {
    Provider.OPEN_METEO: OpenMeteoSource,
    Provider.SMN: SmnSource,
}


def build_source(config: AppConfig, fetcher: WeatherFetcher | None = None) -> WeatherSource:
    """Instantiate the adapter for the configured provider."""
    if fetcher is None:
        fetcher = WeatherFetcher.from_config(config.upstream)
    return SOURCES[config.upstream.provider](config, fetcher)
