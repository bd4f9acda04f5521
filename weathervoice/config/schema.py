"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator


class Provider(StrEnum):
    OPEN_METEO = "openmeteo"  # single point, current + hourly forecast
    SMN = "smn"               # multi-station current conditions


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str = "Capital Federal"
    latitude: float = Field(default=-34.6037, ge=-90, le=90)
    longitude: float = Field(default=-58.3816, ge=-180, le=180)
    timezone: str = "America/Argentina/Buenos_Aires"

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class UpstreamConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: Provider = Provider.OPEN_METEO
    url: str = ""  # empty -> provider default
    timeout_seconds: float = Field(default=10.0, gt=0.0)
    api_key_env: str | None = None
    api_key_param: str = "apikey"
    user_agent: str = "weathervoice/0.1.0"


class StationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    keywords: list[str] = ["aeroparque", "caba", "capital", "buenos aires"]
    priority_keyword: str = "aeroparque"
    priority_bonus: int = Field(default=3, ge=0)


class ReportConfig(BaseModel):
    model_config = {"extra": "forbid"}

    current: bool = True
    forecast_days: int = Field(default=3, ge=0, le=7)
    include_humidity: bool = True


class FreshnessConfig(BaseModel):
    model_config = {"extra": "forbid"}

    max_age_minutes: int = Field(default=120, ge=1)
    future_tolerance_minutes: int = Field(default=10, ge=0)


class CacheConfig(BaseModel):
    model_config = {"extra": "forbid"}

    ttl_minutes: int = Field(default=65, ge=1)
    degraded_retry_minutes: int = Field(default=5, ge=1)


class ScheduleConfig(BaseModel):
    model_config = {"extra": "forbid"}

    enabled: bool = True
    interval_minutes: int = Field(default=60, ge=1)
    refresh_on_start: bool = True


class VoiceConfig(BaseModel):
    model_config = {"extra": "forbid"}

    callback_url: str | None = None
    include_failure_reason: bool = False


class OpsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    location: LocationConfig = LocationConfig()
    upstream: UpstreamConfig = UpstreamConfig()
    station: StationConfig = StationConfig()
    report: ReportConfig = ReportConfig()
    freshness: FreshnessConfig = FreshnessConfig()
    cache: CacheConfig = CacheConfig()
    schedule: ScheduleConfig = ScheduleConfig()
    voice: VoiceConfig = VoiceConfig()
    ops: OpsConfig = OpsConfig()
