"""Error taxonomy for the refresh pipeline.

Pipeline stages raise these unmodified; the cache coordinator is the only
place that catches them.
"""

from typing import Any


class WeatherVoiceError(Exception):
    """Base class for every failure the refresh pipeline can raise."""


class UpstreamError(WeatherVoiceError):
    """Raised on transport failure, timeout, or a non-2xx upstream response."""

    def __init__(self, message: str, status: int | None = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body


class ParseError(WeatherVoiceError):
    """Raised when the upstream payload is missing or malformed."""


class NotFoundError(WeatherVoiceError):
    """Raised when no station candidate matches the target keywords."""


class TimestampError(WeatherVoiceError):
    """Raised when no candidate timestamp field can be parsed."""


class StaleDataError(WeatherVoiceError):
    """Raised when source data is too old or dated in the future."""

    def __init__(self, message: str, age_minutes: float):
        super().__init__(message)
        self.age_minutes = age_minutes


class ConfigError(WeatherVoiceError):
    """Raised when a required setting or credential is missing."""
