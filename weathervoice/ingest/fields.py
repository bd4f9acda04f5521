"""Prioritized per-provider field-resolution tables.

Each table maps a logical field to the dotted paths a provider may use for
it, most preferred first. Supporting a new provider means adding a table.
"""

from typing import Any

from weathervoice.config.schema import Provider

FieldTable = dict[str, tuple[str, ...]]

SMN_FIELDS: FieldTable = {
    "name": ("name", "station", "city", "localidad"),
    "temperature": (
        "weather.temp", "weather.temperature", "temp", "temperature", "t",
    ),
    "apparent_temperature": ("weather.st", "st", "sensacion", "feels_like"),
    "humidity": ("weather.humidity", "humidity", "humedad"),
    "description": (
        "weather.description", "weather.weather", "description", "state",
        "icon_description",
    ),
    "weather_code": ("weather.id",),
    "timestamp": (
        "updated", "updated_at", "last_update", "timestamp", "ts", "fecha",
        "hora", "time", "weather.ts",
    ),
}

OPEN_METEO_FIELDS: FieldTable = {
    "temperature": ("current.temperature_2m", "current_weather.temperature"),
    "apparent_temperature": ("current.apparent_temperature",),
    "humidity": ("current.relative_humidity_2m", "current.relativehumidity_2m"),
    "weather_code": ("current.weather_code", "current_weather.weathercode"),
    "timestamp": ("current.time", "current_weather.time"),
    "hourly_time": ("hourly.time",),
    "hourly_weather_code": ("hourly.weather_code", "hourly.weathercode"),
    "hourly_temperature": ("hourly.temperature_2m",),
    "hourly_humidity": ("hourly.relative_humidity_2m", "hourly.relativehumidity_2m"),
}

FIELD_TABLES: dict[Provider, FieldTable] = {
    Provider.SMN: SMN_FIELDS,
    Provider.OPEN_METEO: OPEN_METEO_FIELDS,
}


def lookup_path(record: Any, path: str) -> Any:
    """Follow a dotted path through nested dicts. Missing keys yield None."""
    obj = record
    for part in path.split("."):
        if not isinstance(obj, dict):
            return None
        obj = obj.get(part)
    return obj


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def candidates(record: Any, table: FieldTable, field: str) -> list[Any]:
    """All present values for a field, in table priority order."""
    values = (lookup_path(record, path) for path in table.get(field, ()))
    return [v for v in values if _present(v)]


def resolve(record: Any, table: FieldTable, field: str, default: Any = None) -> Any:
    """First present value for a field, or default."""
    found = candidates(record, table, field)
    return found[0] if found else default
