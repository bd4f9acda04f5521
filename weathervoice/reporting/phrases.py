"""Spoken-line rendering for normal and degraded reports."""

import re
from datetime import datetime

from weathervoice.models.common import round_half_up
from weathervoice.models.forecast import DayForecast, Segment
from weathervoice.models.observation import RawObservation, WeatherSnapshot

MAX_LINE_LENGTH = 240

RELATIVE_DAY_LABELS = {0: "Hoy", 1: "Mañana", 2: "Pasado mañana"}
WEEKDAY_NAMES = ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo")

_WHITESPACE = re.compile(r"\s+")


def sanitize(text: object) -> str:
    """Collapse whitespace, trim, and cap the length of one spoken line."""
    s = _WHITESPACE.sub(" ", str(text if text is not None else "")).strip()
    if len(s) > MAX_LINE_LENGTH:
        s = s[:MAX_LINE_LENGTH].strip()
    return s


def format_reading(value: float) -> str:
    return str(round_half_up(value))


def sentence(text: str) -> str:
    text = text.strip()
    if not text:
        return ""
    return text if text.endswith(".") else f"{text}."


def day_label(day: DayForecast) -> str:
    if day.offset in RELATIVE_DAY_LABELS:
        return RELATIVE_DAY_LABELS[day.offset]
    return WEEKDAY_NAMES[day.date.weekday()]


def moment_label(segment: Segment) -> str:
    if segment.is_current:
        return f"Esta {segment.part.label}"
    return segment.part.label.capitalize()


def current_line(obs: RawObservation) -> str:
    parts = [sentence(obs.description)]
    if obs.temperature is not None:
        parts.append(f"Temperatura {format_reading(obs.temperature)} grados.")
    if obs.apparent_temperature is not None:
        parts.append(f"Sensación {format_reading(obs.apparent_temperature)} grados.")
    if obs.humidity is not None:
        parts.append(f"Humedad {format_reading(obs.humidity)} por ciento.")
    return " ".join(p for p in parts if p)


def segment_line(segment: Segment) -> str:
    parts = [sentence(segment.description)]
    if segment.has_range:
        parts.append(f"Entre {segment.temp_min} y {segment.temp_max} grados.")
    if segment.humidity_avg is not None:
        parts.append(f"Humedad {segment.humidity_avg} por ciento.")
    return f"{moment_label(segment)}: " + " ".join(p for p in parts if p)


def updated_line(at: datetime) -> str:
    return f"Actualizado {at.strftime('%H:%M')}."


def finalize(lines: list[str]) -> list[str]:
    """Sanitize every line and drop the ones left empty."""
    cleaned = (sanitize(line) for line in lines)
    return [line for line in cleaned if line]


def build_lines(
    snapshot: WeatherSnapshot,
    days: list[DayForecast],
    now: datetime,
    include_current: bool = True,
) -> list[str]:
    """Ordered lines: location, current conditions, day parts, update time.

    now is wall-clock time in the target zone, used for the update line when
    the snapshot has no resolved source time.
    """
    lines = [sentence(snapshot.location_name)]
    if include_current and snapshot.observation is not None:
        lines.append(current_line(snapshot.observation))
    for day in days:
        lines.append(sentence(day_label(day)))
        lines.extend(segment_line(s) for s in day.segments)

    updated_at = snapshot.source_time.astimezone(now.tzinfo) if snapshot.source_time else now
    lines.append(updated_line(updated_at))
    return finalize(lines)


def build_degraded_lines(
    location_name: str, now: datetime, reason: str | None = None
) -> list[str]:
    lines = [f"Clima para {location_name} no disponible por el momento."]
    if reason:
        lines.append(f"Motivo: {sentence(reason)}")
    lines.append(updated_line(now))
    return finalize(lines)
