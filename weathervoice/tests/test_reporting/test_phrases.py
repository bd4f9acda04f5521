"""Tests for spoken-line rendering."""

from datetime import date, datetime

from weathervoice.models.forecast import DayForecast, DayPart, Segment
from weathervoice.models.observation import RawObservation, WeatherSnapshot
from weathervoice.reporting.phrases import (
    MAX_LINE_LENGTH,
    build_degraded_lines,
    build_lines,
    current_line,
    day_label,
    sanitize,
    segment_line,
)
from weathervoice.tests.conftest import BA

NOW = datetime(2024, 5, 15, 14, 40, tzinfo=BA)


def _obs(**overrides) -> RawObservation:
    values = dict(
        name="Capital Federal",
        description="Lluvia débil",
        weather_code=61,
        temperature=17.3,
        apparent_temperature=16.5,
        humidity=68,
        observed_at=datetime(2024, 5, 15, 14, 30, tzinfo=BA),
    )
    values.update(overrides)
    return RawObservation(**values)


class TestSanitize:
    def test_collapses_whitespace(self):
        assert sanitize("  Algo \n\t nublado  ") == "Algo nublado"

    def test_truncates(self):
        text = "palabra " * 60
        result = sanitize(text)
        assert len(result) <= MAX_LINE_LENGTH
        assert not result.endswith(" ")

    def test_none(self):
        assert sanitize(None) == ""


class TestCurrentLine:
    def test_all_readings(self):
        assert current_line(_obs()) == (
            "Lluvia débil. Temperatura 17 grados. Sensación 17 grados. "
            "Humedad 68 por ciento."
        )

    def test_missing_readings_omitted(self):
        line = current_line(_obs(description="", apparent_temperature=None, humidity=None))
        assert line == "Temperatura 17 grados."


class TestSegmentLine:
    def test_full(self):
        segment = Segment(DayPart.TARDE, "Nublado", 17, 19, 66)
        assert segment_line(segment) == "Tarde: Nublado. Entre 17 y 19 grados. Humedad 66 por ciento."

    def test_current_moment(self):
        segment = Segment(DayPart.MANANA, "Nublado", 17, 19, None, is_current=True)
        assert segment_line(segment) == "Esta mañana: Nublado. Entre 17 y 19 grados."

    def test_unmapped_description_omitted(self):
        segment = Segment(DayPart.NOCHE, "", 10, 12, None)
        assert segment_line(segment) == "Noche: Entre 10 y 12 grados."


class TestDayLabel:
    def test_relative_labels(self):
        labels = [day_label(DayForecast(o, date(2024, 5, 15 + o), [])) for o in range(3)]
        assert labels == ["Hoy", "Mañana", "Pasado mañana"]

    def test_weekday_name(self):
        # 2024-05-18 is a Saturday
        assert day_label(DayForecast(3, date(2024, 5, 18), [])) == "Sábado"


class TestBuildLines:
    def test_order(self):
        snapshot = WeatherSnapshot(
            location_name="Capital Federal",
            observation=_obs(),
            source_time=datetime(2024, 5, 15, 17, 30, tzinfo=BA),
        )
        days = [
            DayForecast(0, date(2024, 5, 15), [
                Segment(DayPart.TARDE, "Nublado", 17, 19, None, is_current=True),
            ]),
            DayForecast(1, date(2024, 5, 16), [
                Segment(DayPart.MADRUGADA, "Despejado", 9, 11, None),
            ]),
        ]
        lines = build_lines(snapshot, days, NOW)
        assert lines == [
            "Capital Federal.",
            "Lluvia débil. Temperatura 17 grados. Sensación 17 grados. Humedad 68 por ciento.",
            "Hoy.",
            "Esta tarde: Nublado. Entre 17 y 19 grados.",
            "Mañana.",
            "Madrugada: Despejado. Entre 9 y 11 grados.",
            "Actualizado 17:30.",
        ]

    def test_wall_clock_when_no_source_time(self):
        snapshot = WeatherSnapshot(location_name="Capital Federal")
        lines = build_lines(snapshot, [], NOW)
        assert lines == ["Capital Federal.", "Actualizado 14:40."]

    def test_current_disabled(self):
        snapshot = WeatherSnapshot(location_name="CABA", observation=_obs())
        lines = build_lines(snapshot, [], NOW, include_current=False)
        assert len(lines) == 2

    def test_lines_are_sanitized(self):
        snapshot = WeatherSnapshot(
            location_name="Aeroparque   Buenos Aires",
            observation=_obs(description="Algo  nublado", temperature=None,
                             apparent_temperature=None, humidity=None),
        )
        lines = build_lines(snapshot, [], NOW)
        assert lines[:2] == ["Aeroparque Buenos Aires.", "Algo nublado."]


class TestDegradedLines:
    def test_marker_and_time(self):
        lines = build_degraded_lines("Capital Federal", NOW)
        assert lines == [
            "Clima para Capital Federal no disponible por el momento.",
            "Actualizado 14:40.",
        ]

    def test_reason_sanitized(self):
        lines = build_degraded_lines("CABA", NOW, reason="HTTP 503\nfrom upstream")
        assert lines[1] == "Motivo: HTTP 503 from upstream."
