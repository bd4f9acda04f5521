"""Day-part segmentation models."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class DayPart(Enum):
    """Fixed local-hour windows. Together they cover [0, 24) exactly once."""

    MADRUGADA = ("madrugada", 0, 6)
    MANANA = ("mañana", 6, 12)
    TARDE = ("tarde", 12, 18)
    NOCHE = ("noche", 18, 24)

    def __init__(self, label: str, start_hour: int, end_hour: int):
        self.label = label
        self.start_hour = start_hour
        self.end_hour = end_hour

    def contains(self, hour: int) -> bool:
        return self.start_hour <= hour < self.end_hour

    @classmethod
    def for_hour(cls, hour: int) -> "DayPart":
        for part in cls:
            if part.contains(hour):
                return part
        raise ValueError(f"Hour out of range: {hour}")


@dataclass(frozen=True)
class Segment:
    part: DayPart
    description: str
    temp_min: int | None
    temp_max: int | None
    humidity_avg: int | None
    is_current: bool = False

    @property
    def has_range(self) -> bool:
        return self.temp_min is not None and self.temp_max is not None


@dataclass(frozen=True)
class DayForecast:
    offset: int
    date: date
    segments: list[Segment]
