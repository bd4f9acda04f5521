"""Shared cache entry model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CacheEntry:
    rendered_payload: str
    created_at: datetime
    is_degraded: bool = False

    def age_seconds(self, now: datetime) -> float:
        return (now - self.created_at).total_seconds()
