"""Pick the target station out of a multi-station upstream response."""

import logging
from typing import Any

from weathervoice.config.schema import StationConfig
from weathervoice.errors import NotFoundError
from weathervoice.ingest.fields import FieldTable, resolve
from weathervoice.models.observation import StationCandidate

logger = logging.getLogger(__name__)


def normalize_name(value: Any) -> str:
    return str(value if value is not None else "").strip().lower()


def score_name(name: str, station: StationConfig) -> int:
    """+1 per keyword substring, plus the bonus for the priority keyword."""
    score = sum(1 for keyword in station.keywords if keyword in name)
    if station.priority_keyword and station.priority_keyword in name:
        score += station.priority_bonus
    return score


def score_candidates(
    records: list[Any], table: FieldTable, station: StationConfig
) -> list[StationCandidate]:
    scored: list[StationCandidate] = []
    for rec in records:
        if not isinstance(rec, dict):
            scored.append(StationCandidate(name="", raw_fields={}, match_score=0))
            continue
        name = normalize_name(resolve(rec, table, "name", ""))
        scored.append(
            StationCandidate(name=name, raw_fields=rec, match_score=score_name(name, station))
        )
    return scored


def select_station(
    records: list[Any], table: FieldTable, station: StationConfig
) -> StationCandidate:
    """Return the highest-scoring candidate; earlier records win ties.

    Raises NotFoundError when no candidate matches any keyword.
    """
    best: StationCandidate | None = None
    for candidate in score_candidates(records, table, station):
        if best is None or candidate.match_score > best.match_score:
            best = candidate

    if best is None or best.match_score == 0:
        raise NotFoundError(
            f"No station matched {station.keywords} among {len(records)} records"
        )
    logger.info("Selected station %r (score %d)", best.name, best.match_score)
    return best
