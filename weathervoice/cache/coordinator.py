"""Single shared cache entry with single-flight refresh and degraded fallback.

Lifecycle: the coordinator starts empty. The first completed refresh attempt
leaves an entry behind whether it succeeds (fresh payload) or fails (degraded
payload). Later failures keep the last good entry; only a cache that never
held a good payload gets a degraded one. Entries are swapped whole.
"""

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import timedelta

from weathervoice.config.schema import CacheConfig
from weathervoice.models.cache import CacheEntry
from weathervoice.models.common import Clock, utc_now
from weathervoice.pipeline.report_pipeline import ReportPipeline

logger = logging.getLogger(__name__)


@dataclass
class _InFlight:
    future: Future = field(default_factory=Future)
    waiters: int = 0


class CacheCoordinator:
    def __init__(
        self,
        pipeline: ReportPipeline,
        ttl: timedelta = timedelta(minutes=65),
        degraded_retry: timedelta = timedelta(minutes=5),
        clock: Clock = utc_now,
    ):
        self.pipeline = pipeline
        self.ttl = ttl
        self.degraded_retry = degraded_retry
        self.clock = clock
        self._entry: CacheEntry | None = None
        self._lock = threading.Lock()
        self._in_flight: _InFlight | None = None

    @classmethod
    def from_config(
        cls, pipeline: ReportPipeline, cache: CacheConfig, clock: Clock = utc_now
    ) -> "CacheCoordinator":
        return cls(
            pipeline,
            ttl=timedelta(minutes=cache.ttl_minutes),
            degraded_retry=timedelta(minutes=cache.degraded_retry_minutes),
            clock=clock,
        )

    @property
    def entry(self) -> CacheEntry | None:
        return self._entry

    @property
    def refreshing(self) -> bool:
        return self._in_flight is not None

    @property
    def pending_callers(self) -> int:
        """Callers attached to the in-flight refresh besides its owner."""
        in_flight = self._in_flight
        return in_flight.waiters if in_flight is not None else 0

    def refresh(self) -> CacheEntry:
        """Run the pipeline, or join the attempt already running.

        Every caller sees the same outcome. Failures are re-raised after a
        degraded entry is stored when no good entry exists.
        """
        with self._lock:
            in_flight = self._in_flight
            owner = in_flight is None
            if owner:
                in_flight = _InFlight()
                self._in_flight = in_flight
            else:
                in_flight.waiters += 1

        if not owner:
            logger.debug("Joining in-flight refresh")
            return in_flight.future.result()

        error: BaseException | None = None
        entry: CacheEntry | None = None
        try:
            logger.info("Refreshing weather payload")
            payload = self.pipeline.render()
            entry = CacheEntry(rendered_payload=payload, created_at=self.clock())
            self._entry = entry
            logger.info("Weather payload refreshed")
        except Exception as e:
            error = e
            logger.warning("Refresh failed: %s: %s", type(e).__name__, e)
            self._store_degraded(e)
        except BaseException as e:
            # interrupted without an outcome; waiters still get released
            error = e
        finally:
            with self._lock:
                self._in_flight = None

        if error is not None:
            in_flight.future.set_exception(error)
            raise error
        in_flight.future.set_result(entry)
        return entry

    def read(self) -> str:
        """Best available payload. Never raises once a fallback can be rendered."""
        entry = self._entry
        if entry is None or self._expired(entry):
            try:
                entry = self.refresh()
            except Exception:
                logger.info("Serving fallback payload after failed refresh")
                entry = self._entry

        if entry is None:
            # degraded synthesis itself failed; render without caching
            return self.pipeline.render_degraded()
        return entry.rendered_payload

    def tick(self) -> bool:
        """Scheduled trigger. Returns True when the refresh succeeded."""
        try:
            self.refresh()
            return True
        except Exception:
            logger.exception("Scheduled refresh failed")
            return False

    def _expired(self, entry: CacheEntry) -> bool:
        limit = self.degraded_retry if entry.is_degraded else self.ttl
        return entry.age_seconds(self.clock()) > limit.total_seconds()

    def _store_degraded(self, error: Exception) -> None:
        current = self._entry
        if current is not None and not current.is_degraded:
            logger.info("Keeping last good payload from %s", current.created_at.isoformat())
            return
        try:
            payload = self.pipeline.render_degraded(str(error))
        except Exception:
            logger.exception("Could not render degraded payload")
            return
        self._entry = CacheEntry(
            rendered_payload=payload, created_at=self.clock(), is_degraded=True
        )
        logger.warning("Stored degraded payload")
