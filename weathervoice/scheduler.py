"""Background refresh scheduler: ticks the cache coordinator on an interval.

Runs in a daemon thread next to the HTTP server. Scheduled ticks fan in to
the same single-flight refresh as reads and forced refreshes.
"""

import logging
import threading

from weathervoice.cache.coordinator import CacheCoordinator
from weathervoice.config.schema import ScheduleConfig

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 3600  # 1 hour
MIN_RETRY = 60


class RefreshScheduler:
    """Calls coordinator.tick() every interval; retries sooner after failures."""

    def __init__(
        self,
        coordinator: CacheCoordinator,
        interval: int = DEFAULT_INTERVAL,
        refresh_on_start: bool = True,
    ):
        self.coordinator = coordinator
        self.interval = interval
        self.refresh_on_start = refresh_on_start
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._consecutive_failures = 0
        self._total_ticks = 0

    @classmethod
    def from_config(
        cls, coordinator: CacheCoordinator, schedule: ScheduleConfig
    ) -> "RefreshScheduler":
        return cls(
            coordinator,
            interval=schedule.interval_minutes * 60,
            refresh_on_start=schedule.refresh_on_start,
        )

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name="weathervoice-scheduler", daemon=True
        )
        self._thread.start()
        logger.info("Scheduler started, interval=%ds", self.interval)

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info(
            "Scheduler stopped after %d ticks (%d consecutive failures)",
            self._total_ticks, self._consecutive_failures,
        )

    def run_once(self) -> bool:
        """Execute a single scheduled tick. Returns True on success."""
        self._total_ticks += 1
        ok = self.coordinator.tick()
        if ok:
            self._consecutive_failures = 0
        else:
            self._consecutive_failures += 1
        return ok

    def next_wait(self) -> float:
        """Seconds until the next tick; shorter while refreshes keep failing."""
        if self._consecutive_failures == 0:
            return self.interval
        retry = MIN_RETRY * (2 ** (self._consecutive_failures - 1))
        return min(retry, self.interval)

    def _loop(self) -> None:
        if self.refresh_on_start:
            self.run_once()
        while True:
            wait = self.next_wait()
            if self._consecutive_failures:
                logger.warning(
                    "Refresh failing (%d consecutive), retrying in %ds",
                    self._consecutive_failures, wait,
                )
            if self._stop.wait(wait):
                return
            self.run_once()
