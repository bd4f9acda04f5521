"""Report pipeline: fetch, segment, phrase, and render one payload."""

import logging

from weathervoice.config.loader import with_provider_defaults
from weathervoice.config.schema import AppConfig
from weathervoice.forecast.segmenter import segment_days
from weathervoice.ingest.sources import WeatherSource, build_source
from weathervoice.models.common import Clock, local_now, utc_now
from weathervoice.reporting.document import render_document
from weathervoice.reporting.phrases import build_degraded_lines, build_lines

logger = logging.getLogger(__name__)


class ReportPipeline:
    """Produces rendered payloads; the degraded variant shares the render step."""

    def __init__(self, config: AppConfig, source: WeatherSource, clock: Clock = utc_now):
        self.config = config
        self.source = source
        self.clock = clock
        self.zone = config.location.zone

    def render(self) -> str:
        """Run the full pipeline. Stage errors propagate unmodified."""
        now = local_now(self.zone, self.clock)
        snapshot = self.source.fetch(now)

        report = self.config.report
        days = []
        if report.forecast_days > 0 and snapshot.hourly:
            days = segment_days(
                snapshot.hourly,
                now,
                report.forecast_days,
                include_humidity=report.include_humidity,
            )

        lines = build_lines(snapshot, days, now, include_current=report.current)
        logger.info(
            "Rendered %d lines for %s (%d days)",
            len(lines), snapshot.location_name, len(days),
        )
        return self._document(lines)

    def render_degraded(self, reason: str | None = None) -> str:
        now = local_now(self.zone, self.clock)
        if not self.config.voice.include_failure_reason:
            reason = None
        lines = build_degraded_lines(self.config.location.name, now, reason)
        return self._document(lines)

    def _document(self, lines: list[str]) -> str:
        return render_document(lines, self.config.voice.callback_url)


def build_pipeline(config: AppConfig, clock: Clock = utc_now) -> ReportPipeline:
    """Wire the configured provider into a pipeline."""
    config = with_provider_defaults(config)
    return ReportPipeline(config, build_source(config), clock=clock)
