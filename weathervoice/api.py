"""Voice weather API: FastAPI app serving the cached payload + refresh control."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from weathervoice.cache.coordinator import CacheCoordinator
from weathervoice.config.schema import AppConfig
from weathervoice.errors import UpstreamError
from weathervoice.models.common import utc_now_iso
from weathervoice.pipeline.report_pipeline import build_pipeline
from weathervoice.scheduler import RefreshScheduler

logger = logging.getLogger(__name__)

XML_MEDIA_TYPE = "application/xml"


def create_app(
    config: AppConfig,
    coordinator: CacheCoordinator | None = None,
    scheduler: RefreshScheduler | None = None,
) -> FastAPI:
    """Build the app around one coordinator. The scheduler runs for the app's lifetime."""
    if coordinator is None:
        coordinator = CacheCoordinator.from_config(build_pipeline(config), config.cache)
    if scheduler is None and config.schedule.enabled:
        scheduler = RefreshScheduler.from_config(coordinator, config.schedule)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if scheduler is not None:
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.stop()

    app = FastAPI(title="Weather Voice", version="0.1.0", lifespan=lifespan)
    app.state.coordinator = coordinator

    @app.get("/", response_class=PlainTextResponse)
    def health():
        return "ok"

    @app.get("/weather/voice")
    def voice():
        """Cached (or freshly refreshed, or degraded) XML payload."""
        return Response(content=coordinator.read(), media_type=XML_MEDIA_TYPE)

    @app.post("/weather/update")
    def update():
        """Forced refresh; reports the upstream outcome."""
        try:
            coordinator.refresh()
        except Exception as e:
            logger.warning("Forced refresh failed: %s", e)
            status = e.status if isinstance(e, UpstreamError) else None
            body = e.body if isinstance(e, UpstreamError) else None
            return JSONResponse(
                status_code=502,
                content={
                    "ok": False,
                    "error": str(e),
                    "upstream_status": status,
                    "upstream_body": body,
                },
            )
        return {
            "ok": True,
            "message": "Weather refreshed.",
            "upstream_status": None,
            "upstream_body": None,
        }

    @app.get("/weather/status")
    def status():
        """Cache entry metadata."""
        entry = coordinator.entry
        return {
            "has_entry": entry is not None,
            "is_degraded": entry.is_degraded if entry else None,
            "created_at": entry.created_at.isoformat() if entry else None,
            "age_seconds": round(entry.age_seconds(coordinator.clock()), 1) if entry else None,
            "refreshing": coordinator.refreshing,
            "timestamp": utc_now_iso(),
        }

    return app
