from __future__ import annotations

import contextlib
import logging
import time

from fastapi import FastAPI, Request

from livefleet.api import api_router
from livefleet.config import resolve_infinite_flight_api_key, settings
from livefleet.ingestors import InfiniteFlightClient
from livefleet.services import LiveFlightService, RoutePlanCache, SnapshotStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("livefleet")


def build_live_service() -> LiveFlightService:
    """Create the service with caches sized from settings."""

    return LiveFlightService(
        SnapshotStore(ttl_seconds=settings.snapshot_ttl_seconds),
        RoutePlanCache(
            ttl_seconds=settings.flight_plan_cache_ttl_seconds,
            fetch_timeout=settings.flight_plan_timeout,
        ),
    )


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    api_key = resolve_infinite_flight_api_key()
    app.state.infinite_flight_client = InfiniteFlightClient(api_key=api_key)
    app.state.live_service = build_live_service()
    if api_key:
        logger.info("Live flights enabled for %s", settings.airline_name)
    else:
        logger.warning("Infinite Flight API key missing; live flight requests will fail")

    yield

    logger.info("Plan cache at shutdown: %s", app.state.live_service.plan_cache.stats)


app = FastAPI(title="livefleet", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "livefleet is running"}
