"""Liveness and cache status for the live flights service."""

from typing import Any

from fastapi import APIRouter, Request

from livefleet.config import settings

router = APIRouter()


@router.get("/healthz", summary="Health check")
def health_check(request: Request) -> dict[str, Any]:
    """Report whether live flights can be served and how warm the plan cache is.

    Before startup has finished the client and service are absent, which is
    reported as ``"starting"``.
    """

    client = getattr(request.app.state, "infinite_flight_client", None)
    service = getattr(request.app.state, "live_service", None)
    if client is None or service is None:
        return {"status": "starting", "env": settings.livefleet_env}

    return {
        "status": "ok" if client.is_configured else "degraded",
        "env": settings.livefleet_env,
        "airline": settings.airline_name,
        "api_key_configured": client.is_configured,
        "plan_cache": service.plan_cache.stats,
    }
