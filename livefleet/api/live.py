"""Live flight endpoints: first page and page turns."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, status

from livefleet.config import get_filter_criteria, settings
from livefleet.domain import InvalidPage, LiveFlightsError, NoSnapshot, UpstreamUnavailable
from livefleet.ingestors import InfiniteFlightClient
from livefleet.models.pages import PageResult
from livefleet.services import LiveFlightService

router = APIRouter(prefix="/api/v1", tags=["live"])

logger = logging.getLogger("livefleet.live")

_STATUS_BY_ERROR: dict[type[LiveFlightsError], int] = {
    NoSnapshot: status.HTTP_404_NOT_FOUND,
    InvalidPage: status.HTTP_400_BAD_REQUEST,
    UpstreamUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_live_service(request: Request) -> LiveFlightService:
    return request.app.state.live_service


def get_infinite_flight_client(request: Request) -> InfiniteFlightClient:
    return request.app.state.infinite_flight_client


def _error_response(exc: LiveFlightsError) -> HTTPException:
    status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(
        status_code=status_code,
        detail={"code": exc.code, "message": exc.user_message},
    )


def _require_configured(client: InfiniteFlightClient) -> None:
    if not client.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "code": "api_key_missing",
                "message": "Infinite Flight API key not configured. Please configure it in the admin settings.",
            },
        )


@router.get(
    "/live",
    response_model=PageResult,
    summary="Fetch live flights and render the first page",
)
async def get_live_flights(
    view_id: Optional[str] = Query(
        default=None, description="Snapshot identifier to refresh; a new one is issued when omitted"
    ),
    service: LiveFlightService = Depends(get_live_service),
    client: InfiniteFlightClient = Depends(get_infinite_flight_client),
) -> PageResult:
    """Refresh the airline's live flights and return page 1."""

    _require_configured(client)
    view_id = view_id or str(uuid4())
    try:
        page = await service.render_first_page(
            client.get_flights,
            client.get_aircraft_catalog,
            client.get_flight_plan,
            get_filter_criteria(),
            source_label=settings.airline_name,
            view_id=view_id,
        )
    except LiveFlightsError as exc:
        logger.warning("Live flights unavailable for view %s: %s", view_id, exc)
        raise _error_response(exc) from exc

    logger.info(
        "Live flights rendered: view=%s pages=%s rows=%s",
        view_id,
        page.total_pages,
        len(page.rows),
    )
    return page


@router.get(
    "/live/{view_id}/pages/{page_number}",
    response_model=PageResult,
    summary="Render another page of a live flights snapshot",
)
async def get_live_flights_page(
    view_id: str = Path(..., description="Snapshot identifier returned by /live"),
    page_number: int = Path(..., description="1-based page number"),
    service: LiveFlightService = Depends(get_live_service),
    client: InfiniteFlightClient = Depends(get_infinite_flight_client),
) -> PageResult:
    """Turn the page without refetching the flight list."""

    try:
        return await service.render_page(
            page_number, client.get_flight_plan, view_id=view_id
        )
    except LiveFlightsError as exc:
        logger.info("Page %s of view %s rejected: %s", page_number, view_id, exc)
        raise _error_response(exc) from exc
