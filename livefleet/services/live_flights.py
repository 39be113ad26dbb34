"""Fetch-and-render cycle for paginated live flight summaries."""

from __future__ import annotations

import logging
import math
from typing import Mapping, Optional

from livefleet.domain import InvalidPage, NoSnapshot
from livefleet.models.live import FilterCriteria, FlightEntry, RoutePlan
from livefleet.models.pages import FlightRow, PageResult
from livefleet.services.plan_cache import RoutePlanCache, RoutePlanFetcher
from livefleet.services.progress import (
    NO_FLIGHT_PLAN,
    NOT_AVAILABLE,
    estimate_progress,
    progress_bar,
    route_display,
)
from livefleet.services.reference_index import ReferenceIndex
from livefleet.services.snapshot_store import (
    DEFAULT_VIEW,
    FlightSnapshot,
    ReferenceFetcher,
    SnapshotStore,
    TelemetryFetcher,
)

logger = logging.getLogger("livefleet.live_flights")

PAGE_SIZE = 3
UNKNOWN_PILOT = "Unknown"


def _half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def build_flight_row(
    flight: FlightEntry,
    ordinal: int,
    reference_index: ReferenceIndex,
    plan: RoutePlan | None,
) -> FlightRow:
    """Render one flight, degrading to a zero-progress row without a plan."""

    if plan is not None:
        estimate = estimate_progress(flight.latitude, flight.longitude, plan, flight.speed)
        route = route_display(plan)
        percent = _half_up(estimate.percent)
        bar = estimate.progress_bar
        eta = estimate.eta
    else:
        route = NO_FLIGHT_PLAN
        percent = 0
        bar = progress_bar(0)
        eta = NOT_AVAILABLE

    return FlightRow(
        ordinal=ordinal,
        flight_id=flight.flight_id,
        callsign=flight.callsign,
        pilot=flight.username or UNKNOWN_PILOT,
        aircraft=reference_index.describe_aircraft(flight.aircraft_id, flight.livery_id),
        route=route,
        altitude_ft=_half_up(flight.altitude),
        speed_kts=_half_up(flight.speed),
        progress_percent=percent,
        progress_bar=bar,
        eta=eta,
        has_flight_plan=plan is not None,
    )


class LiveFlightService:
    """Orchestrates snapshots, flight plan lookups and page rendering."""

    def __init__(
        self,
        snapshot_store: Optional[SnapshotStore] = None,
        plan_cache: Optional[RoutePlanCache] = None,
        *,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.snapshot_store = snapshot_store or SnapshotStore()
        self.plan_cache = plan_cache or RoutePlanCache()
        self.page_size = page_size

    async def render_first_page(
        self,
        telemetry_fetcher: TelemetryFetcher,
        reference_fetcher: ReferenceFetcher,
        plan_fetcher: RoutePlanFetcher,
        filter_criteria: FilterCriteria,
        *,
        source_label: str,
        view_id: str = DEFAULT_VIEW,
    ) -> PageResult:
        """Refresh the view's snapshot and render page 1.

        Raises ``UpstreamUnavailable`` when the flight list or the catalog
        cannot be fetched.
        """

        snapshot = await self.snapshot_store.refresh(
            telemetry_fetcher,
            reference_fetcher,
            filter_criteria,
            source_label=source_label,
            view_id=view_id,
        )
        return await self._render(snapshot, 1, plan_fetcher, view_id)

    async def render_page(
        self,
        page_number: int,
        plan_fetcher: RoutePlanFetcher,
        *,
        view_id: str = DEFAULT_VIEW,
    ) -> PageResult:
        """Render another page of the view's existing snapshot."""

        snapshot = self.snapshot_store.current(view_id)
        if snapshot is None:
            raise NoSnapshot(f"No snapshot stored for view {view_id}")

        # Counts only real pages, so an empty snapshot has none to turn to.
        total_pages = snapshot.total_pages(self.page_size)
        if page_number < 1 or page_number > total_pages:
            raise InvalidPage(page_number, total_pages)

        return await self._render(snapshot, page_number, plan_fetcher, view_id)

    def _total_pages(self, snapshot: FlightSnapshot) -> int:
        # Displayed count: an empty snapshot still shows the single notice page.
        return max(1, snapshot.total_pages(self.page_size))

    async def _load_plans(
        self, flights: tuple[FlightEntry, ...], plan_fetcher: RoutePlanFetcher
    ) -> Mapping[str, Optional[RoutePlan]]:
        plans: dict[str, Optional[RoutePlan]] = {}
        for flight in flights:
            cached = self.plan_cache.peek(flight.flight_id)
            if cached is not None:
                plans[flight.flight_id] = cached

        missing = [flight.flight_id for flight in flights if flight.flight_id not in plans]
        if missing:
            plans.update(await self.plan_cache.fetch_missing(missing, plan_fetcher))
        return plans

    async def _render(
        self,
        snapshot: FlightSnapshot,
        page_number: int,
        plan_fetcher: RoutePlanFetcher,
        view_id: str,
    ) -> PageResult:
        total_pages = self._total_pages(snapshot)
        source_label = snapshot.source_label

        if not snapshot.flights:
            return PageResult(
                view_id=view_id,
                page_number=1,
                total_pages=total_pages,
                notice=f"No flights found with {snapshot.filter_criteria.describe()}.",
                source_label=source_label,
                footer=source_label,
                fetched_at=snapshot.fetched_at,
            )

        page_flights = snapshot.page(page_number, self.page_size)
        plans = await self._load_plans(page_flights, plan_fetcher)

        start = (page_number - 1) * self.page_size
        rows = [
            build_flight_row(
                flight,
                start + offset + 1,
                snapshot.reference_index,
                plans.get(flight.flight_id),
            )
            for offset, flight in enumerate(page_flights)
        ]
        logger.debug(
            "Rendered page %s/%s for view %s with %s rows",
            page_number,
            total_pages,
            view_id,
            len(rows),
        )
        return PageResult(
            view_id=view_id,
            page_number=page_number,
            total_pages=total_pages,
            rows=rows,
            source_label=source_label,
            footer=f"{source_label} • Page {page_number} of {total_pages}",
            fetched_at=snapshot.fetched_at,
            has_previous=page_number > 1,
            has_next=page_number < total_pages,
        )


__all__ = ["LiveFlightService", "PAGE_SIZE", "build_flight_row"]
