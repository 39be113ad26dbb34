"""Snapshots of the airline's live flights, kept per view for paging."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import math
import time
from typing import Awaitable, Callable, Iterable

from livefleet.domain import UpstreamUnavailable
from livefleet.models.live import AircraftDefinition, FilterCriteria, FlightEntry
from livefleet.services.reference_index import ReferenceIndex, build_reference_index

logger = logging.getLogger("livefleet.snapshot_store")

TelemetryFetcher = Callable[[], Awaitable[list[FlightEntry]]]
ReferenceFetcher = Callable[[], Awaitable[list[AircraftDefinition]]]

DEFAULT_VIEW = "default"
DEFAULT_SNAPSHOT_TTL_SECONDS = 15 * 60


@dataclass(frozen=True)
class FlightSnapshot:
    """Point-in-time result of one telemetry and catalog fetch."""

    flights: tuple[FlightEntry, ...]
    reference_index: ReferenceIndex
    fetched_at: datetime
    filter_criteria: FilterCriteria
    source_label: str

    def total_pages(self, page_size: int) -> int:
        return math.ceil(len(self.flights) / page_size)

    def page(self, page_number: int, page_size: int) -> tuple[FlightEntry, ...]:
        start = (page_number - 1) * page_size
        return self.flights[start : start + page_size]


def filter_flights(
    flights: Iterable[FlightEntry], criteria: FilterCriteria
) -> list[FlightEntry]:
    return [flight for flight in flights if criteria.matches(flight)]


def dedupe_flights(flights: Iterable[FlightEntry]) -> list[FlightEntry]:
    """Drop repeated flight ids, keeping the first occurrence."""

    seen: set[str] = set()
    unique: list[FlightEntry] = []
    for flight in flights:
        if flight.flight_id in seen:
            continue
        seen.add(flight.flight_id)
        unique.append(flight)
    return unique


@dataclass
class _StoredSnapshot:
    snapshot: FlightSnapshot
    stored_at: float


class SnapshotStore:
    """Holds the latest snapshot for each view.

    Each view (a chat message, a browser tab, an API consumer) pages through
    its own snapshot, so a refresh in one view never changes what another
    view sees. Snapshots expire after ``ttl_seconds``.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_SNAPSHOT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshots: dict[str, _StoredSnapshot] = {}
        self._lock = asyncio.Lock()

    async def refresh(
        self,
        telemetry_fetcher: TelemetryFetcher,
        reference_fetcher: ReferenceFetcher,
        filter_criteria: FilterCriteria,
        *,
        source_label: str,
        view_id: str = DEFAULT_VIEW,
    ) -> FlightSnapshot:
        """Fetch flights and the catalog concurrently and store a new snapshot."""

        flights_result, catalog_result = await asyncio.gather(
            telemetry_fetcher(), reference_fetcher(), return_exceptions=True
        )
        for label, result in (("telemetry", flights_result), ("reference", catalog_result)):
            if isinstance(result, BaseException):
                logger.error("Live flights %s fetch failed: %s", label, result)
                if isinstance(result, UpstreamUnavailable):
                    raise result
                raise UpstreamUnavailable(f"{label} fetch failed") from result

        flights = dedupe_flights(filter_flights(flights_result, filter_criteria))
        snapshot = FlightSnapshot(
            flights=tuple(flights),
            reference_index=build_reference_index(catalog_result),
            fetched_at=datetime.now(timezone.utc),
            filter_criteria=filter_criteria,
            source_label=source_label,
        )

        async with self._lock:
            self._evict_expired()
            self._snapshots[view_id] = _StoredSnapshot(snapshot=snapshot, stored_at=self._clock())

        logger.info(
            "Stored snapshot for view %s: %s of %s flights matched %s",
            view_id,
            len(flights),
            len(flights_result),
            filter_criteria.describe(),
        )
        return snapshot

    def current(self, view_id: str = DEFAULT_VIEW) -> FlightSnapshot | None:
        """Return the view's snapshot without fetching, ``None`` if absent or expired."""

        stored = self._snapshots.get(view_id)
        if stored is None:
            return None
        if self._clock() - stored.stored_at >= self.ttl_seconds:
            self._snapshots.pop(view_id, None)
            return None
        return stored.snapshot

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [
            view_id
            for view_id, stored in self._snapshots.items()
            if now - stored.stored_at >= self.ttl_seconds
        ]
        for view_id in expired:
            del self._snapshots[view_id]
        if expired:
            logger.debug("Evicted %s expired snapshots", len(expired))


__all__ = [
    "DEFAULT_SNAPSHOT_TTL_SECONDS",
    "DEFAULT_VIEW",
    "FlightSnapshot",
    "ReferenceFetcher",
    "SnapshotStore",
    "TelemetryFetcher",
    "dedupe_flights",
    "filter_flights",
]
