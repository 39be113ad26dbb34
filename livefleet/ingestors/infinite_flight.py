"""Infinite Flight public API client for live flights and flight plans."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

import httpx
from pydantic import ValidationError

from livefleet.config import settings
from livefleet.domain import UpstreamUnavailable
from livefleet.models.live import (
    AircraftDefinition,
    FlightEntry,
    LiveryDefinition,
    RoutePlan,
)

logger = logging.getLogger("livefleet.ingestors.infinite_flight")

EXPERT_WORLD_TYPE = 3


class InfiniteFlightClient:
    """Fetch live telemetry, the livery catalog and flight plans.

    ``get_flights``, ``get_aircraft_catalog`` and ``get_flight_plan`` match the
    fetcher signatures expected by ``LiveFlightService``.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        session_cache_ttl: float | None = None,
        liveries_cache_ttl: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.infinite_flight_api_key
        self.base_url = (base_url or settings.infinite_flight_base_url).rstrip("/")
        self.timeout = timeout or settings.infinite_flight_timeout
        self.session_cache_ttl = session_cache_ttl or settings.session_cache_ttl_seconds
        self.liveries_cache_ttl = liveries_cache_ttl or settings.liveries_cache_ttl_seconds
        self.transport = transport
        self._clock = clock

        self._session: tuple[str, float] | None = None
        self._catalog: tuple[list[AircraftDefinition], float] | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _get_result(self, path: str) -> Any:
        """GET ``path`` and return the ``result`` member of the envelope."""

        if not self.api_key:
            raise UpstreamUnavailable("Infinite Flight API key not configured")

        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url, params={"apikey": self.api_key})
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Infinite Flight request to %s timed out: %s", path, exc)
            raise UpstreamUnavailable("Infinite Flight request timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Infinite Flight returned HTTP %s for %s", exc.response.status_code, path
            )
            raise UpstreamUnavailable(
                f"Infinite Flight returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("Infinite Flight request to %s failed: %s", path, exc)
            raise UpstreamUnavailable("Infinite Flight request failed") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse Infinite Flight JSON for %s: %s", path, exc)
            raise UpstreamUnavailable("Infinite Flight returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise UpstreamUnavailable("Infinite Flight returned an unexpected payload")
        error_code = payload.get("errorCode", 0)
        if error_code != 0:
            logger.warning("Infinite Flight API error %s for %s", error_code, path)
            raise UpstreamUnavailable(f"Infinite Flight API error: {error_code}")
        return payload.get("result")

    async def get_session_id(self) -> str:
        """Return the id of the Expert server session, cached for a while."""

        if self._session and self._clock() - self._session[1] < self.session_cache_ttl:
            return self._session[0]

        sessions = await self._get_result("/sessions") or []
        session_id = next(
            (
                session.get("id")
                for session in sessions
                if isinstance(session, dict) and session.get("worldType") == EXPERT_WORLD_TYPE
            ),
            None,
        )
        if not session_id:
            raise UpstreamUnavailable("No Expert server session available")

        self._session = (session_id, self._clock())
        logger.debug("Using Infinite Flight session %s", session_id)
        return session_id

    async def get_flights(self) -> list[FlightEntry]:
        session_id = await self.get_session_id()
        raw_flights = await self._get_result(f"/sessions/{session_id}/flights") or []

        flights: list[FlightEntry] = []
        for entry in raw_flights:
            try:
                flights.append(FlightEntry.model_validate(entry))
            except ValidationError as exc:
                logger.debug("Skipping malformed flight entry: %s", exc)
        logger.debug("Fetched %s live flights", len(flights))
        return flights

    async def get_aircraft_catalog(self) -> list[AircraftDefinition]:
        """Return aircraft definitions grouped from the flat livery list."""

        if self._catalog and self._clock() - self._catalog[1] < self.liveries_cache_ttl:
            return self._catalog[0]

        raw_liveries = await self._get_result("/aircraft/liveries") or []
        grouped: dict[str, tuple[str, list[LiveryDefinition]]] = {}
        for item in raw_liveries:
            if not isinstance(item, dict) or not item.get("id") or not item.get("aircraftID"):
                continue
            aircraft_name = item.get("aircraftName") or "Unknown"
            aircraft_id, liveries = grouped.setdefault(
                aircraft_name, (item["aircraftID"], [])
            )
            liveries.append(
                LiveryDefinition(id=item["id"], name=item.get("liveryName") or "Default")
            )

        catalog = [
            AircraftDefinition(aircraft_id=aircraft_id, name=name, liveries=liveries)
            for name, (aircraft_id, liveries) in grouped.items()
        ]
        self._catalog = (catalog, self._clock())
        logger.info("Loaded %s aircraft types into the livery catalog", len(catalog))
        return catalog

    async def get_flight_plan(self, flight_id: str) -> Optional[RoutePlan]:
        session_id = await self.get_session_id()
        result = await self._get_result(
            f"/sessions/{session_id}/flights/{flight_id}/flightplan"
        )
        if not result:
            return None
        try:
            return RoutePlan.model_validate(result)
        except ValidationError as exc:
            logger.warning("Malformed flight plan for %s: %s", flight_id, exc)
            raise UpstreamUnavailable("Infinite Flight returned a malformed flight plan") from exc


__all__ = ["InfiniteFlightClient"]
