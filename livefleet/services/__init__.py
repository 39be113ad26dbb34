"""Service-layer helpers for livefleet."""

from .geodesy import distance_km, km_to_nm
from .live_flights import PAGE_SIZE, LiveFlightService, build_flight_row
from .plan_cache import RoutePlanCache, RoutePlanFetcher
from .progress import (
    LegAdjustment,
    ProgressEstimate,
    estimate_progress,
    find_active_leg_index,
    route_display,
)
from .reference_index import ReferenceIndex, build_reference_index
from .snapshot_store import (
    DEFAULT_VIEW,
    FlightSnapshot,
    ReferenceFetcher,
    SnapshotStore,
    TelemetryFetcher,
)

__all__ = [
    "DEFAULT_VIEW",
    "FlightSnapshot",
    "LegAdjustment",
    "LiveFlightService",
    "PAGE_SIZE",
    "ProgressEstimate",
    "ReferenceFetcher",
    "ReferenceIndex",
    "RoutePlanCache",
    "RoutePlanFetcher",
    "SnapshotStore",
    "TelemetryFetcher",
    "build_flight_row",
    "build_reference_index",
    "distance_km",
    "estimate_progress",
    "find_active_leg_index",
    "km_to_nm",
    "route_display",
]
