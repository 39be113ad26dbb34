"""Approximate route progress from a position, a speed and a filed plan.

The live feed only reports where an aircraft is and how fast it moves, not
which leg of its plan it is flying. Progress is therefore estimated from the
great-circle geometry between the departure, the destination and the nearest
waypoint.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
import logging
import math
from typing import Sequence

from livefleet.models.live import RoutePlan, Waypoint
from livefleet.services.geodesy import distance_km, km_to_nm

logger = logging.getLogger("livefleet.progress")

PASSED_WAYPOINT_NM = 100.0
PROGRESS_BAR_CELLS = 10
FILLED_CELL = "█"
EMPTY_CELL = "░"
MIN_ETA_SPEED_KTS = 1.0
NO_FLIGHT_PLAN = "No flight plan filed"
NOT_AVAILABLE = "N/A"


class LegAdjustment(IntEnum):
    """How far past the nearest waypoint the active leg is assumed to be."""

    NONE = 0
    ADVANCE_ONE = 1
    ADVANCE_TWO = 2


@dataclass(frozen=True)
class ProgressEstimate:
    percent: float
    progress_bar: str
    eta: str


def _half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def select_leg_adjustment(
    nearest_idx: int, nearest_distance_nm: float, waypoint_count: int
) -> LegAdjustment:
    """Pick the adjustment for the nearest waypoint.

    The distance rule is evaluated first and the midpoint rule second; when
    both apply the midpoint rule wins.
    """

    adjustment = LegAdjustment.NONE
    if nearest_distance_nm <= PASSED_WAYPOINT_NM:
        adjustment = LegAdjustment.ADVANCE_ONE
    if nearest_idx > waypoint_count * 0.5:
        adjustment = LegAdjustment.ADVANCE_TWO
    return adjustment


def find_active_leg_index(
    current_lat: float, current_lon: float, waypoints: Sequence[Waypoint]
) -> int:
    """Estimate the index of the leg the aircraft is flying.

    Always returns a value in ``[0, len(waypoints) - 2]`` for plans with at
    least two waypoints, and 0 otherwise.
    """

    if len(waypoints) < 2:
        return 0

    nearest_idx = 0
    nearest_km = math.inf
    for idx, waypoint in enumerate(waypoints):
        distance = distance_km(
            current_lat,
            current_lon,
            waypoint.location.latitude,
            waypoint.location.longitude,
        )
        if distance < nearest_km:
            nearest_km = distance
            nearest_idx = idx

    adjustment = select_leg_adjustment(nearest_idx, km_to_nm(nearest_km), len(waypoints))
    return min(nearest_idx + adjustment, len(waypoints) - 2)


def progress_bar(percent: float, length: int = PROGRESS_BAR_CELLS) -> str:
    filled = max(0, min(length, _half_up(percent / 100 * length)))
    return FILLED_CELL * filled + EMPTY_CELL * (length - filled)


def format_eta(hours: float) -> str:
    """Format a duration as ``"<h>hrs <mm>m"``."""

    if not math.isfinite(hours) or hours < 0:
        return NOT_AVAILABLE
    total_minutes = _half_up(hours * 60)
    hrs, mins = divmod(total_minutes, 60)
    return f"{hrs}hrs {mins:02d}m"


def estimate_progress(
    current_lat: float, current_lon: float, plan: RoutePlan, speed_kts: float
) -> ProgressEstimate:
    """Estimate percent complete and time en route along ``plan``."""

    if not plan.is_usable:
        return ProgressEstimate(percent=0.0, progress_bar=progress_bar(0), eta=NOT_AVAILABLE)

    waypoints = plan.waypoints
    departure = waypoints[0].location
    destination = waypoints[-1].location
    total_nm = km_to_nm(
        distance_km(
            departure.latitude,
            departure.longitude,
            destination.latitude,
            destination.longitude,
        )
    )
    safe_total = max(total_nm, 1e-6)

    leg_idx = find_active_leg_index(current_lat, current_lon, waypoints)
    if leg_idx >= len(waypoints) - 1:
        return ProgressEstimate(percent=100.0, progress_bar=progress_bar(100), eta="0m")

    remaining_nm = km_to_nm(
        distance_km(current_lat, current_lon, destination.latitude, destination.longitude)
    )
    remaining_nm = max(0.0, min(remaining_nm, total_nm))
    percent = max(0.0, min((safe_total - remaining_nm) / safe_total * 100, 100.0))

    eta = NOT_AVAILABLE
    if percent > 1:
        if speed_kts is None or speed_kts < MIN_ETA_SPEED_KTS:
            logger.debug("Skipping ETA for near-zero ground speed %s", speed_kts)
        else:
            eta = format_eta(remaining_nm / speed_kts)

    return ProgressEstimate(percent=percent, progress_bar=progress_bar(percent), eta=eta)


def route_display(plan: RoutePlan) -> str:
    """Return ``"DEP → ARR"``, preferring a runway child for the arrival."""

    waypoints = plan.waypoints
    if not waypoints:
        return NO_FLIGHT_PLAN

    departure = waypoints[0].name
    last = waypoints[-1]
    arrival = last.name
    for child in last.children:
        if child.name.startswith("RW") or "RUNWAY" in child.name:
            arrival = child.name
            break
    return f"{departure} → {arrival}"


__all__ = [
    "LegAdjustment",
    "NO_FLIGHT_PLAN",
    "NOT_AVAILABLE",
    "ProgressEstimate",
    "estimate_progress",
    "find_active_leg_index",
    "format_eta",
    "progress_bar",
    "route_display",
    "select_leg_adjustment",
]
