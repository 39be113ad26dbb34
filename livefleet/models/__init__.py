"""Pydantic models for livefleet."""

from .live import (
    AircraftDefinition,
    FilterCriteria,
    FlightEntry,
    LiveryDefinition,
    Location,
    RoutePlan,
    Waypoint,
)
from .pages import FlightRow, PageResult

__all__ = [
    "AircraftDefinition",
    "FilterCriteria",
    "FlightEntry",
    "FlightRow",
    "LiveryDefinition",
    "Location",
    "PageResult",
    "RoutePlan",
    "Waypoint",
]
