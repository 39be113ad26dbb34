"""Lookup tables built from the aircraft and livery catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from livefleet.models.live import AircraftDefinition

UNKNOWN_AIRCRAFT = "Unknown Aircraft"


@dataclass(frozen=True)
class AircraftInfo:
    name: str


@dataclass(frozen=True)
class LiveryInfo:
    name: str
    aircraft_id: str


@dataclass(frozen=True)
class ReferenceIndex:
    """Read-only aircraft and livery lookups shared by every page of a snapshot."""

    aircraft_by_id: Mapping[str, AircraftInfo] = field(
        default_factory=lambda: MappingProxyType({})
    )
    livery_by_id: Mapping[str, LiveryInfo] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def describe_aircraft(self, aircraft_id: str, livery_id: str) -> str:
        aircraft = self.aircraft_by_id.get(aircraft_id)
        livery = self.livery_by_id.get(livery_id)
        if aircraft is None or livery is None:
            return UNKNOWN_AIRCRAFT
        return f"{aircraft.name} ({livery.name})"


def build_reference_index(definitions: Iterable[AircraftDefinition]) -> ReferenceIndex:
    """Index aircraft by id and liveries by id."""

    aircraft_by_id: dict[str, AircraftInfo] = {}
    livery_by_id: dict[str, LiveryInfo] = {}
    for aircraft in definitions:
        aircraft_by_id[aircraft.aircraft_id] = AircraftInfo(name=aircraft.name)
        for livery in aircraft.liveries:
            livery_by_id[livery.id] = LiveryInfo(
                name=livery.name, aircraft_id=aircraft.aircraft_id
            )
    return ReferenceIndex(
        aircraft_by_id=MappingProxyType(aircraft_by_id),
        livery_by_id=MappingProxyType(livery_by_id),
    )


__all__ = [
    "AircraftInfo",
    "LiveryInfo",
    "ReferenceIndex",
    "UNKNOWN_AIRCRAFT",
    "build_reference_index",
]
