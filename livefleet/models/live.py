"""Models for live flights, flight plans and the aircraft catalog."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from livefleet.domain import FilterType


class FlightEntry(BaseModel):
    """One aircraft currently airborne on the tracked server session."""

    flight_id: str = Field(..., alias="flightId", description="Stable flight identifier")
    callsign: str = Field(..., description="Callsign as filed by the pilot")
    username: Optional[str] = Field(default=None, description="Pilot display name")
    aircraft_id: str = Field(..., alias="aircraftId", description="Aircraft type identifier")
    livery_id: str = Field(..., alias="liveryId", description="Livery identifier")
    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")
    altitude: float = Field(default=0.0, description="Altitude in feet")
    speed: float = Field(default=0.0, description="Ground speed in knots")
    virtual_organization: Optional[str] = Field(
        default=None,
        alias="virtualOrganization",
        description="Virtual organization tag reported by the pilot",
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class Location(BaseModel):
    """Geographic position of a waypoint."""

    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")

    model_config = ConfigDict(extra="ignore", frozen=True)


class Waypoint(BaseModel):
    """Flight plan item, optionally holding runway-specific children."""

    name: str = Field(default="", description="Waypoint or airport name")
    location: Location
    children: list["Waypoint"] = Field(
        default_factory=list, description="Nested items such as runway endpoints"
    )

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("children", mode="before")
    @classmethod
    def _children_default(cls, value):
        return value or []


class RoutePlan(BaseModel):
    """Filed flight plan for one flight."""

    flight_id: Optional[str] = Field(default=None, alias="flightId")
    flight_plan_items: list[Waypoint] = Field(
        default_factory=list, alias="flightPlanItems"
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    @field_validator("flight_plan_items", mode="before")
    @classmethod
    def _items_default(cls, value):
        return value or []

    @property
    def waypoints(self) -> list[Waypoint]:
        return self.flight_plan_items

    @property
    def is_usable(self) -> bool:
        """Progress can only be estimated with a departure and an arrival."""

        return len(self.flight_plan_items) >= 2


class LiveryDefinition(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(frozen=True)


class AircraftDefinition(BaseModel):
    """Aircraft type from the catalog with its available liveries."""

    aircraft_id: str = Field(..., alias="aircraftID")
    name: str
    liveries: list[LiveryDefinition] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class FilterCriteria(BaseModel):
    """Rule deciding which flights belong to the airline.

    Exactly one strategy is active, selected by ``type``. Criteria whose
    strategy has no value configured match nothing.
    """

    type: Optional[FilterType] = Field(default=None, description="Active strategy")
    suffix: Optional[str] = Field(default=None, description="Callsign suffix to match")
    virtual_org: Optional[str] = Field(
        default=None, description="Virtual organization tag to match"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def is_complete(self) -> bool:
        if self.type == FilterType.SUFFIX:
            return bool(self.suffix)
        if self.type == FilterType.VIRTUAL_ORG:
            return bool(self.virtual_org)
        return False

    def matches(self, flight: FlightEntry) -> bool:
        if not self.is_complete:
            return False
        if self.type == FilterType.SUFFIX:
            return flight.callsign.endswith(self.suffix)
        return flight.virtual_organization == self.virtual_org

    def describe(self) -> str:
        """Human-readable description used when nothing matches."""

        if self.type == FilterType.SUFFIX and self.suffix:
            return f'callsigns ending in "{self.suffix}"'
        if self.type == FilterType.VIRTUAL_ORG and self.virtual_org:
            return f'from "{self.virtual_org}"'
        return "no filter configured"


__all__ = [
    "AircraftDefinition",
    "FilterCriteria",
    "FlightEntry",
    "LiveryDefinition",
    "Location",
    "RoutePlan",
    "Waypoint",
]
