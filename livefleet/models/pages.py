"""Response models for rendered live flight pages."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class FlightRow(BaseModel):
    """Display-ready summary of one live flight."""

    ordinal: int = Field(..., description="1-based position across all pages")
    flight_id: str = Field(..., description="Flight identifier")
    callsign: str = Field(..., description="Callsign")
    pilot: str = Field(..., description="Pilot display name or fallback label")
    aircraft: str = Field(..., description="Aircraft and livery display name")
    route: str = Field(..., description="Departure and arrival summary")
    altitude_ft: int = Field(..., description="Altitude rounded to whole feet")
    speed_kts: int = Field(..., description="Ground speed rounded to whole knots")
    progress_percent: int = Field(..., description="Route progress, 0 to 100")
    progress_bar: str = Field(..., description="Ten-cell progress bar")
    eta: str = Field(..., description="Estimated time en route or N/A")
    has_flight_plan: bool = Field(
        default=False, description="Whether a flight plan was available"
    )

    def to_text(self) -> str:
        """Multi-line summary for chat-style front-ends."""

        lines = [
            f"**{self.ordinal}. {self.callsign}**",
            f"Pilot: {self.pilot}",
            f"Aircraft: {self.aircraft}",
            f"Route: {self.route}",
            f"Altitude: {self.altitude_ft:,}ft",
            f"Speed (GS): {self.speed_kts:,}kts",
            f"Progress: {self.progress_bar} ({self.progress_percent}%)",
            f"ETE: {self.eta}",
        ]
        return "\n".join(lines)


class PageResult(BaseModel):
    """One page of live flights, or a notice when nothing matched."""

    view_id: str = Field(..., description="Identifier of the snapshot being paged")
    page_number: int = Field(..., description="1-based page number")
    total_pages: int = Field(..., description="Number of pages in the snapshot")
    rows: list[FlightRow] = Field(default_factory=list)
    notice: Optional[str] = Field(
        default=None, description="Explanation shown instead of rows when empty"
    )
    source_label: str = Field(..., description="Airline name shown in footers")
    footer: str = Field(..., description="Footer text with pagination state")
    fetched_at: datetime = Field(..., description="When the flight list was fetched")
    has_previous: bool = Field(default=False)
    has_next: bool = Field(default=False)

    def to_text(self) -> str:
        if self.notice:
            return self.notice
        return "\n\n".join(row.to_text() for row in self.rows)


__all__ = ["FlightRow", "PageResult"]
