"""Failures surfaced by the live flights service."""

from __future__ import annotations


class LiveFlightsError(Exception):
    """Base error with a message that is safe to show to end users."""

    code = "live_flights_error"
    user_message = "Failed to fetch live flights."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.user_message)
        self.detail = detail


class UpstreamUnavailable(LiveFlightsError):
    """Telemetry or reference data could not be fetched."""

    code = "upstream_unavailable"
    user_message = "Failed to fetch live flights. Please try again later."


class NoSnapshot(LiveFlightsError):
    """A page turn was requested before any flight list was loaded."""

    code = "no_snapshot"
    user_message = "Flight data not available. Please load the live flights again."


class InvalidPage(LiveFlightsError):
    """Requested page lies outside ``[1, total_pages]``."""

    code = "invalid_page"
    user_message = "Invalid page number."

    def __init__(self, page_number: int, total_pages: int) -> None:
        super().__init__(f"Page {page_number} is outside 1..{total_pages}")
        self.page_number = page_number
        self.total_pages = total_pages


__all__ = ["LiveFlightsError", "UpstreamUnavailable", "NoSnapshot", "InvalidPage"]
