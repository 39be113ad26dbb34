"""Domain enums and errors for live flight tracking."""

from .errors import InvalidPage, LiveFlightsError, NoSnapshot, UpstreamUnavailable
from .filters import DEFAULT_FILTER_TYPE, FilterType

__all__ = [
    "DEFAULT_FILTER_TYPE",
    "FilterType",
    "InvalidPage",
    "LiveFlightsError",
    "NoSnapshot",
    "UpstreamUnavailable",
]
