"""Data ingestors for livefleet."""

from .infinite_flight import InfiniteFlightClient

__all__ = ["InfiniteFlightClient"]
