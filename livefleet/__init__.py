"""Live flight tracking service for a virtual airline on Infinite Flight."""

__version__ = "0.1.0"
