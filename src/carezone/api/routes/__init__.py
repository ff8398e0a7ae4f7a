"""Route group exports."""

from . import geocoding, health, routes, zones

__all__ = ["zones", "routes", "health", "geocoding"]
