"""Exception taxonomy shared by the zone, geocoding and routing services."""

from __future__ import annotations


class CareZoneError(Exception):
    """Base class for every error raised by the engine."""


class InvalidGeometry(CareZoneError, ValueError):
    """A point, primitive or ring is degenerate or out of range."""


class ZoneNotFound(CareZoneError, LookupError):
    """No zone is registered under the requested id."""

    def __init__(self, zone_id: str) -> None:
        super().__init__(f"Zone '{zone_id}' not found.")
        self.zone_id = zone_id


class InvalidTransition(CareZoneError):
    """The interaction controller cannot accept the gesture in its current state."""


class ProviderError(CareZoneError, ConnectionError):
    """An external geocoding or directions provider failed (network, timeout, quota)."""

    def __init__(self, message: str, *, provider: str | None = None, timed_out: bool = False) -> None:
        super().__init__(message)
        self.provider = provider
        self.timed_out = timed_out


class NoResult(CareZoneError):
    """A well-formed request legitimately produced nothing."""


class NoMatch(NoResult):
    """Geocoding returned zero candidates."""


class NoRoute(NoResult):
    """The directions provider found no drivable path."""


class RequestSuperseded(CareZoneError):
    """A newer request replaced this one while it was in flight."""
