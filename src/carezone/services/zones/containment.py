"""Point-in-zone queries used for delivery eligibility and pricing tiers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from shapely.geometry import Point as ShapelyPoint

from ...models.domain import Point, ServiceZone, ZoneKind
from ..geometry.rings import ring_polygon


def ring_contains(ring: Sequence[Point], point: Point) -> bool:
    """True when ``point`` lies strictly inside ``ring``; edges and vertices are outside."""

    polygon = ring_polygon(tuple(ring))
    west, south, east, north = polygon.bounds
    if not (south <= point.latitude <= north and west <= point.longitude <= east):
        return False
    return polygon.contains(ShapelyPoint(point.longitude, point.latitude))


def zone_contains(zone: ServiceZone, point: Point) -> bool:
    return ring_contains(zone.boundary, point)


def zones_containing(point: Point, zones: Sequence[ServiceZone]) -> list[str]:
    """Ids of every zone containing ``point``, in the order the zones were given."""

    return [zone.id for zone in zones if zone_contains(zone, point)]


def first_zone_containing(point: Point, zones: Sequence[ServiceZone]) -> Optional[str]:
    for zone in zones:
        if zone_contains(zone, point):
            return zone.id
    return None


@dataclass(frozen=True, slots=True)
class ServiceEligibility:
    zone_ids: tuple[str, ...]
    eligible: bool
    pricing_tier: str
    emergency_covered: bool
    restricted: bool


def check_eligibility(point: Point, zones: Sequence[ServiceZone], service: str | None = None) -> ServiceEligibility:
    """Decide whether ``point`` can be served, and at which pricing tier.

    Only active zones count. A point inside an active restricted zone is never
    eligible; otherwise it needs an active non-restricted zone that offers the
    requested service (any service when ``service`` is None).
    """

    containing = [zone for zone in zones if zone_contains(zone, point)]
    active = [zone for zone in containing if zone.active]
    restricted = any(zone.kind is ZoneKind.RESTRICTED for zone in active)
    serving = [
        zone
        for zone in active
        if zone.kind is not ZoneKind.RESTRICTED
        and (service is None or service in zone.applicable_services)
    ]
    premium = any(zone.kind is ZoneKind.PREMIUM for zone in serving)
    return ServiceEligibility(
        zone_ids=tuple(zone.id for zone in containing),
        eligible=bool(serving) and not restricted,
        pricing_tier="premium" if premium else "standard",
        emergency_covered=any(zone.kind is ZoneKind.EMERGENCY for zone in active),
        restricted=restricted,
    )
