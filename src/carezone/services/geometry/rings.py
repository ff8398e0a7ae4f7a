"""Ring validation and polygon helpers backed by shapely."""

from __future__ import annotations

from functools import lru_cache
from typing import Sequence

from shapely.geometry import LinearRing, Polygon

from ...errors import InvalidGeometry
from ...models.domain import MapBounds, Point, Ring

# Below this enclosed area (square degrees) a ring is considered flat.
MIN_RING_AREA = 1e-14


def distinct_vertices(ring: Sequence[Point]) -> list[Point]:
    seen: set[Point] = set()
    distinct: list[Point] = []
    for point in ring:
        if point not in seen:
            seen.add(point)
            distinct.append(point)
    return distinct


def to_polygon(ring: Sequence[Point]) -> Polygon:
    return Polygon([(point.longitude, point.latitude) for point in ring])


@lru_cache(maxsize=2048)
def ring_polygon(ring: Ring) -> Polygon:
    """Cached shapely polygon for a registered (immutable) ring."""
    return to_polygon(ring)


def ring_bounds(ring: Sequence[Point]) -> MapBounds:
    west, south, east, north = ring_polygon(tuple(ring)).bounds
    return MapBounds(south=south, west=west, north=north, east=east)


def validate_ring(ring: Sequence[Point]) -> Ring:
    """Return ``ring`` as a tuple, raising ``InvalidGeometry`` if it cannot bound a zone."""

    if any(not isinstance(point, Point) for point in ring):
        raise InvalidGeometry("Ring vertices must be Point instances.")
    if len(distinct_vertices(ring)) < 3:
        raise InvalidGeometry("Ring requires at least 3 distinct points.")

    coordinates = [(point.longitude, point.latitude) for point in ring]
    if not LinearRing(coordinates).is_simple:
        raise InvalidGeometry("Ring must not intersect itself.")
    if Polygon(coordinates).area <= MIN_RING_AREA:
        raise InvalidGeometry("Ring encloses no area.")
    return tuple(ring)
