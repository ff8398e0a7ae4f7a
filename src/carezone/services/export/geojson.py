"""GeoJSON/WKT serialization of zones."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Sequence

from shapely.geometry import mapping

from ...models.domain import Point, ServiceZone
from ..geometry.rings import to_polygon


def polygon_to_wkt(ring: Sequence[Point]) -> str:
    """Convert a ring to a closed WKT POLYGON (lon lat order, as WKT requires)."""

    if not ring or len(ring) < 3:
        raise ValueError("Polygon must have at least 3 coordinates")

    points = list(ring)
    if points[0] != points[-1]:
        points.append(points[0])
    coord_pairs = [f"{point.longitude} {point.latitude}" for point in points]
    return f"POLYGON(({','.join(coord_pairs)}))"


def wkt_to_ring(wkt: str) -> tuple[Point, ...]:
    """Parse a WKT POLYGON back into a ring, dropping the closing vertex."""

    match = re.search(r"POLYGON\s*\(\(([^)]+)\)\)", wkt or "")
    if not match:
        raise ValueError(f"Not a WKT polygon: {wkt!r}")
    points: list[Point] = []
    for pair in match.group(1).split(","):
        parts = pair.split()
        if len(parts) >= 2:
            points.append(Point(float(parts[1]), float(parts[0])))
    if len(points) > 1 and points[0] == points[-1]:
        points.pop()
    return tuple(points)


def zone_properties(zone: ServiceZone) -> Dict[str, Any]:
    return {
        "zone_id": zone.id,
        "name": zone.name,
        "kind": zone.kind.value,
        "active": zone.active,
        "applicable_services": sorted(zone.applicable_services),
        "fillColor": zone.style.fill_color,
        "fillOpacity": zone.style.fill_opacity,
        "strokeColor": zone.style.stroke_color,
        "strokeWeight": zone.style.stroke_weight,
    }


def zone_to_feature(zone: ServiceZone, *, selected: bool = False) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "id": zone.id,
        "geometry": mapping(to_polygon(zone.boundary)),
        "properties": {**zone_properties(zone), "selected": selected},
    }


def feature_collection(features: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": features}
