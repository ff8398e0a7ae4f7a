"""Rendering adapters between canonical zones and a map drawing surface."""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from ...models.domain import ServiceZone, ShapeKind
from ..export.geojson import feature_collection, zone_to_feature


class RenderingSurface(Protocol):
    def draw_zone(self, zone: ServiceZone) -> None: ...

    def remove_zone(self, zone_id: str) -> None: ...

    def highlight(self, zone_id: Optional[str]) -> None: ...

    def set_drawing_mode(self, kind: Optional[ShapeKind]) -> None: ...


class GeoJSONOverlaySurface:
    """Disposable id -> GeoJSON feature cache of what the map should show.

    The registry stays the source of truth; this cache can be dropped and
    rebuilt from it at any time with ``sync``.
    """

    def __init__(self) -> None:
        self._features: Dict[str, Dict[str, Any]] = {}
        self.highlighted: Optional[str] = None
        self.drawing_mode: Optional[ShapeKind] = None

    def draw_zone(self, zone: ServiceZone) -> None:
        self._features[zone.id] = zone_to_feature(zone, selected=zone.id == self.highlighted)

    def remove_zone(self, zone_id: str) -> None:
        self._features.pop(zone_id, None)
        if self.highlighted == zone_id:
            self.highlighted = None

    def highlight(self, zone_id: Optional[str]) -> None:
        for feature_id, feature in self._features.items():
            feature["properties"]["selected"] = feature_id == zone_id
        self.highlighted = zone_id

    def set_drawing_mode(self, kind: Optional[ShapeKind]) -> None:
        self.drawing_mode = kind

    def sync(self, zones) -> None:
        self._features = {}
        for zone in zones:
            self.draw_zone(zone)

    def handles(self) -> list[str]:
        return list(self._features)

    def to_geojson(self) -> Dict[str, Any]:
        return feature_collection(list(self._features.values()))
