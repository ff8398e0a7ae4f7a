"""Domain models for service zones, drawn shapes, geocoding and routes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Sequence, Union

from ..errors import InvalidGeometry


@dataclass(frozen=True, slots=True)
class Point:
    """A latitude/longitude pair in degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise InvalidGeometry(f"Coordinates must be finite, got ({self.latitude}, {self.longitude}).")
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidGeometry(f"Latitude {self.latitude} outside [-90, 90].")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidGeometry(f"Longitude {self.longitude} outside [-180, 180].")

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


Ring = tuple[Point, ...]


class ZoneKind(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"
    EMERGENCY = "emergency"
    RESTRICTED = "restricted"
    PREMIUM = "premium"


class ShapeKind(str, Enum):
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    POLYGON = "polygon"


DEFAULT_ZONE_COLORS: dict[ZoneKind, str] = {
    ZoneKind.DELIVERY: "#3b82f6",
    ZoneKind.PICKUP: "#10b981",
    ZoneKind.EMERGENCY: "#ef4444",
    ZoneKind.RESTRICTED: "#f59e0b",
    ZoneKind.PREMIUM: "#8b5cf6",
}

SERVICE_TYPES: tuple[str, ...] = (
    "medicine_delivery",
    "doctor_consultation",
    "scan_diagnostic",
    "blood_bank",
    "ambulance",
    "home_care",
    "physiotherapy",
    "diabetes_care",
    "diet_consultation",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ZoneStyle:
    fill_color: str
    stroke_color: str
    fill_opacity: float = 0.35
    stroke_weight: int = 2

    @classmethod
    def for_kind(cls, kind: ZoneKind) -> "ZoneStyle":
        color = DEFAULT_ZONE_COLORS[kind]
        return cls(fill_color=color, stroke_color=color)


@dataclass(frozen=True, slots=True)
class ZoneMetadata:
    """Descriptive fields supplied when a zone is created."""

    name: str = ""
    kind: ZoneKind = ZoneKind.DELIVERY
    style: Optional[ZoneStyle] = None
    applicable_services: frozenset[str] = frozenset()
    active: bool = True


@dataclass(frozen=True, slots=True)
class ServiceZone:
    """The geofencing unit owned by the zone registry."""

    id: str
    name: str
    kind: ZoneKind
    boundary: Ring
    style: ZoneStyle
    applicable_services: frozenset[str]
    active: bool
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True, slots=True)
class ZonePatch:
    """Partial update; ``None`` means "leave unchanged"."""

    name: Optional[str] = None
    kind: Optional[ZoneKind] = None
    boundary: Optional[Ring] = None
    style: Optional[ZoneStyle] = None
    applicable_services: Optional[frozenset[str]] = None
    active: Optional[bool] = None


@dataclass(frozen=True, slots=True)
class CirclePrimitive:
    center: Point
    radius_meters: float

    kind = ShapeKind.CIRCLE


@dataclass(frozen=True, slots=True)
class RectanglePrimitive:
    corner1: Point
    corner2: Point

    kind = ShapeKind.RECTANGLE


@dataclass(frozen=True, slots=True)
class PolygonPrimitive:
    vertices: tuple[Point, ...]

    kind = ShapeKind.POLYGON


DrawnPrimitive = Union[CirclePrimitive, RectanglePrimitive, PolygonPrimitive]


@dataclass(frozen=True, slots=True)
class MapBounds:
    south: float
    west: float
    north: float
    east: float


@dataclass(frozen=True, slots=True)
class AddressComponent:
    long_name: str
    short_name: str
    types: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class GeocodeCandidate:
    """One geocoding result; candidates keep the provider's ordering."""

    formatted_address: str
    coordinate: Point
    external_place_id: str
    address_components: tuple[AddressComponent, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteOptions:
    travel_mode: str = "driving"
    avoid_tolls: bool = False
    avoid_highways: bool = False


@dataclass(frozen=True, slots=True)
class RouteResult:
    distance_meters: float
    travel_time_seconds: float
    polyline: tuple[Point, ...]
    estimated_cost: float
    currency: str = "INR"
    waypoint_order: tuple[int, ...] = ()

    @property
    def distance_text(self) -> str:
        return f"{self.distance_meters / 1000.0:.1f} km"

    @property
    def duration_text(self) -> str:
        return f"{round(self.travel_time_seconds / 60.0)} mins"


def as_points(coordinates: Sequence[Union[Point, Sequence[float]]]) -> tuple[Point, ...]:
    """Coerce ``(lat, lon)`` pairs (or Points) into a tuple of Points."""

    points: list[Point] = []
    for item in coordinates:
        if isinstance(item, Point):
            points.append(item)
        else:
            lat, lon = item
            points.append(Point(float(lat), float(lon)))
    return tuple(points)
