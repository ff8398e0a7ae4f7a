"""Pydantic request/response models for zone endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..models.domain import (
    CirclePrimitive,
    MapBounds,
    Point,
    PolygonPrimitive,
    RectanglePrimitive,
    ServiceZone,
    ZoneKind,
    ZoneMetadata,
    ZonePatch,
    ZoneStyle,
)


class PointModel(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    def to_domain(self) -> Point:
        return Point(self.latitude, self.longitude)

    @classmethod
    def from_domain(cls, point: Point) -> "PointModel":
        return cls(latitude=point.latitude, longitude=point.longitude)


class ZoneStyleModel(BaseModel):
    fill_color: str
    stroke_color: str
    fill_opacity: float = Field(0.35, ge=0.0, le=1.0)
    stroke_weight: int = Field(2, ge=0)

    def to_domain(self) -> ZoneStyle:
        return ZoneStyle(**self.model_dump())


class ZoneFields(BaseModel):
    name: str = ""
    kind: ZoneKind = ZoneKind.DELIVERY
    style: Optional[ZoneStyleModel] = None
    applicable_services: List[str] = Field(default_factory=list)
    active: bool = True

    def to_metadata(self) -> ZoneMetadata:
        return ZoneMetadata(
            name=self.name,
            kind=self.kind,
            style=self.style.to_domain() if self.style else None,
            applicable_services=frozenset(self.applicable_services),
            active=self.active,
        )


class ZoneCreateRequest(ZoneFields):
    boundary: List[PointModel] = Field(..., description="Ordered ring vertices; the last joins the first.")


class ZonePatchRequest(BaseModel):
    name: Optional[str] = None
    kind: Optional[ZoneKind] = None
    boundary: Optional[List[PointModel]] = None
    style: Optional[ZoneStyleModel] = None
    applicable_services: Optional[List[str]] = None
    active: Optional[bool] = None

    def to_domain(self) -> ZonePatch:
        return ZonePatch(
            name=self.name,
            kind=self.kind,
            boundary=tuple(point.to_domain() for point in self.boundary) if self.boundary is not None else None,
            style=self.style.to_domain() if self.style else None,
            applicable_services=frozenset(self.applicable_services) if self.applicable_services is not None else None,
            active=self.active,
        )


class CircleShape(BaseModel):
    shape: Literal["circle"] = "circle"
    center: PointModel
    radius_meters: float

    def to_domain(self) -> CirclePrimitive:
        return CirclePrimitive(self.center.to_domain(), self.radius_meters)


class RectangleShape(BaseModel):
    shape: Literal["rectangle"] = "rectangle"
    corner1: PointModel
    corner2: PointModel

    def to_domain(self) -> RectanglePrimitive:
        return RectanglePrimitive(self.corner1.to_domain(), self.corner2.to_domain())


class PolygonShape(BaseModel):
    shape: Literal["polygon"] = "polygon"
    vertices: List[PointModel]

    def to_domain(self) -> PolygonPrimitive:
        return PolygonPrimitive(tuple(vertex.to_domain() for vertex in self.vertices))


DrawnShape = Annotated[Union[CircleShape, RectangleShape, PolygonShape], Field(discriminator="shape")]


class DrawZoneRequest(ZoneFields):
    primitive: DrawnShape


class EditBoundaryRequest(BaseModel):
    primitive: DrawnShape


class ZoneModel(BaseModel):
    id: str
    name: str
    kind: ZoneKind
    boundary: List[PointModel]
    style: ZoneStyleModel
    applicable_services: List[str]
    active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, zone: ServiceZone) -> "ZoneModel":
        return cls(
            id=zone.id,
            name=zone.name,
            kind=zone.kind,
            boundary=[PointModel.from_domain(point) for point in zone.boundary],
            style=ZoneStyleModel(
                fill_color=zone.style.fill_color,
                stroke_color=zone.style.stroke_color,
                fill_opacity=zone.style.fill_opacity,
                stroke_weight=zone.style.stroke_weight,
            ),
            applicable_services=sorted(zone.applicable_services),
            active=zone.active,
            created_at=zone.created_at,
            updated_at=zone.updated_at,
        )


class InteractionStatus(BaseModel):
    state: str
    selected_zone_id: Optional[str] = None
    drawing_kind: Optional[str] = None


class ContainmentRequest(BaseModel):
    point: PointModel
    active_only: bool = False


class ContainmentResponse(BaseModel):
    zone_ids: List[str]


class EligibilityRequest(BaseModel):
    point: PointModel
    service: Optional[str] = None


class EligibilityResponse(BaseModel):
    zone_ids: List[str]
    eligible: bool
    pricing_tier: str
    emergency_covered: bool
    restricted: bool


class BoundsModel(BaseModel):
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_domain(cls, bounds: MapBounds) -> "BoundsModel":
        return cls(south=bounds.south, west=bounds.west, north=bounds.north, east=bounds.east)
