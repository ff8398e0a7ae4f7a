"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import RouteOptions, RouteResult
from .zones import PointModel


class RoutePlanRequest(BaseModel):
    origin: PointModel
    destination: PointModel
    waypoints: List[PointModel] = Field(default_factory=list, description="Intermediate stops; the provider may reorder them.")
    travel_mode: str = Field(default="driving")
    avoid_tolls: bool = False
    avoid_highways: bool = False
    timeout_seconds: Optional[float] = Field(default=None, gt=0.0)

    def to_options(self) -> RouteOptions:
        return RouteOptions(
            travel_mode=self.travel_mode,
            avoid_tolls=self.avoid_tolls,
            avoid_highways=self.avoid_highways,
        )


class RoutePlanResponse(BaseModel):
    distance_meters: float
    travel_time_seconds: float
    distance_text: str
    duration_text: str
    estimated_cost: float
    currency: str
    waypoint_order: List[int]
    polyline: List[PointModel]

    @classmethod
    def from_domain(cls, route: RouteResult) -> "RoutePlanResponse":
        return cls(
            distance_meters=route.distance_meters,
            travel_time_seconds=route.travel_time_seconds,
            distance_text=route.distance_text,
            duration_text=route.duration_text,
            estimated_cost=route.estimated_cost,
            currency=route.currency,
            waypoint_order=list(route.waypoint_order),
            polyline=[PointModel.from_domain(point) for point in route.polyline],
        )
