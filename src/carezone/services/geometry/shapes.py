"""Conversion of drawn primitives into canonical polygon rings."""

from __future__ import annotations

import math

from ...errors import InvalidGeometry
from ...models.domain import (
    CirclePrimitive,
    DrawnPrimitive,
    Point,
    PolygonPrimitive,
    RectanglePrimitive,
    Ring,
)
from ..geospatial import destination_point

# Fixed sampling density for circle approximation; not a per-call option.
CIRCLE_SEGMENTS = 32


def validate_primitive(primitive: DrawnPrimitive) -> None:
    """Reject primitives that have no meaningful polygon form."""

    if isinstance(primitive, CirclePrimitive):
        radius = primitive.radius_meters
        if not math.isfinite(radius) or radius <= 0:
            raise InvalidGeometry(f"Circle radius must be a positive number of metres, got {radius}.")
    elif isinstance(primitive, RectanglePrimitive):
        if primitive.corner1 == primitive.corner2:
            raise InvalidGeometry("Rectangle corners must differ.")
    elif isinstance(primitive, PolygonPrimitive):
        if len(primitive.vertices) < 3:
            raise InvalidGeometry("Polygon requires at least 3 vertices.")
    else:
        raise InvalidGeometry(f"Unsupported primitive type {type(primitive).__name__}.")


def circle_to_ring(center: Point, radius_meters: float) -> Ring:
    step = 360.0 / CIRCLE_SEGMENTS
    return tuple(destination_point(center, index * step, radius_meters) for index in range(CIRCLE_SEGMENTS))


def rectangle_to_ring(corner1: Point, corner2: Point) -> Ring:
    """Axis-aligned corners, clockwise from north-east."""

    north = max(corner1.latitude, corner2.latitude)
    south = min(corner1.latitude, corner2.latitude)
    east = max(corner1.longitude, corner2.longitude)
    west = min(corner1.longitude, corner2.longitude)
    return (
        Point(north, east),
        Point(south, east),
        Point(south, west),
        Point(north, west),
    )


def normalize(primitive: DrawnPrimitive) -> Ring:
    """Return the canonical ring for a drawn primitive. Assumes ``validate_primitive`` passed."""

    if isinstance(primitive, PolygonPrimitive):
        return tuple(primitive.vertices)
    if isinstance(primitive, RectanglePrimitive):
        return rectangle_to_ring(primitive.corner1, primitive.corner2)
    if isinstance(primitive, CirclePrimitive):
        return circle_to_ring(primitive.center, primitive.radius_meters)
    raise InvalidGeometry(f"Unsupported primitive type {type(primitive).__name__}.")
