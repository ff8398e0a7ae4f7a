import pytest

from carezone.models.domain import CirclePrimitive, Point, ZoneKind, ZoneMetadata
from carezone.services.geometry.shapes import normalize
from carezone.services.zones.containment import (
    check_eligibility,
    first_zone_containing,
    ring_contains,
    zone_contains,
    zones_containing,
)
from carezone.services.zones.registry import ZoneRegistry


def _rect(south: float, west: float, north: float, east: float) -> tuple[Point, ...]:
    return (Point(north, east), Point(south, east), Point(south, west), Point(north, west))


def _registry_with_adjacent_squares():
    registry = ZoneRegistry()
    zone_a = registry.create(_rect(17.0, 78.0, 17.1, 78.1), ZoneMetadata(name="A"))
    zone_b = registry.create(_rect(17.0, 78.1, 17.1, 78.2), ZoneMetadata(name="B"))
    return registry, zone_a, zone_b


def test_centroid_of_square_is_contained():
    registry, zone_a, _ = _registry_with_adjacent_squares()

    assert zone_contains(zone_a, Point(17.05, 78.05))
    assert zones_containing(Point(17.05, 78.05), registry.list()) == [zone_a.id]


def test_circle_center_is_contained():
    ring = normalize(CirclePrimitive(Point(17.385, 78.4867), 2000.0))

    assert ring_contains(ring, Point(17.385, 78.4867))
    assert not ring_contains(ring, Point(17.5, 78.4867))


def test_point_on_shared_edge_is_in_neither_zone():
    registry, _, _ = _registry_with_adjacent_squares()

    assert zones_containing(Point(17.05, 78.1), registry.list()) == []


def test_points_either_side_of_shared_edge():
    registry, zone_a, zone_b = _registry_with_adjacent_squares()

    assert zones_containing(Point(17.05, 78.0999), registry.list()) == [zone_a.id]
    assert zones_containing(Point(17.05, 78.1001), registry.list()) == [zone_b.id]


@pytest.mark.parametrize(
    "point",
    [
        Point(17.0, 78.0),  # vertex
        Point(17.1, 78.05),  # top edge
        Point(17.0, 78.05),  # bottom edge
        Point(17.05, 78.0),  # left edge
    ],
)
def test_boundary_points_are_outside(point):
    ring = _rect(17.0, 78.0, 17.1, 78.1)

    assert not ring_contains(ring, point)


def test_point_just_inside_diagonal_edge_is_contained():
    ring = (Point(0.0, 0.0), Point(10.0, 10.0), Point(10.0, 0.0))

    assert ring_contains(ring, Point(5.0 + 4e-14, 5.0))
    assert not ring_contains(ring, Point(5.0, 5.0))
    assert not ring_contains(ring, Point(5.0 - 4e-14, 5.0))


def test_far_away_point_is_in_no_zone():
    registry, _, _ = _registry_with_adjacent_squares()

    assert zones_containing(Point(-33.9, 151.2), registry.list()) == []
    assert first_zone_containing(Point(-33.9, 151.2), registry.list()) is None


def test_overlapping_zones_are_reported_in_registry_order():
    registry = ZoneRegistry()
    outer = registry.create(_rect(17.0, 78.0, 17.4, 78.4))
    inner = registry.create(_rect(17.1, 78.1, 17.2, 78.2))

    point = Point(17.15, 78.15)

    assert zones_containing(point, registry.list()) == [outer.id, inner.id]
    assert first_zone_containing(point, registry.list()) == outer.id


def test_concave_polygon_notch_is_outside():
    # U shape opening north
    ring = (
        Point(17.3, 78.0),
        Point(17.0, 78.0),
        Point(17.0, 78.3),
        Point(17.3, 78.3),
        Point(17.3, 78.2),
        Point(17.1, 78.2),
        Point(17.1, 78.1),
        Point(17.3, 78.1),
    )

    assert not ring_contains(ring, Point(17.2, 78.15))
    assert ring_contains(ring, Point(17.2, 78.05))
    assert ring_contains(ring, Point(17.05, 78.15))


def test_eligibility_requires_active_zone_offering_service():
    registry = ZoneRegistry()
    registry.create(
        _rect(17.0, 78.0, 17.1, 78.1),
        ZoneMetadata(kind=ZoneKind.DELIVERY, applicable_services=frozenset({"medicine_delivery"})),
    )
    registry.create(
        _rect(17.0, 78.0, 17.1, 78.1),
        ZoneMetadata(kind=ZoneKind.PREMIUM, applicable_services=frozenset({"home_care"}), active=False),
    )
    point = Point(17.05, 78.05)

    medicine = check_eligibility(point, registry.list(), "medicine_delivery")
    home_care = check_eligibility(point, registry.list(), "home_care")

    assert medicine.eligible
    assert medicine.pricing_tier == "standard"
    assert len(medicine.zone_ids) == 2
    assert not home_care.eligible


def test_eligibility_premium_tier_and_restriction():
    registry = ZoneRegistry()
    registry.create(_rect(17.0, 78.0, 17.2, 78.2), ZoneMetadata(kind=ZoneKind.PREMIUM))
    registry.create(_rect(17.0, 78.0, 17.1, 78.1), ZoneMetadata(kind=ZoneKind.RESTRICTED))
    registry.create(_rect(17.0, 78.0, 17.2, 78.2), ZoneMetadata(kind=ZoneKind.EMERGENCY))

    premium = check_eligibility(Point(17.15, 78.15), registry.list())
    blocked = check_eligibility(Point(17.05, 78.05), registry.list())

    assert premium.eligible
    assert premium.pricing_tier == "premium"
    assert premium.emergency_covered
    assert not premium.restricted
    assert blocked.restricted
    assert not blocked.eligible
