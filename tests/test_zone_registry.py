import pytest

from carezone.errors import InvalidGeometry, ZoneNotFound
from carezone.models.domain import (
    MapBounds,
    Point,
    ZoneKind,
    ZoneMetadata,
    ZonePatch,
    ZoneStyle,
)
from carezone.services.zones.registry import ZoneRegistry


def _square(lat: float, lon: float, size: float = 0.1) -> tuple[Point, ...]:
    return (
        Point(lat + size, lon + size),
        Point(lat, lon + size),
        Point(lat, lon),
        Point(lat + size, lon),
    )


class RecordingListener:
    def __init__(self, registry: ZoneRegistry | None = None):
        self.events = []
        self.registry = registry
        self.committed_at_notify = []

    def on_zone_created(self, zone):
        self.events.append(("created", zone.id))
        if self.registry is not None:
            self.committed_at_notify.append(zone.id in self.registry)

    def on_zone_updated(self, zone):
        self.events.append(("updated", zone.id))

    def on_zone_deleted(self, zone_id):
        self.events.append(("deleted", zone_id))
        if self.registry is not None:
            self.committed_at_notify.append(zone_id not in self.registry)


def test_create_then_get_round_trips_boundary_and_metadata():
    registry = ZoneRegistry()
    boundary = _square(17.0, 78.0)
    metadata = ZoneMetadata(
        name="Banjara Hills",
        kind=ZoneKind.PREMIUM,
        style=ZoneStyle(fill_color="#000000", stroke_color="#ffffff", fill_opacity=0.5, stroke_weight=3),
        applicable_services=frozenset({"medicine_delivery", "home_care"}),
        active=False,
    )

    zone = registry.create(boundary, metadata)
    fetched = registry.get(zone.id)

    assert fetched == zone
    assert fetched.boundary == boundary
    assert fetched.name == "Banjara Hills"
    assert fetched.kind is ZoneKind.PREMIUM
    assert fetched.style == metadata.style
    assert fetched.applicable_services == {"medicine_delivery", "home_care"}
    assert fetched.active is False
    assert zone.id.startswith("zone_")


def test_create_defaults_style_to_kind_color():
    registry = ZoneRegistry()

    zone = registry.create(_square(17.0, 78.0), ZoneMetadata(kind=ZoneKind.EMERGENCY))

    assert zone.style.fill_color == "#ef4444"


def test_ids_are_unique():
    registry = ZoneRegistry()

    ids = {registry.create(_square(17.0, 78.0)).id for _ in range(50)}

    assert len(ids) == 50


@pytest.mark.parametrize(
    "boundary",
    [
        (),
        (Point(17.0, 78.0), Point(17.1, 78.1)),
        (Point(17.0, 78.0), Point(17.1, 78.1), Point(17.0, 78.0)),
        (Point(17.0, 78.0), Point(17.0, 78.0), Point(17.0, 78.0), Point(17.1, 78.1)),
    ],
)
def test_create_rejects_rings_with_fewer_than_three_distinct_points(boundary):
    registry = ZoneRegistry()

    with pytest.raises(InvalidGeometry):
        registry.create(boundary)
    assert len(registry) == 0


def test_create_rejects_zero_area_ring():
    registry = ZoneRegistry()

    with pytest.raises(InvalidGeometry):
        registry.create((Point(17.0, 78.0), Point(17.0, 78.1), Point(17.0, 78.2)))


def test_create_rejects_self_intersecting_ring():
    registry = ZoneRegistry()
    bowtie = (Point(17.0, 78.0), Point(17.1, 78.1), Point(17.0, 78.1), Point(17.1, 78.0))

    with pytest.raises(InvalidGeometry):
        registry.create(bowtie)


def test_explicitly_closed_ring_is_accepted_verbatim():
    registry = ZoneRegistry()
    closed = _square(17.0, 78.0) + (Point(17.1, 78.1),)

    zone = registry.create(closed)

    assert zone.boundary == closed


def test_update_replaces_only_present_fields():
    registry = ZoneRegistry()
    zone = registry.create(_square(17.0, 78.0), ZoneMetadata(name="A", applicable_services=frozenset({"ambulance"})))
    new_boundary = _square(17.2, 78.2)

    updated = registry.update(zone.id, ZonePatch(boundary=new_boundary, active=False))

    assert updated.id == zone.id
    assert updated.boundary == new_boundary
    assert updated.active is False
    assert updated.name == "A"
    assert updated.applicable_services == {"ambulance"}
    assert updated.created_at == zone.created_at
    assert registry.get(zone.id) == updated


def test_update_kind_recolours_default_style():
    registry = ZoneRegistry()
    zone = registry.create(_square(17.0, 78.0), ZoneMetadata(kind=ZoneKind.DELIVERY))

    updated = registry.update(zone.id, ZonePatch(kind=ZoneKind.EMERGENCY))

    assert updated.style == ZoneStyle.for_kind(ZoneKind.EMERGENCY)
    assert updated.style.fill_color == "#ef4444"


def test_update_kind_keeps_custom_style():
    registry = ZoneRegistry()
    custom = ZoneStyle(fill_color="#000000", stroke_color="#111111")
    zone = registry.create(_square(17.0, 78.0), ZoneMetadata(kind=ZoneKind.DELIVERY, style=custom))

    updated = registry.update(zone.id, ZonePatch(kind=ZoneKind.PICKUP))
    restyled = registry.update(zone.id, ZonePatch(kind=ZoneKind.PREMIUM, style=ZoneStyle.for_kind(ZoneKind.PICKUP)))

    assert updated.style == custom
    assert restyled.style == ZoneStyle.for_kind(ZoneKind.PICKUP)


def test_update_with_invalid_boundary_keeps_previous_zone():
    registry = ZoneRegistry()
    zone = registry.create(_square(17.0, 78.0))

    with pytest.raises(InvalidGeometry):
        registry.update(zone.id, ZonePatch(boundary=(Point(17.0, 78.0), Point(17.1, 78.1))))

    assert registry.get(zone.id) == zone


def test_update_unknown_zone_raises_not_found():
    registry = ZoneRegistry()

    with pytest.raises(ZoneNotFound):
        registry.update("zone_missing", ZonePatch(name="x"))


def test_delete_is_not_idempotent():
    registry = ZoneRegistry()
    zone = registry.create(_square(17.0, 78.0))

    registry.delete(zone.id)

    with pytest.raises(ZoneNotFound):
        registry.get(zone.id)
    with pytest.raises(ZoneNotFound):
        registry.delete(zone.id)


def test_list_preserves_insertion_order_and_filters():
    registry = ZoneRegistry()
    first = registry.create(_square(17.0, 78.0), ZoneMetadata(kind=ZoneKind.DELIVERY))
    second = registry.create(_square(17.2, 78.0), ZoneMetadata(kind=ZoneKind.PICKUP, active=False))
    third = registry.create(_square(17.4, 78.0), ZoneMetadata(kind=ZoneKind.DELIVERY))

    assert [zone.id for zone in registry.list()] == [first.id, second.id, third.id]
    assert [zone.id for zone in registry.list(kind="delivery")] == [first.id, third.id]
    assert [zone.id for zone in registry.list(active=False)] == [second.id]
    assert registry.list(kind=ZoneKind.PREMIUM) == []


def test_lifecycle_events_fire_once_after_commit():
    registry = ZoneRegistry()
    listener = RecordingListener(registry)
    registry.add_listener(listener)

    zone = registry.create(_square(17.0, 78.0))
    registry.update(zone.id, ZonePatch(name="renamed"))
    registry.delete(zone.id)

    assert listener.events == [("created", zone.id), ("updated", zone.id), ("deleted", zone.id)]
    assert listener.committed_at_notify == [True, True]


def test_failed_mutations_emit_no_events():
    registry = ZoneRegistry()
    listener = RecordingListener()
    registry.add_listener(listener)

    with pytest.raises(InvalidGeometry):
        registry.create((Point(17.0, 78.0),))
    with pytest.raises(ZoneNotFound):
        registry.delete("zone_missing")

    assert listener.events == []


def test_failing_listener_does_not_undo_commit_or_block_others():
    class Broken:
        def on_zone_created(self, zone):
            raise RuntimeError("storage offline")

    registry = ZoneRegistry()
    recorder = RecordingListener()
    registry.add_listener(Broken())
    registry.add_listener(recorder)

    zone = registry.create(_square(17.0, 78.0))

    assert zone.id in registry
    assert recorder.events == [("created", zone.id)]


def test_load_replaces_contents_without_events():
    source = ZoneRegistry()
    zones = [source.create(_square(17.0, 78.0)), source.create(_square(17.2, 78.0))]
    registry = ZoneRegistry()
    registry.create(_square(10.0, 70.0))
    listener = RecordingListener()
    registry.add_listener(listener)

    count = registry.load(zones)

    assert count == 2
    assert [zone.id for zone in registry.list()] == [zone.id for zone in zones]
    assert listener.events == []


def test_bounds_cover_all_zones():
    registry = ZoneRegistry()
    assert registry.bounds() is None

    registry.create(_square(17.0, 78.0))
    registry.create(_square(17.5, 78.5, size=0.2))

    bounds = registry.bounds()
    assert bounds == MapBounds(south=17.0, west=78.0, north=pytest.approx(17.7), east=pytest.approx(78.7))

    registry.clear()
    assert len(registry) == 0
