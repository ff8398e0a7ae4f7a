"""In-memory zone registry: the source of truth for which zones exist."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from typing import Iterable, Iterator, Optional, Protocol, Sequence

from ...errors import ZoneNotFound
from ...models.domain import (
    MapBounds,
    Point,
    ServiceZone,
    ZoneKind,
    ZoneMetadata,
    ZonePatch,
    ZoneStyle,
    utcnow,
)
from ..geometry.rings import ring_bounds, validate_ring
from ..geospatial import merge_bounds

logger = logging.getLogger(__name__)


class ZoneLifecycleListener(Protocol):
    """Receives committed registry mutations. Return values are ignored."""

    def on_zone_created(self, zone: ServiceZone) -> None: ...

    def on_zone_updated(self, zone: ServiceZone) -> None: ...

    def on_zone_deleted(self, zone_id: str) -> None: ...


def new_zone_id() -> str:
    return f"zone_{uuid.uuid4().hex}"


class ZoneRegistry:
    """Keyed store of service zones, in insertion order."""

    def __init__(self, listeners: Iterable[ZoneLifecycleListener] = ()) -> None:
        self._zones: dict[str, ServiceZone] = {}
        self._listeners: list[ZoneLifecycleListener] = list(listeners)
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """Reentrant lock held for every mutation and its listener delivery."""
        return self._lock

    def add_listener(self, listener: ZoneLifecycleListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ZoneLifecycleListener) -> None:
        self._listeners.remove(listener)

    def __len__(self) -> int:
        return len(self._zones)

    def __contains__(self, zone_id: object) -> bool:
        return zone_id in self._zones

    def __iter__(self) -> Iterator[ServiceZone]:
        return iter(self.snapshot())

    def create(self, boundary: Sequence[Point], metadata: ZoneMetadata | None = None) -> ServiceZone:
        metadata = metadata or ZoneMetadata()
        ring = validate_ring(boundary)
        kind = ZoneKind(metadata.kind)
        now = utcnow()
        with self._lock:
            zone_id = new_zone_id()
            while zone_id in self._zones:
                zone_id = new_zone_id()
            zone = ServiceZone(
                id=zone_id,
                name=metadata.name,
                kind=kind,
                boundary=ring,
                style=metadata.style or ZoneStyle.for_kind(kind),
                applicable_services=frozenset(metadata.applicable_services),
                active=metadata.active,
                created_at=now,
                updated_at=now,
            )
            self._zones[zone_id] = zone
            logger.info(f"Created zone {zone_id} ({kind.value}, {len(ring)} vertices)")
            self._notify("on_zone_created", zone)
        return zone

    def update(self, zone_id: str, patch: ZonePatch) -> ServiceZone:
        with self._lock:
            current = self.get(zone_id)
            changes: dict = {}
            if patch.boundary is not None:
                changes["boundary"] = validate_ring(patch.boundary)
            if patch.name is not None:
                changes["name"] = patch.name
            if patch.kind is not None:
                changes["kind"] = ZoneKind(patch.kind)
            if patch.style is not None:
                changes["style"] = patch.style
            elif "kind" in changes and current.style == ZoneStyle.for_kind(current.kind):
                # A default style follows the kind; a custom one is kept.
                changes["style"] = ZoneStyle.for_kind(changes["kind"])
            if patch.applicable_services is not None:
                changes["applicable_services"] = frozenset(patch.applicable_services)
            if patch.active is not None:
                changes["active"] = patch.active
            zone = replace(current, updated_at=utcnow(), **changes)
            self._zones[zone_id] = zone
            summary = ", ".join(sorted(changes)) or "no field changes"
            logger.info(f"Updated zone {zone_id} ({summary})")
            self._notify("on_zone_updated", zone)
        return zone

    def delete(self, zone_id: str) -> None:
        with self._lock:
            if zone_id not in self._zones:
                raise ZoneNotFound(zone_id)
            del self._zones[zone_id]
            logger.info(f"Deleted zone {zone_id}")
            self._notify("on_zone_deleted", zone_id)

    def get(self, zone_id: str) -> ServiceZone:
        try:
            return self._zones[zone_id]
        except KeyError:
            raise ZoneNotFound(zone_id) from None

    def list(self, kind: ZoneKind | str | None = None, active: Optional[bool] = None) -> list[ServiceZone]:
        wanted_kind = ZoneKind(kind) if kind is not None else None
        return [
            zone
            for zone in self.snapshot()
            if (wanted_kind is None or zone.kind is wanted_kind) and (active is None or zone.active == active)
        ]

    def snapshot(self) -> tuple[ServiceZone, ...]:
        with self._lock:
            return tuple(self._zones.values())

    def load(self, zones: Iterable[ServiceZone]) -> int:
        """Replace the registry contents with previously persisted zones. Emits no events."""

        loaded: dict[str, ServiceZone] = {}
        for zone in zones:
            validate_ring(zone.boundary)
            loaded[zone.id] = zone
        with self._lock:
            self._zones = loaded
        logger.info(f"Loaded {len(loaded)} zones")
        return len(loaded)

    def clear(self) -> None:
        with self._lock:
            self._zones.clear()

    def bounds(self) -> MapBounds | None:
        """Bounding box covering every zone, for fitting a map view."""

        return merge_bounds([ring_bounds(zone.boundary) for zone in self.snapshot()])

    def _notify(self, hook: str, payload) -> None:
        for listener in list(self._listeners):
            try:
                getattr(listener, hook)(payload)
            except Exception as exc:
                logger.warning(f"Zone listener {type(listener).__name__}.{hook} failed: {exc}")
