"""Gesture-driven state machine for drawing, selecting, editing and deleting zones."""

from __future__ import annotations

import logging
from enum import Enum
from typing import NamedTuple, Optional, Sequence, Union

from ...errors import InvalidTransition
from ...models.domain import (
    CirclePrimitive,
    DrawnPrimitive,
    Point,
    PolygonPrimitive,
    RectanglePrimitive,
    ServiceZone,
    ShapeKind,
    ZoneMetadata,
    ZonePatch,
    as_points,
)
from ..geometry.shapes import normalize, validate_primitive
from ..zones.registry import ZoneRegistry
from .rendering import RenderingSurface

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES = (CirclePrimitive, RectanglePrimitive, PolygonPrimitive)


class InteractionState(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    NORMALIZING = "normalizing"
    ZONE_SELECTED = "zone_selected"
    EDITING = "editing"


class InteractionSnapshot(NamedTuple):
    state: InteractionState
    drawing_kind: Optional[ShapeKind]
    selected_zone_id: Optional[str]


class ZoneInteractionController:
    """Coordinates map gestures against the zone registry.

    One drawing mode at a time, one shape per draw action, one selected zone
    at a time. The controller also listens to the registry so the rendering
    surface and the selection follow mutations made elsewhere.

    Transitions hold the registry's lock, so a threaded host sees each one
    whole and registry callbacks never interleave with them.
    """

    def __init__(self, registry: ZoneRegistry, surface: RenderingSurface | None = None) -> None:
        self.registry = registry
        self.surface = surface
        self._lock = registry.lock
        self._state = InteractionState.IDLE
        self._drawing_kind: Optional[ShapeKind] = None
        self._selected: Optional[str] = None
        registry.add_listener(self)

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def drawing_kind(self) -> Optional[ShapeKind]:
        return self._drawing_kind

    @property
    def selected_zone_id(self) -> Optional[str]:
        return self._selected

    def snapshot(self) -> InteractionSnapshot:
        with self._lock:
            return InteractionSnapshot(self._state, self._drawing_kind, self._selected)

    def _require(self, *allowed: InteractionState, action: str) -> None:
        if self._state not in allowed:
            raise InvalidTransition(f"Cannot {action} while {self._state.value}.")

    def _set_drawing_mode(self, kind: Optional[ShapeKind]) -> None:
        self._drawing_kind = kind
        if self.surface is not None:
            self.surface.set_drawing_mode(kind)

    def _set_selection(self, zone_id: Optional[str]) -> None:
        self._selected = zone_id
        if self.surface is not None:
            self.surface.highlight(zone_id)

    # Drawing

    def begin_draw(self, shape_kind: Union[ShapeKind, str]) -> None:
        with self._lock:
            self._require(InteractionState.IDLE, InteractionState.ZONE_SELECTED, action="start drawing")
            kind = ShapeKind(shape_kind)
            if self._selected is not None:
                self._set_selection(None)
            self._state = InteractionState.DRAWING
            self._set_drawing_mode(kind)

    def cancel_draw(self) -> None:
        with self._lock:
            self._require(InteractionState.DRAWING, action="cancel drawing")
            self._state = InteractionState.IDLE
            self._set_drawing_mode(None)

    def gesture_complete(self, primitive: DrawnPrimitive, metadata: ZoneMetadata | None = None) -> ServiceZone:
        """Normalize the finished shape and register it; drawing mode turns off either way."""

        with self._lock:
            self._require(InteractionState.DRAWING, action="complete a shape")
            if primitive.kind is not self._drawing_kind:
                raise InvalidTransition(
                    f"Drawn {primitive.kind.value} does not match drawing mode {self._drawing_kind.value}."
                )

            self._state = InteractionState.NORMALIZING
            try:
                validate_primitive(primitive)
                ring = normalize(primitive)
                zone = self.registry.create(ring, metadata)
            except Exception:
                logger.info(f"Discarded drawn {primitive.kind.value} after a failed normalization or insert")
                raise
            finally:
                self._state = InteractionState.IDLE
                self._set_drawing_mode(None)
            return zone

    def draw(self, primitive: DrawnPrimitive, metadata: ZoneMetadata | None = None) -> ServiceZone:
        """Enter the primitive's drawing mode and complete it in one step."""

        with self._lock:
            self.begin_draw(primitive.kind)
            return self.gesture_complete(primitive, metadata)

    # Selection and editing

    def select(self, zone_id: str) -> ServiceZone:
        with self._lock:
            self._require(InteractionState.IDLE, InteractionState.ZONE_SELECTED, action="select a zone")
            zone = self.registry.get(zone_id)
            self._set_selection(zone.id)
            self._state = InteractionState.ZONE_SELECTED
            return zone

    def deselect(self) -> None:
        with self._lock:
            if self._drawing_kind is not None:
                self._set_drawing_mode(None)
            if self._selected is not None:
                self._set_selection(None)
            self._state = InteractionState.IDLE

    def begin_edit(self) -> None:
        with self._lock:
            self._require(InteractionState.ZONE_SELECTED, action="start editing")
            self._state = InteractionState.EDITING

    def finish_edit(self) -> None:
        with self._lock:
            self._require(InteractionState.EDITING, action="finish editing")
            self._state = InteractionState.ZONE_SELECTED

    def edit(self, new_boundary: Union[DrawnPrimitive, Sequence[Point], Sequence[Sequence[float]]]) -> ServiceZone:
        """Replace the selected zone's boundary with a re-normalized shape."""

        with self._lock:
            self._require(InteractionState.ZONE_SELECTED, InteractionState.EDITING, action="edit a zone")
            if isinstance(new_boundary, _PRIMITIVE_TYPES):
                primitive = new_boundary
            else:
                primitive = PolygonPrimitive(as_points(new_boundary))
            validate_primitive(primitive)
            zone = self.registry.update(self._selected, ZonePatch(boundary=normalize(primitive)))
            self._state = InteractionState.ZONE_SELECTED
            return zone

    def update_selected(self, patch: ZonePatch) -> ServiceZone:
        with self._lock:
            self._require(InteractionState.ZONE_SELECTED, InteractionState.EDITING, action="update a zone")
            return self.registry.update(self._selected, patch)

    def delete(self, zone_id: str) -> None:
        with self._lock:
            self._require(
                InteractionState.IDLE,
                InteractionState.ZONE_SELECTED,
                InteractionState.EDITING,
                action="delete a zone",
            )
            self.registry.delete(zone_id)

    # Registry listener; delivered while the registry holds the shared lock.

    def on_zone_created(self, zone: ServiceZone) -> None:
        if self.surface is not None:
            self.surface.draw_zone(zone)

    def on_zone_updated(self, zone: ServiceZone) -> None:
        if self.surface is not None:
            self.surface.draw_zone(zone)

    def on_zone_deleted(self, zone_id: str) -> None:
        if self.surface is not None:
            self.surface.remove_zone(zone_id)
        if self._selected == zone_id:
            self._set_selection(None)
            if self._state in (InteractionState.ZONE_SELECTED, InteractionState.EDITING):
                self._state = InteractionState.IDLE
