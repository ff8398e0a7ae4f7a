"""API routes for service zones and map interaction."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...engine import Engine
from ...errors import CareZoneError
from ...models.domain import SERVICE_TYPES, ZoneKind
from ...schemas.zones import (
    BoundsModel,
    ContainmentRequest,
    ContainmentResponse,
    DrawZoneRequest,
    EditBoundaryRequest,
    EligibilityRequest,
    EligibilityResponse,
    InteractionStatus,
    ZoneCreateRequest,
    ZoneModel,
    ZonePatchRequest,
)
from ...services.zones.containment import check_eligibility, zones_containing
from ..errors import get_engine, to_http_exception

router = APIRouter(prefix="/zones", tags=["zones"])


def _status(engine: Engine) -> InteractionStatus:
    current = engine.controller.snapshot()
    return InteractionStatus(
        state=current.state.value,
        selected_zone_id=current.selected_zone_id,
        drawing_kind=current.drawing_kind.value if current.drawing_kind else None,
    )


@router.get("", response_model=List[ZoneModel])
def list_zones(
    kind: Optional[ZoneKind] = Query(default=None),
    active: Optional[bool] = Query(default=None),
    engine: Engine = Depends(get_engine),
) -> List[ZoneModel]:
    return [ZoneModel.from_domain(zone) for zone in engine.registry.list(kind=kind, active=active)]


@router.post("", response_model=ZoneModel, status_code=status.HTTP_201_CREATED)
def create_zone(payload: ZoneCreateRequest, engine: Engine = Depends(get_engine)) -> ZoneModel:
    try:
        boundary = tuple(point.to_domain() for point in payload.boundary)
        zone = engine.registry.create(boundary, payload.to_metadata())
    except CareZoneError as exc:
        raise to_http_exception(exc) from exc
    return ZoneModel.from_domain(zone)


@router.post("/draw", response_model=ZoneModel, status_code=status.HTTP_201_CREATED)
def draw_zone(payload: DrawZoneRequest, engine: Engine = Depends(get_engine)) -> ZoneModel:
    """Run one complete drawing gesture: enter the drawing mode and finish the shape."""
    try:
        zone = engine.controller.draw(payload.primitive.to_domain(), payload.to_metadata())
    except CareZoneError as exc:
        raise to_http_exception(exc) from exc
    return ZoneModel.from_domain(zone)


@router.get("/bounds", response_model=Optional[BoundsModel])
def zone_bounds(engine: Engine = Depends(get_engine)) -> Optional[BoundsModel]:
    bounds = engine.registry.bounds()
    return BoundsModel.from_domain(bounds) if bounds else None


@router.get("/overlays")
def zone_overlays(engine: Engine = Depends(get_engine)) -> dict:
    with engine.registry.lock:
        return engine.surface.to_geojson()


@router.get("/service-types", response_model=List[str])
def service_types() -> List[str]:
    return list(SERVICE_TYPES)


@router.get("/interaction", response_model=InteractionStatus)
def interaction_status(engine: Engine = Depends(get_engine)) -> InteractionStatus:
    return _status(engine)


@router.post("/deselect", response_model=InteractionStatus)
def deselect_zone(engine: Engine = Depends(get_engine)) -> InteractionStatus:
    engine.controller.deselect()
    return _status(engine)


@router.put("/selected/boundary", response_model=ZoneModel)
def edit_selected_boundary(payload: EditBoundaryRequest, engine: Engine = Depends(get_engine)) -> ZoneModel:
    if engine.controller.selected_zone_id is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="No zone is selected.")
    try:
        zone = engine.controller.edit(payload.primitive.to_domain())
    except CareZoneError as exc:
        raise to_http_exception(exc) from exc
    return ZoneModel.from_domain(zone)


@router.post("/contains", response_model=ContainmentResponse)
def contains(payload: ContainmentRequest, engine: Engine = Depends(get_engine)) -> ContainmentResponse:
    zones = engine.registry.list(active=True) if payload.active_only else engine.registry.snapshot()
    return ContainmentResponse(zone_ids=zones_containing(payload.point.to_domain(), zones))


@router.post("/eligibility", response_model=EligibilityResponse)
def eligibility(payload: EligibilityRequest, engine: Engine = Depends(get_engine)) -> EligibilityResponse:
    result = check_eligibility(payload.point.to_domain(), engine.registry.snapshot(), payload.service)
    return EligibilityResponse(
        zone_ids=list(result.zone_ids),
        eligible=result.eligible,
        pricing_tier=result.pricing_tier,
        emergency_covered=result.emergency_covered,
        restricted=result.restricted,
    )


@router.get("/{zone_id}", response_model=ZoneModel)
def get_zone(zone_id: str, engine: Engine = Depends(get_engine)) -> ZoneModel:
    try:
        return ZoneModel.from_domain(engine.registry.get(zone_id))
    except CareZoneError as exc:
        raise to_http_exception(exc) from exc


@router.patch("/{zone_id}", response_model=ZoneModel)
def update_zone(zone_id: str, payload: ZonePatchRequest, engine: Engine = Depends(get_engine)) -> ZoneModel:
    try:
        zone = engine.registry.update(zone_id, payload.to_domain())
    except CareZoneError as exc:
        raise to_http_exception(exc) from exc
    return ZoneModel.from_domain(zone)


@router.delete("/{zone_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_zone(zone_id: str, engine: Engine = Depends(get_engine)) -> Response:
    try:
        engine.controller.delete(zone_id)
    except CareZoneError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{zone_id}/select", response_model=InteractionStatus)
def select_zone(zone_id: str, engine: Engine = Depends(get_engine)) -> InteractionStatus:
    try:
        engine.controller.select(zone_id)
    except CareZoneError as exc:
        raise to_http_exception(exc) from exc
    return _status(engine)
