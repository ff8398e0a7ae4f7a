"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...engine import Engine
from ...errors import CareZoneError
from ...schemas.routing import RoutePlanRequest, RoutePlanResponse
from ..errors import get_engine, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/plan", response_model=RoutePlanResponse, status_code=status.HTTP_200_OK)
async def plan_route(payload: RoutePlanRequest, engine: Engine = Depends(get_engine)) -> RoutePlanResponse:
    try:
        planner = engine.planner()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="OSRM service is not configured. Please check CAREZONE_OSRM_BASE_URL setting.",
        ) from exc
    try:
        route = await planner.plan(
            payload.origin.to_domain(),
            payload.destination.to_domain(),
            [waypoint.to_domain() for waypoint in payload.waypoints],
            payload.to_options(),
            timeout=payload.timeout_seconds,
        )
    except CareZoneError as exc:
        logger.info(f"Route planning failed: {exc}")
        raise to_http_exception(exc) from exc
    return RoutePlanResponse.from_domain(route)
