"""Health endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from ...engine import Engine
from ..errors import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root(engine: Engine = Depends(get_engine)) -> dict:
    """Simple health check endpoint that doesn't require any external service."""
    return {"status": "ok", "zones": len(engine.registry)}


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
async def health_osrm(engine: Engine = Depends(get_engine)) -> dict:
    """Check directions service health."""
    try:
        planner = engine.planner()
    except ValueError as exc:
        logger.warning(f"Directions provider is not configured: {exc}")
        return {"service": "osrm", "healthy": False}
    return {"service": planner.provider.name, "healthy": await planner.health()}
