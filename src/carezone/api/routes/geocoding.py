"""Address geocoding endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...engine import Engine
from ...errors import CareZoneError
from ...schemas.geocoding import GeocodeCandidateModel, GeocodeResponse, SuggestResponse
from ...services.geocoding import collapse_whitespace
from ..errors import get_engine, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/geocoding", tags=["geocoding"])


def _adapter(engine: Engine):
    try:
        return engine.geocoder()
    except ValueError as exc:
        logger.error(f"Geocoding provider is not configured: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@router.get("/resolve", response_model=GeocodeResponse)
async def resolve_address(
    q: str = Query("", description="Free-text address."),
    region: Optional[str] = Query(default=None, description="ISO country code used to bias results."),
    timeout: Optional[float] = Query(default=None, gt=0.0),
    engine: Engine = Depends(get_engine),
) -> GeocodeResponse:
    adapter = _adapter(engine)
    try:
        candidates = await adapter.resolve(q, region, timeout=timeout)
    except CareZoneError as exc:
        raise to_http_exception(exc) from exc
    return GeocodeResponse(
        query=collapse_whitespace(q),
        candidates=[GeocodeCandidateModel.from_domain(candidate) for candidate in candidates],
    )


@router.get("/suggest", response_model=SuggestResponse)
async def suggest_addresses(
    q: str = Query("", description="Partial address typed so far."),
    region: Optional[str] = Query(default=None),
    limit: int = Query(5, ge=1, le=10),
    engine: Engine = Depends(get_engine),
) -> SuggestResponse:
    adapter = _adapter(engine)
    try:
        suggestions = await adapter.suggest(q, region, limit=limit)
    except CareZoneError as exc:
        raise to_http_exception(exc) from exc
    return SuggestResponse(query=collapse_whitespace(q), suggestions=suggestions)
