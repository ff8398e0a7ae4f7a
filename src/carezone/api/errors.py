"""Translation of engine errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from ..engine import Engine
from ..errors import (
    CareZoneError,
    InvalidGeometry,
    InvalidTransition,
    NoMatch,
    NoRoute,
    ProviderError,
    RequestSuperseded,
    ZoneNotFound,
)


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def to_http_exception(exc: CareZoneError) -> HTTPException:
    if isinstance(exc, ZoneNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, (InvalidGeometry, InvalidTransition)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, NoMatch):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail={"reason": "no_match", "message": str(exc)})
    if isinstance(exc, NoRoute):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail={"reason": "no_route", "message": str(exc)})
    if isinstance(exc, ProviderError):
        code = status.HTTP_504_GATEWAY_TIMEOUT if exc.timed_out else status.HTTP_503_SERVICE_UNAVAILABLE
        return HTTPException(status_code=code, detail=str(exc))
    if isinstance(exc, RequestSuperseded):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
