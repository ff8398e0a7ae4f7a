"""Single-leg route planning with local fare estimation."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import Point, RouteOptions, RouteResult
from ..inflight import LatestRequestGate
from .osrm_client import DirectionsProvider, OSRMClient
from .tariff import Tariff

logger = logging.getLogger(__name__)


class RoutePlanner:
    """Plans origin -> destination routes through an external directions provider.

    A newer ``plan`` call supersedes one still in flight.
    """

    def __init__(
        self,
        provider: DirectionsProvider | None = None,
        tariff: Tariff | None = None,
        *,
        default_timeout: float | None = None,
    ) -> None:
        self.provider = provider or OSRMClient()
        self.tariff = tariff or Tariff.from_settings()
        self.default_timeout = default_timeout if default_timeout is not None else settings.provider_timeout_seconds
        self._gate = LatestRequestGate(f"{self.provider.name} directions")

    async def plan(
        self,
        origin: Point,
        destination: Point,
        waypoints: Optional[Sequence[Point]] = None,
        options: Optional[RouteOptions] = None,
        *,
        timeout: float | None = None,
    ) -> RouteResult:
        stops = list(waypoints or ())
        coordinates = [origin, *stops, destination]
        options = options or RouteOptions()

        route = await self._gate.run(
            self.provider.directions(coordinates, optimize_waypoints=bool(stops), options=options),
            timeout=timeout if timeout is not None else self.default_timeout,
        )
        cost = self.tariff.estimate(route.distance_meters)
        logger.info(
            f"Planned route {route.distance_meters / 1000.0:.1f} km / {route.duration_seconds / 60.0:.0f} min "
            f"with {len(stops)} waypoint(s), estimated {cost:.2f} {self.tariff.currency}"
        )
        return RouteResult(
            distance_meters=route.distance_meters,
            travel_time_seconds=route.duration_seconds,
            polyline=route.geometry,
            estimated_cost=cost,
            currency=self.tariff.currency,
            waypoint_order=route.waypoint_order,
        )

    async def health(self) -> bool:
        """Whether the directions provider answers; never raises for provider failures."""

        check = getattr(self.provider, "health", None)
        if check is None:
            return True
        return await check()
