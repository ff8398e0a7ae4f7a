"""Async HTTP client for the OSRM directions service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

import httpx

from ...config import settings
from ...errors import NoRoute, ProviderError
from ...models.domain import Point, RouteOptions
from ..http import build_client, get_json

logger = logging.getLogger(__name__)

# OSRM codes that mean "well-formed request, nothing drivable".
NO_ROUTE_CODES = frozenset({"NoRoute", "NoTrips", "NoSegment"})

TRAVEL_MODE_PROFILES = {
    "driving": "driving",
    "car": "driving",
    "walking": "walking",
    "foot": "walking",
    "cycling": "cycling",
    "bicycling": "cycling",
    "bike": "cycling",
}


@dataclass(frozen=True, slots=True)
class ProviderRoute:
    distance_meters: float
    duration_seconds: float
    geometry: tuple[Point, ...]
    waypoint_order: tuple[int, ...] = ()


class DirectionsProvider(Protocol):
    name: str

    async def directions(
        self,
        coordinates: Sequence[Point],
        *,
        optimize_waypoints: bool,
        options: RouteOptions,
    ) -> ProviderRoute: ...

    async def health(self) -> bool: ...


class OSRMClient:
    name = "osrm"

    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.provider_timeout_seconds
        self._client = client

    def _profile_for(self, options: RouteOptions) -> str:
        mode = (options.travel_mode or "").strip().lower()
        if not mode:
            return self.profile
        return TRAVEL_MODE_PROFILES.get(mode, mode)

    @staticmethod
    def _exclusions(options: RouteOptions) -> str | None:
        classes = []
        if options.avoid_tolls:
            classes.append("toll")
        if options.avoid_highways:
            classes.append("motorway")
        return ",".join(classes) or None

    async def directions(
        self,
        coordinates: Sequence[Point],
        *,
        optimize_waypoints: bool = False,
        options: RouteOptions | None = None,
    ) -> ProviderRoute:
        """Route through ``coordinates`` (origin first, destination last).

        With ``optimize_waypoints`` the OSRM trip service is used so that the
        provider reorders the intermediate stops while keeping both ends fixed.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM routing.")
        options = options or RouteOptions()

        # OSRM expects coordinates as "lon,lat;lon,lat;..."
        coordinate_str = ";".join(f"{point.longitude},{point.latitude}" for point in coordinates)
        params = {
            "overview": "full",
            "geometries": "polyline",
            "steps": "false",
        }
        exclude = self._exclusions(options)
        if exclude:
            params["exclude"] = exclude

        service = "route"
        if optimize_waypoints and len(coordinates) > 2:
            service = "trip"
            params.update({"source": "first", "destination": "last", "roundtrip": "false"})

        url = f"{self.base_url}/{service}/v1/{self._profile_for(options)}/{coordinate_str}"
        logger.debug(f"OSRM {service} request with {len(coordinates)} coordinates")

        if self._client is not None:
            data = await get_json(self._client, url, params=params, provider=self.name, allow_statuses=(400,))
        else:
            async with build_client(self.timeout) as client:
                data = await get_json(client, url, params=params, provider=self.name, allow_statuses=(400,))

        code = data.get("code")
        if code in NO_ROUTE_CODES:
            raise NoRoute(data.get("message") or "No drivable route between the requested points.")
        if code != "Ok":
            error_msg = data.get("message", "Unknown OSRM error")
            raise ProviderError(f"OSRM {service} request failed: {code}: {error_msg}", provider=self.name)

        legs = data.get("trips") if service == "trip" else data.get("routes")
        if not legs:
            raise NoRoute("OSRM returned no routes.")
        best = legs[0]
        waypoint_order: tuple[int, ...] = ()
        if service == "trip":
            waypoint_order = _intermediate_order(data.get("waypoints") or [], len(coordinates))
        return ProviderRoute(
            distance_meters=float(best.get("distance", 0.0)),
            duration_seconds=float(best.get("duration", 0.0)),
            geometry=tuple(Point(lat, lon) for lat, lon in decode_polyline(best.get("geometry") or "")),
            waypoint_order=waypoint_order,
        )

    async def health(self) -> bool:
        return await check_health(self.base_url, self.profile, client=self._client)


def _intermediate_order(waypoints: Sequence[dict], count: int) -> tuple[int, ...]:
    """Visiting order of the intermediate stops, as indices into the caller's waypoint list."""

    positions = [
        (waypoint.get("waypoint_index", index), index)
        for index, waypoint in enumerate(waypoints)
        if 0 < index < count - 1
    ]
    return tuple(index - 1 for _, index in sorted(positions))


def decode_polyline(polyline: str) -> list[tuple[float, float]]:
    """Decode Google polyline string to list of (lat, lon) coordinates.

    OSRM uses Google's polyline encoding format for route geometry.
    """
    coordinates = []
    index = 0
    lat = 0
    lon = 0

    while index < len(polyline):
        # Decode latitude
        shift = 0
        result = 0
        while True:
            b = ord(polyline[index]) - 63
            index += 1
            result |= (b & 0x1f) << shift
            shift += 5
            if b < 0x20:
                break
        dlat = ~(result >> 1) if (result & 1) else (result >> 1)
        lat += dlat

        # Decode longitude
        shift = 0
        result = 0
        while True:
            b = ord(polyline[index]) - 63
            index += 1
            result |= (b & 0x1f) << shift
            shift += 5
            if b < 0x20:
                break
        dlon = ~(result >> 1) if (result & 1) else (result >> 1)
        lon += dlon

        coordinates.append((lat / 1e5, lon / 1e5))

    return coordinates


async def check_health(
    base_url: str | None = None,
    profile: str | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Check OSRM service health with a minimal two-point route request.

    Public OSRM endpoints may not have a /health endpoint.
    """
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    # Two points in Hyderabad
    test_coords = "78.4867,17.3850;78.4744,17.3616"
    url = f"{base.rstrip('/')}/route/v1/{profile or settings.osrm_profile}/{test_coords}"
    params = {"overview": "false"}
    try:
        if client is not None:
            data = await get_json(client, url, params=params, provider="osrm")
        else:
            async with build_client(5.0) as owned:
                data = await get_json(owned, url, params=params, provider="osrm")
    except ProviderError:
        return False
    return data.get("code") == "Ok"
