"""Geocoding provider implementations (Google Geocoding API, Nominatim)."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from ...config import settings
from ...errors import InvalidGeometry, ProviderError
from ...models.domain import AddressComponent, GeocodeCandidate, Point
from ..http import build_client, get_json

logger = logging.getLogger(__name__)


class GeocodingProvider(Protocol):
    name: str

    async def geocode(self, query: str, region_bias: Optional[str]) -> list[GeocodeCandidate]:
        """Return candidates best match first; an empty list means no match."""
        ...


class GoogleGeocodingProvider:
    name = "google"
    BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.google_maps_api_key
        if not self.api_key:
            raise ValueError("Google Maps API key is not configured.")
        self.timeout = timeout if timeout is not None else settings.provider_timeout_seconds
        self._client = client

    async def geocode(self, query: str, region_bias: Optional[str]) -> list[GeocodeCandidate]:
        params = {"address": query, "key": self.api_key}
        if region_bias:
            params["region"] = region_bias
        if self._client is not None:
            payload = await get_json(self._client, self.BASE_URL, params=params, provider=self.name)
        else:
            async with build_client(self.timeout) as client:
                payload = await get_json(client, self.BASE_URL, params=params, provider=self.name)

        status = payload.get("status")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            message = payload.get("error_message") or status
            raise ProviderError(f"Google geocoding failed: {message}", provider=self.name)
        return [candidate for candidate in map(self._parse, payload.get("results") or []) if candidate]

    def _parse(self, item: dict) -> GeocodeCandidate | None:
        try:
            location = item["geometry"]["location"]
            coordinate = Point(float(location["lat"]), float(location["lng"]))
        except (KeyError, TypeError, ValueError, InvalidGeometry):
            logger.debug(f"Skipping unparseable Google result: {item}")
            return None
        components = tuple(
            AddressComponent(
                long_name=component.get("long_name", ""),
                short_name=component.get("short_name", ""),
                types=tuple(component.get("types") or ()),
            )
            for component in item.get("address_components") or []
        )
        return GeocodeCandidate(
            formatted_address=item.get("formatted_address", ""),
            coordinate=coordinate,
            external_place_id=str(item.get("place_id", "")),
            address_components=components,
        )


class NominatimGeocodingProvider:
    name = "nominatim"

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        *,
        limit: int = 10,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.nominatim_base_url).rstrip("/")
        self.user_agent = user_agent or settings.nominatim_user_agent
        self.limit = limit
        self.timeout = timeout if timeout is not None else settings.provider_timeout_seconds
        self._client = client

    async def geocode(self, query: str, region_bias: Optional[str]) -> list[GeocodeCandidate]:
        params = {
            "q": query,
            "format": "jsonv2",
            "addressdetails": "1",
            "limit": str(self.limit),
        }
        if region_bias:
            params["countrycodes"] = region_bias
        headers = {"User-Agent": self.user_agent}
        url = f"{self.base_url}/search"
        if self._client is not None:
            payload = await get_json(self._client, url, params=params, headers=headers, provider=self.name)
        else:
            async with build_client(self.timeout) as client:
                payload = await get_json(client, url, params=params, headers=headers, provider=self.name)

        if not isinstance(payload, list):
            raise ProviderError("Nominatim returned an unexpected payload.", provider=self.name)
        return [candidate for candidate in map(self._parse, payload) if candidate]

    def _parse(self, item: dict) -> GeocodeCandidate | None:
        try:
            coordinate = Point(float(item["lat"]), float(item["lon"]))
        except (KeyError, TypeError, ValueError, InvalidGeometry):
            logger.debug(f"Skipping unparseable Nominatim result: {item}")
            return None
        components = tuple(
            AddressComponent(long_name=str(value), short_name=str(value), types=(key,))
            for key, value in (item.get("address") or {}).items()
        )
        return GeocodeCandidate(
            formatted_address=item.get("display_name", ""),
            coordinate=coordinate,
            external_place_id=str(item.get("place_id", "")),
            address_components=components,
        )


def get_provider(name: str | None = None, **kwargs) -> GeocodingProvider:
    match name or settings.geocoding_provider:
        case "google":
            return GoogleGeocodingProvider(**kwargs)
        case "nominatim":
            return NominatimGeocodingProvider(**kwargs)
        case other:
            raise ValueError(f"Unknown geocoding provider '{other}'.")
