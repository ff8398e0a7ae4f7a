"""Geocoding adapter and providers."""

from .adapter import GeocodingAdapter, collapse_whitespace
from .providers import GeocodingProvider, GoogleGeocodingProvider, NominatimGeocodingProvider, get_provider

__all__ = [
    "GeocodingAdapter",
    "GeocodingProvider",
    "GoogleGeocodingProvider",
    "NominatimGeocodingProvider",
    "collapse_whitespace",
    "get_provider",
]
