import asyncio

import httpx
import pytest

from carezone.errors import NoMatch, ProviderError, RequestSuperseded
from carezone.models.domain import GeocodeCandidate, Point
from carezone.services.geocoding import (
    GeocodingAdapter,
    GoogleGeocodingProvider,
    NominatimGeocodingProvider,
    collapse_whitespace,
    get_provider,
)


def _candidate(address: str, lat: float = 17.385, lon: float = 78.4867) -> GeocodeCandidate:
    return GeocodeCandidate(formatted_address=address, coordinate=Point(lat, lon), external_place_id=address)


class DummyProvider:
    name = "dummy"

    def __init__(self, results=None):
        self.results = results if results is not None else [_candidate("Hyderabad, Telangana, India")]
        self.calls = []

    async def geocode(self, query, region_bias):
        self.calls.append((query, region_bias))
        return list(self.results)


class GatedProvider:
    """Holds the query "slow" until released so a second query can overtake it."""

    name = "gated"

    def __init__(self):
        self.release = asyncio.Event()
        self.started = asyncio.Event()

    async def geocode(self, query, region_bias):
        if query == "slow":
            self.started.set()
            await self.release.wait()
        return [_candidate(query)]


class HangingProvider:
    name = "hanging"

    async def geocode(self, query, region_bias):
        await asyncio.Event().wait()


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_collapse_whitespace():
    assert collapse_whitespace("  Banjara   Hills,\n Hyderabad\t") == "Banjara Hills, Hyderabad"
    assert collapse_whitespace("   ") == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["", "   ", "\n\t"])
async def test_empty_query_is_no_match_without_provider_call(query):
    provider = DummyProvider()
    adapter = GeocodingAdapter(provider, default_region_bias="in")

    with pytest.raises(NoMatch):
        await adapter.resolve(query)

    assert provider.calls == []


@pytest.mark.asyncio
async def test_resolve_passes_collapsed_query_and_region_bias():
    provider = DummyProvider()
    adapter = GeocodingAdapter(provider, default_region_bias="in")

    candidates = await adapter.resolve("  Hyderabad   India ")
    await adapter.resolve("Sydney", region_bias="AU")

    assert candidates[0].formatted_address == "Hyderabad, Telangana, India"
    assert provider.calls == [("Hyderabad India", "in"), ("Sydney", "au")]


@pytest.mark.asyncio
async def test_resolve_with_no_results_is_no_match():
    adapter = GeocodingAdapter(DummyProvider(results=[]), default_region_bias="in")

    with pytest.raises(NoMatch):
        await adapter.resolve("Nowhere at all")


@pytest.mark.asyncio
async def test_resolve_keeps_provider_order():
    results = [_candidate("first"), _candidate("second"), _candidate("third")]
    adapter = GeocodingAdapter(DummyProvider(results=results), default_region_bias="in")

    candidates = await adapter.resolve("Main Road")

    assert [candidate.formatted_address for candidate in candidates] == ["first", "second", "third"]


@pytest.mark.asyncio
async def test_newer_query_supersedes_in_flight_query():
    provider = GatedProvider()
    adapter = GeocodingAdapter(provider, default_region_bias="in")

    first = asyncio.ensure_future(adapter.resolve("slow"))
    await provider.started.wait()

    second = await adapter.resolve("fast")
    provider.release.set()

    assert second[0].formatted_address == "fast"
    with pytest.raises(RequestSuperseded):
        await first


@pytest.mark.asyncio
async def test_resolve_timeout_is_provider_error():
    adapter = GeocodingAdapter(HangingProvider(), default_region_bias="in")

    with pytest.raises(ProviderError) as excinfo:
        await adapter.resolve("Hyderabad", timeout=0.01)

    assert excinfo.value.timed_out


@pytest.mark.asyncio
async def test_suggest_needs_three_characters_and_respects_limit():
    results = [_candidate(f"Road {index}") for index in range(8)]
    provider = DummyProvider(results=results)
    adapter = GeocodingAdapter(provider, default_region_bias="in")

    assert await adapter.suggest("Ro") == []
    assert provider.calls == []
    assert await adapter.suggest("Road", limit=3) == ["Road 0", "Road 1", "Road 2"]


@pytest.mark.asyncio
async def test_google_provider_parses_results():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(
            200,
            json={
                "status": "OK",
                "results": [
                    {
                        "formatted_address": "Hyderabad, Telangana, India",
                        "place_id": "ChIJx9Lr6tqZyzsRWvn",
                        "geometry": {"location": {"lat": 17.385044, "lng": 78.486671}},
                        "address_components": [
                            {"long_name": "Hyderabad", "short_name": "Hyderabad", "types": ["locality", "political"]},
                            {"long_name": "Telangana", "short_name": "TG", "types": ["administrative_area_level_1"]},
                        ],
                    }
                ],
            },
        )

    async with _client(handler) as client:
        provider = GoogleGeocodingProvider("test-key", client=client)
        candidates = await provider.geocode("Hyderabad", "in")

    assert seen["address"] == "Hyderabad"
    assert seen["key"] == "test-key"
    assert seen["region"] == "in"
    assert len(candidates) == 1
    candidate = candidates[0]
    assert candidate.coordinate == Point(17.385044, 78.486671)
    assert candidate.external_place_id == "ChIJx9Lr6tqZyzsRWvn"
    assert candidate.address_components[1].short_name == "TG"
    assert candidate.address_components[0].types == ("locality", "political")


@pytest.mark.asyncio
async def test_google_zero_results_is_empty_and_becomes_no_match():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})

    async with _client(handler) as client:
        adapter = GeocodingAdapter(GoogleGeocodingProvider("k", client=client), default_region_bias="in")
        with pytest.raises(NoMatch):
            await adapter.resolve("zzzzqqq")


@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["OVER_QUERY_LIMIT", "REQUEST_DENIED", "INVALID_REQUEST"])
async def test_google_error_status_is_provider_error(status):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": status, "error_message": "nope"})

    async with _client(handler) as client:
        provider = GoogleGeocodingProvider("k", client=client)
        with pytest.raises(ProviderError):
            await provider.geocode("Hyderabad", None)


def test_google_provider_requires_api_key():
    with pytest.raises(ValueError):
        GoogleGeocodingProvider("")


@pytest.mark.asyncio
async def test_nominatim_provider_parses_results_and_sends_user_agent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["user_agent"] = request.headers.get("User-Agent")
        seen["path"] = request.url.path
        return httpx.Response(
            200,
            json=[
                {
                    "place_id": 123456,
                    "lat": "17.3850",
                    "lon": "78.4867",
                    "display_name": "Hyderabad, Telangana, India",
                    "address": {"city": "Hyderabad", "state": "Telangana", "country_code": "in"},
                },
                {"place_id": 9, "display_name": "broken"},
            ],
        )

    async with _client(handler) as client:
        provider = NominatimGeocodingProvider("https://nominatim.example.org/", "carezone-tests", client=client)
        candidates = await provider.geocode("Hyderabad", "in")

    assert seen["path"] == "/search"
    assert seen["params"]["q"] == "Hyderabad"
    assert seen["params"]["countrycodes"] == "in"
    assert seen["params"]["format"] == "jsonv2"
    assert seen["user_agent"] == "carezone-tests"
    assert len(candidates) == 1
    assert candidates[0].coordinate == Point(17.385, 78.4867)
    assert candidates[0].external_place_id == "123456"
    assert ("state",) in [component.types for component in candidates[0].address_components]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(503, text="maintenance"),
        lambda request: httpx.Response(429, text="slow down"),
        lambda request: httpx.Response(200, text="<html>not json</html>"),
        lambda request: httpx.Response(200, json={"error": "unexpected"}),
    ],
)
async def test_nominatim_failures_are_provider_errors(handler):
    async with _client(handler) as client:
        provider = NominatimGeocodingProvider("https://nominatim.example.org", "tests", client=client)
        with pytest.raises(ProviderError):
            await provider.geocode("Hyderabad", None)


@pytest.mark.asyncio
async def test_transport_timeout_is_timed_out_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    async with _client(handler) as client:
        provider = NominatimGeocodingProvider("https://nominatim.example.org", "tests", client=client)
        with pytest.raises(ProviderError) as excinfo:
            await provider.geocode("Hyderabad", None)

    assert excinfo.value.timed_out


def test_get_provider_selects_by_name():
    assert isinstance(get_provider("nominatim"), NominatimGeocodingProvider)
    assert isinstance(get_provider("google", api_key="k"), GoogleGeocodingProvider)
    with pytest.raises(ValueError):
        get_provider("bing")
