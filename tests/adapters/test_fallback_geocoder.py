"""Tests for the reverse lookup policy (retry, then Nominatim fallback)."""

import asyncio
import time
from collections import Counter

import httpx
import pytest

from weatherly.adapters.geocoding import FallbackGeocoder

PRIMARY_HOST = "geocoding-api.open-meteo.com"
FALLBACK_HOST = "nominatim.openstreetmap.org"

CAMDEN = {"results": [{"name": "Camden Town", "admin1": "England", "country": "GB"}]}
FALLBACK_CITY = {"address": {"city": "FallbackCity", "country": "Testland"}}


class Router:
    """Answers each host from a queue of canned responses."""

    def __init__(self, primary, fallback=None):
        self.primary = list(primary)
        self.fallback = list(fallback or [])
        self.hits = Counter()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.hits[host] += 1
        queue = self.primary if host == PRIMARY_HOST else self.fallback
        answer = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(answer, Exception):
            raise answer
        status, body = answer
        return httpx.Response(status, json=body)


def _geocoder(router, geo_config, make_client):
    client = make_client(router)
    return client, FallbackGeocoder.with_client(client, geo_config)


@pytest.mark.asyncio
async def test_primary_success_skips_fallback(geo_config, make_client):
    router = Router(primary=[(200, CAMDEN)], fallback=[(200, FALLBACK_CITY)])
    client, geocoder = _geocoder(router, geo_config, make_client)
    async with client:
        outcome = await geocoder.reverse_with_diagnostics(51.54, -0.14)

    assert outcome.place.name == "Camden Town"
    assert router.hits == {PRIMARY_HOST: 1}
    assert outcome.diagnostics.provider == "open-meteo"
    assert outcome.diagnostics.label == "Camden Town"


@pytest.mark.asyncio
async def test_empty_primary_retries_once_then_falls_back(geo_config, make_client):
    router = Router(primary=[(200, {"results": []})], fallback=[(200, FALLBACK_CITY)])
    client, geocoder = _geocoder(router, geo_config, make_client)
    async with client:
        place = await geocoder.reverse(10.0, 20.0)

    assert place.name == "FallbackCity"
    assert place.provider == "nominatim"
    assert router.hits[PRIMARY_HOST] == 2
    assert router.hits[FALLBACK_HOST] == 1


@pytest.mark.asyncio
async def test_transport_error_is_retried(geo_config, make_client):
    request = httpx.Request("GET", "https://geocoding-api.open-meteo.com/v1/reverse")
    router = Router(primary=[httpx.ConnectError("down", request=request), (200, CAMDEN)])
    client, geocoder = _geocoder(router, geo_config, make_client)
    async with client:
        place = await geocoder.reverse(51.54, -0.14)

    assert place.name == "Camden Town"
    assert router.hits == {PRIMARY_HOST: 2}


@pytest.mark.asyncio
async def test_http_error_goes_straight_to_fallback(geo_config, make_client):
    router = Router(primary=[(500, {})], fallback=[(200, FALLBACK_CITY)])
    client, geocoder = _geocoder(router, geo_config, make_client)
    async with client:
        place = await geocoder.reverse(10.0, 20.0)

    assert place.name == "FallbackCity"
    assert router.hits[PRIMARY_HOST] == 1


@pytest.mark.asyncio
async def test_everything_empty_returns_none(geo_config, make_client):
    router = Router(primary=[(200, {})], fallback=[(200, {"error": "Unable to geocode"})])
    client, geocoder = _geocoder(router, geo_config, make_client)
    async with client:
        outcome = await geocoder.reverse_with_diagnostics(0.0, 0.0)

    assert outcome.place is None
    assert outcome.diagnostics.provider is None
    assert router.hits[FALLBACK_HOST] == 1


@pytest.mark.asyncio
async def test_fallback_failure_is_absorbed(geo_config, make_client):
    router = Router(primary=[(200, {})], fallback=[(502, {})])
    client, geocoder = _geocoder(router, geo_config, make_client)
    async with client:
        assert await geocoder.reverse(0.0, 0.0) is None


@pytest.mark.asyncio
async def test_diagnostics_record_both_urls(geo_config, make_client):
    router = Router(primary=[(200, CAMDEN)])
    client, geocoder = _geocoder(router, geo_config, make_client)
    async with client:
        outcome = await geocoder.reverse_with_diagnostics(51.54, -0.14)

    diagnostics = outcome.diagnostics
    assert (diagnostics.latitude, diagnostics.longitude) == (51.54, -0.14)
    assert diagnostics.primary_url.startswith("https://geocoding-api.open-meteo.com/v1/reverse?")
    assert diagnostics.fallback_url.startswith("https://nominatim.openstreetmap.org/reverse?")


@pytest.mark.asyncio
async def test_search_delegates_to_primary(geo_config, make_client):
    body = {"results": [{"name": "London", "latitude": 51.5, "longitude": -0.1}]}
    router = Router(primary=[(200, body)])
    client, geocoder = _geocoder(router, geo_config, make_client)
    async with client:
        places = await geocoder.search("London")

    assert [p.name for p in places] == ["London"]


@pytest.mark.asyncio
async def test_retry_waits_configured_delay(geo_config, make_client):
    geo_config.retry_delay_seconds = 0.05
    primary_times = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == PRIMARY_HOST:
            primary_times.append(time.monotonic())
            return httpx.Response(200, json={"results": []})
        return httpx.Response(200, json=FALLBACK_CITY)

    async with make_client(handler) as client:
        geocoder = FallbackGeocoder.with_client(client, geo_config)
        place = await geocoder.reverse(10.0, 20.0)

    assert place.name == "FallbackCity"
    assert len(primary_times) == 2
    assert primary_times[1] - primary_times[0] >= 0.04


@pytest.mark.asyncio
async def test_malformed_primary_coordinates_fall_through(geo_config, make_client):
    malformed = {"results": [{"name": "X", "latitude": "n/a", "longitude": 1.0}]}
    router = Router(primary=[(200, malformed)], fallback=[(200, FALLBACK_CITY)])
    client, geocoder = _geocoder(router, geo_config, make_client)
    async with client:
        place = await geocoder.reverse(10.0, 20.0)

    assert place.name == "FallbackCity"
    assert router.hits[PRIMARY_HOST] == 2


@pytest.mark.asyncio
async def test_concurrent_lookups_keep_their_own_diagnostics(geo_config, make_client):
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("latitude") == "10.0":
            await asyncio.sleep(0.05)
        return httpx.Response(200, json=CAMDEN)

    async with make_client(handler) as client:
        geocoder = FallbackGeocoder.with_client(client, geo_config)
        first, second = await asyncio.gather(
            geocoder.reverse_with_diagnostics(10.0, 1.0),
            geocoder.reverse_with_diagnostics(20.0, 1.0),
        )

    assert first.diagnostics.latitude == 10.0
    assert "latitude=10.0" in first.diagnostics.primary_url
    assert "lat=10.0" in first.diagnostics.fallback_url
    assert second.diagnostics.latitude == 20.0
    assert "latitude=20.0" in second.diagnostics.primary_url
