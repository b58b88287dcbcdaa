"""Shared fixtures and in-memory port implementations."""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, List, Optional, Union

import httpx
import pytest

from weatherly.config import GeocodingConfig, ResolutionConfig, reset_config
from weatherly.container import reset_container
from weatherly.domain.errors import WeatherlyError
from weatherly.domain.models import (
    Coordinates,
    CurrentWeather,
    DailyForecast,
    PlaceRecord,
    ReverseOutcome,
    UnitSystem,
    WeatherReport,
    WeatherView,
)

LONDON = PlaceRecord(
    name="London",
    latitude=51.5,
    longitude=-0.1,
    country="GB",
    admin1="England",
    provider="open-meteo",
)
PARIS = PlaceRecord(
    name="Paris",
    latitude=48.8,
    longitude=2.3,
    country="FR",
    admin1="Ile-de-France",
    timezone="Europe/Paris",
    provider="open-meteo",
)


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    for name in ("WEATHERLY_GEO_LANGUAGE", "WEATHERLY_UI_DEBOUNCE_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()


@pytest.fixture
def geo_config() -> GeocodingConfig:
    return GeocodingConfig(
        language="en",
        retry_delay_seconds=0,
        fallback_timeout_seconds=0.5,
    )


@pytest.fixture
def ui_config() -> ResolutionConfig:
    return ResolutionConfig(
        debounce_seconds=0,
        secure_context=True,
        hostname="weather.example.com",
    )


Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_client() -> Callable[[Handler], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def _make(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


class FakeGeocoder:
    """GeocoderPort returning canned results, optionally blocked on events."""

    def __init__(
        self,
        search_results: Optional[Dict[str, List[PlaceRecord]]] = None,
        reverse_results: Optional[List[Optional[PlaceRecord]]] = None,
        search_error: Optional[WeatherlyError] = None,
    ) -> None:
        self.search_results = search_results or {}
        self.reverse_results = list(reverse_results or [])
        self.search_error = search_error
        self.search_calls: List[str] = []
        self.reverse_calls: List[tuple] = []
        self.search_gates: Dict[str, asyncio.Event] = {}
        self.reverse_gates: Dict[int, asyncio.Event] = {}

    async def search(self, query: str) -> List[PlaceRecord]:
        self.search_calls.append(query)
        gate = self.search_gates.get(query)
        if gate is not None:
            await gate.wait()
        if self.search_error is not None:
            raise self.search_error
        return list(self.search_results.get(query, []))

    async def reverse(self, latitude: float, longitude: float) -> Optional[PlaceRecord]:
        self.reverse_calls.append((latitude, longitude))
        call = len(self.reverse_calls)
        gate = self.reverse_gates.get(call)
        if gate is not None:
            await gate.wait()
        if call <= len(self.reverse_results):
            return self.reverse_results[call - 1]
        return None

    async def reverse_with_diagnostics(
        self, latitude: float, longitude: float
    ) -> ReverseOutcome:
        return ReverseOutcome(place=await self.reverse(latitude, longitude))


class FakeForecast:
    """ForecastPort recording calls; per-place gates delay the answer."""

    def __init__(self, error: Optional[WeatherlyError] = None) -> None:
        self.error = error
        self.calls: List[tuple] = []
        self.gates: Dict[str, asyncio.Event] = {}

    async def fetch(self, place: PlaceRecord, units: UnitSystem) -> WeatherReport:
        self.calls.append((place, units))
        gate = self.gates.get(place.name)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error
        return WeatherReport(
            place=place,
            units=units,
            current=CurrentWeather(temperature=20.0, wind_speed=10.0, weather_code=0),
            daily=(DailyForecast(date="2025-09-20", max=22.0, min=15.0, weather_code=0),),
        )


class FakeGeolocation:
    """GeolocationPort returning a fixed position or raising an error."""

    def __init__(
        self, position: Union[Coordinates, WeatherlyError, None] = None
    ) -> None:
        self.position = position or Coordinates(51.5, -0.1)
        self.calls = 0

    async def current_position(self) -> Coordinates:
        self.calls += 1
        if isinstance(self.position, Exception):
            raise self.position
        return self.position


class RecordingPresenter:
    """PresentationPort keeping every published view."""

    def __init__(self) -> None:
        self.views: List[WeatherView] = []

    def render(self, view: WeatherView) -> None:
        self.views.append(view)

    @property
    def last(self) -> WeatherView:
        return self.views[-1]
