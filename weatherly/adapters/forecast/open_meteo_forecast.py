"""Open-Meteo forecast adapter.

Fetches current conditions and a 7-day daily forecast for the selected
place. Values are passed through verbatim from the provider.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

from ...config import ForecastConfig, get_config
from ...domain.models import (
    CurrentWeather,
    DailyForecast,
    PlaceRecord,
    UnitSystem,
    WeatherReport,
)
from ..http import get_json

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
CURRENT_FIELDS = "temperature_2m,weather_code,wind_speed_10m"
DAILY_FIELDS = "weather_code,temperature_2m_max,temperature_2m_min"


def build_forecast_url(
    latitude: float,
    longitude: float,
    units: UnitSystem | str,
    *,
    forecast_days: int = 7,
    base_url: str = OPEN_METEO_FORECAST_URL,
) -> str:
    """Forecast URL for a position in the given unit system."""
    units = UnitSystem(units)
    params = {
        "latitude": str(latitude),
        "longitude": str(longitude),
        "timezone": "auto",
        "forecast_days": str(forecast_days),
        "current": CURRENT_FIELDS,
        "daily": DAILY_FIELDS,
        "temperature_unit": units.temperature_unit,
        "wind_speed_unit": units.wind_speed_unit,
    }
    return str(httpx.URL(base_url, params=params))


def _at(values: Any, index: int) -> Any:
    if isinstance(values, list) and index < len(values):
        return values[index]
    return None


def parse_forecast(data: Any, place: PlaceRecord, units: UnitSystem) -> WeatherReport:
    """Map an Open-Meteo forecast response onto a WeatherReport."""
    data = data if isinstance(data, Mapping) else {}
    current = data.get("current") or {}
    daily = data.get("daily") or {}

    days = tuple(
        DailyForecast(
            date=str(day),
            max=_at(daily.get("temperature_2m_max"), i),
            min=_at(daily.get("temperature_2m_min"), i),
            weather_code=_at(daily.get("weather_code"), i),
        )
        for i, day in enumerate(daily.get("time") or [])
    )

    return WeatherReport(
        place=place,
        units=units,
        current=CurrentWeather(
            temperature=current.get("temperature_2m"),
            wind_speed=current.get("wind_speed_10m"),
            weather_code=current.get("weather_code"),
        ),
        daily=days,
    )


@dataclass
class OpenMeteoForecastAdapter:
    """Implements ForecastPort against the Open-Meteo forecast API.

    Attributes:
        config: Forecast configuration
        client: Shared HTTP client (a short-lived one is used when None)
    """

    config: ForecastConfig = field(default_factory=lambda: get_config().forecast)
    client: Optional[httpx.AsyncClient] = field(default=None, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def forecast_url(self, place: PlaceRecord, units: UnitSystem) -> str:
        return build_forecast_url(
            place.latitude,
            place.longitude,
            units,
            forecast_days=self.config.forecast_days,
            base_url=self.config.base_url,
        )

    async def fetch(self, place: PlaceRecord, units: UnitSystem) -> WeatherReport:
        """Fetch the forecast for a place.

        Raises:
            NetworkError: On transport failure.
            ProviderError: On a non-success HTTP status.
        """
        url = self.forecast_url(place, units)
        data = await get_json(self.client, url, timeout=self.config.timeout_seconds)
        report = parse_forecast(data, place, units)
        self._logger.debug(
            "Forecast fetched",
            extra={
                "lat": place.latitude,
                "lon": place.longitude,
                "units": units.value,
                "days": len(report.daily),
            },
        )
        return report
