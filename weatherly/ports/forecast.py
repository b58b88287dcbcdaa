"""Forecast port - Abstraction for the weather data provider."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import PlaceRecord, UnitSystem, WeatherReport


class ForecastPort(Protocol):
    """Port for forecast retrieval.

    Implementation: adapters/forecast/open_meteo_forecast.py
    """

    async def fetch(self, place: PlaceRecord, units: UnitSystem) -> WeatherReport:
        """Fetch current conditions and the daily forecast for a place.

        Args:
            place: The selected place (its coordinates are used).
            units: Unit system for temperatures and wind speed.

        Returns:
            WeatherReport attached to ``place``.

        Raises:
            NetworkError: On transport failure.
            ProviderError: On a non-success HTTP status.
        """
        ...
