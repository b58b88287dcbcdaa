"""Forecast adapters - Implementations of ForecastPort.

Available implementations:
- OpenMeteoForecastAdapter: Open-Meteo forecast API
"""

from .open_meteo_forecast import OpenMeteoForecastAdapter, build_forecast_url

__all__ = ["OpenMeteoForecastAdapter", "build_forecast_url"]
