"""Centralized configuration using Pydantic Settings.

This module is the single source of truth for provider endpoints, timing
constants and logging options used across the widget.

Configuration can be overridden via environment variables:
- WEATHERLY_GEO_LANGUAGE=fr
- WEATHERLY_GEO_RETRY_DELAY_SECONDS=0.5
- WEATHERLY_FORECAST_DEFAULT_UNITS=imperial
- WEATHERLY_UI_DEBOUNCE_SECONDS=0.4
- WEATHERLY_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

import locale
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeocodingConfig(BaseSettings):
    """Forward and reverse geocoding configuration.

    Environment variables prefixed with WEATHERLY_GEO_.
    """

    model_config = SettingsConfigDict(env_prefix="WEATHERLY_GEO_")

    search_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    reverse_url: str = "https://geocoding-api.open-meteo.com/v1/reverse"
    fallback_reverse_url: str = "https://nominatim.openstreetmap.org/reverse"
    language: Optional[str] = None
    result_count: int = 5
    retry_delay_seconds: float = 0.2
    request_timeout_seconds: float = 10.0
    fallback_timeout_seconds: float = 6.0
    fallback_zoom: int = 14
    user_agent: str = "weatherly/0.1"
    referer: Optional[str] = None

    @property
    def effective_language(self) -> str:
        """Configured language, else the process locale, else English."""
        if self.language:
            return self.language
        try:
            code = locale.getlocale()[0]
        except ValueError:
            code = None
        if code and len(code) >= 2 and code[:2].isalpha():
            return code[:2].lower()
        return "en"


class ForecastConfig(BaseSettings):
    """Forecast provider configuration.

    Environment variables prefixed with WEATHERLY_FORECAST_.
    """

    model_config = SettingsConfigDict(env_prefix="WEATHERLY_FORECAST_")

    base_url: str = "https://api.open-meteo.com/v1/forecast"
    forecast_days: int = 7
    timeout_seconds: float = 10.0
    default_units: Literal["metric", "imperial"] = "metric"


class ResolutionConfig(BaseSettings):
    """Search box and geolocation behaviour.

    Environment variables prefixed with WEATHERLY_UI_.
    """

    model_config = SettingsConfigDict(env_prefix="WEATHERLY_UI_")

    debounce_seconds: float = 0.25
    secure_context: bool = True
    hostname: str = "localhost"
    # Position reported by the static geolocation source (console / tests)
    device_latitude: Optional[float] = None
    device_longitude: Optional[float] = None


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with WEATHERLY_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="WEATHERLY_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.geocoding.search_url)
        print(config.resolution.debounce_seconds)

    Environment variables prefixed with WEATHERLY_.
    """

    model_config = SettingsConfigDict(env_prefix="WEATHERLY_")

    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    forecast: ForecastConfig = Field(default_factory=ForecastConfig)
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()
