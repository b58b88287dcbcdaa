"""Domain layer - Core models, errors and pure formatting rules.

This module contains the value objects and typed errors used throughout
the application. No external dependencies.
"""

from .errors import (
    GeolocationError,
    LocationPermissionError,
    LocationTimeoutError,
    LocationUnavailableError,
    NetworkError,
    PreconditionError,
    ProviderError,
    WeatherlyError,
    geolocation_error_for_code,
)
from .formatting import format_place, normalize_label
from .models import (
    PLACEHOLDER_NAME,
    Coordinates,
    CurrentWeather,
    DailyForecast,
    PlaceRecord,
    ResolutionPhase,
    ReverseDiagnostics,
    ReverseOutcome,
    SearchOutcome,
    SelectionState,
    UnitSystem,
    WeatherReport,
    WeatherView,
)
from .weather_codes import code_to_label, code_to_symbol

__all__ = [
    # Models
    "Coordinates",
    "PlaceRecord",
    "PLACEHOLDER_NAME",
    "UnitSystem",
    "CurrentWeather",
    "DailyForecast",
    "WeatherReport",
    "SearchOutcome",
    "ReverseDiagnostics",
    "ReverseOutcome",
    "SelectionState",
    "ResolutionPhase",
    "WeatherView",
    # Formatting
    "format_place",
    "normalize_label",
    "code_to_label",
    "code_to_symbol",
    # Errors
    "WeatherlyError",
    "NetworkError",
    "ProviderError",
    "PreconditionError",
    "GeolocationError",
    "LocationPermissionError",
    "LocationUnavailableError",
    "LocationTimeoutError",
    "geolocation_error_for_code",
]
