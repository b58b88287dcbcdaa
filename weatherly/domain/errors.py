"""Typed domain errors for the weather widget.

Adapters raise these errors; the resolution coordinator converts them
into user-facing messages. The "no result" outcome (an empty list or
None) is never represented by an error.

All errors inherit from WeatherlyError and can optionally wrap a root
cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class WeatherlyError(Exception):
    """Base error for the weather widget.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class NetworkError(WeatherlyError):
    """Transport-level failure (connection refused, DNS, timeout).

    Attributes:
        url: The URL that could not be reached
    """

    url: str = ""


@dataclass
class ProviderError(WeatherlyError):
    """The provider answered with a non-success status or an unreadable body.

    Attributes:
        url: The URL that was requested
        status_code: HTTP status code, None when the body was the problem
    """

    url: str = ""
    status_code: Optional[int] = None


@dataclass
class PreconditionError(WeatherlyError):
    """Geolocation attempted outside a secure context.

    Attributes:
        hostname: Host the widget is served from
    """

    hostname: str = ""


@dataclass
class GeolocationError(WeatherlyError):
    """The platform could not provide a position.

    Attributes:
        code: Platform error code (1 denied, 2 unavailable, 3 timeout)
    """

    code: int = 0


@dataclass
class LocationPermissionError(GeolocationError):
    """The user denied access to their location."""

    code: int = 1


@dataclass
class LocationUnavailableError(GeolocationError):
    """No position could be determined."""

    code: int = 2


@dataclass
class LocationTimeoutError(GeolocationError):
    """The position request took too long."""

    code: int = 3


PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3


def geolocation_error_for_code(code: int, message: str = "") -> GeolocationError:
    """Build the typed geolocation error for a platform error code."""
    if code == PERMISSION_DENIED:
        return LocationPermissionError(message or "Permission denied")
    if code == POSITION_UNAVAILABLE:
        return LocationUnavailableError(message or "Position unavailable")
    if code == TIMEOUT:
        return LocationTimeoutError(message or "Timeout expired")
    return GeolocationError(message or "Geolocation failed", code=code)
