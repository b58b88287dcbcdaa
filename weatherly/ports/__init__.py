"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the resolution coordinator and
external adapters. They enable dependency injection and make the
coordinator testable with in-memory fakes.
"""

from .forecast import ForecastPort
from .geocoding import GeocoderPort
from .geolocation import GeolocationPort
from .presentation import PresentationPort

__all__ = [
    "GeocoderPort",
    "ForecastPort",
    "GeolocationPort",
    "PresentationPort",
]
