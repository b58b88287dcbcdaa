"""Geolocation adapters - Implementations of GeolocationPort.

Available implementations:
- StaticGeolocationAdapter: configured or browser-reported position
"""

from .static_adapter import StaticGeolocationAdapter

__all__ = ["StaticGeolocationAdapter"]
