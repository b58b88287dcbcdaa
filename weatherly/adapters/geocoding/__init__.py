"""Geocoding adapters - Implementations of GeocoderPort.

Available implementations:
- FallbackGeocoder: Open-Meteo with a Nominatim reverse fallback
- OpenMeteoGeocoderAdapter: Open-Meteo search and single reverse attempt
- NominatimReverseAdapter: OpenStreetMap Nominatim reverse lookup
"""

from .fallback_geocoder import FallbackGeocoder
from .nominatim_adapter import NominatimReverseAdapter
from .open_meteo_adapter import OpenMeteoGeocoderAdapter
from .urls import build_nominatim_reverse_url, build_reverse_url, build_search_url

__all__ = [
    "FallbackGeocoder",
    "OpenMeteoGeocoderAdapter",
    "NominatimReverseAdapter",
    "build_search_url",
    "build_reverse_url",
    "build_nominatim_reverse_url",
]
