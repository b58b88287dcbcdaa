"""Pure URL builders for the geocoding providers.

These functions have no side effects, so the same URLs can be requested
by the adapters and shown in the debug panel.
"""

from __future__ import annotations

import httpx

OPEN_METEO_SEARCH_URL = "https://geocoding-api.open-meteo.com/v1/search"
OPEN_METEO_REVERSE_URL = "https://geocoding-api.open-meteo.com/v1/reverse"
NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"

SEARCH_RESULT_COUNT = 5
NOMINATIM_ZOOM = 14


def _build(base_url: str, params: dict[str, str]) -> str:
    return str(httpx.URL(base_url, params=params))


def build_search_url(
    query: str,
    language: str = "en",
    *,
    count: int = SEARCH_RESULT_COUNT,
    base_url: str = OPEN_METEO_SEARCH_URL,
) -> str:
    """Forward search URL for ``query``."""
    return _build(
        base_url,
        {
            "name": query,
            "count": str(count),
            "language": language,
            "format": "json",
        },
    )


def build_reverse_url(
    latitude: float,
    longitude: float,
    language: str = "en",
    *,
    base_url: str = OPEN_METEO_REVERSE_URL,
) -> str:
    """Primary (Open-Meteo) reverse lookup URL."""
    return _build(
        base_url,
        {
            "latitude": str(latitude),
            "longitude": str(longitude),
            "language": language,
            "format": "json",
            "count": "1",
        },
    )


def build_nominatim_reverse_url(
    latitude: float,
    longitude: float,
    language: str = "en",
    *,
    zoom: int = NOMINATIM_ZOOM,
    base_url: str = NOMINATIM_REVERSE_URL,
) -> str:
    """Fallback (Nominatim) reverse lookup URL."""
    return _build(
        base_url,
        {
            "lat": str(latitude),
            "lon": str(longitude),
            "format": "jsonv2",
            "zoom": str(zoom),
            "addressdetails": "1",
            "accept-language": language,
        },
    )
