"""Open-Meteo geocoding adapter.

Wraps the Open-Meteo geocoding API with:
- Forward search (name -> up to five places)
- A single reverse lookup attempt; retries and fallback live in
  FallbackGeocoder
- Configuration injection and logging
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

from ...config import GeocodingConfig, get_config
from ...domain.models import PROVIDER_OPEN_METEO, PlaceRecord
from ..http import get_json
from .urls import build_reverse_url, build_search_url


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _first_named(entries: Any) -> Optional[str]:
    if not isinstance(entries, list):
        return None
    for entry in entries:
        if isinstance(entry, Mapping):
            name = _text(entry.get("name"))
            if name:
                return name
    return None


def derive_locality(result: Mapping[str, Any]) -> Optional[str]:
    """Pick a locality: explicit field, then informative, then administrative names."""
    explicit = _text(result.get("locality"))
    if explicit:
        return explicit
    info = result.get("localityInfo")
    if not isinstance(info, Mapping):
        return None
    return _first_named(info.get("informative")) or _first_named(
        info.get("administrative")
    )


def parse_place(
    result: Mapping[str, Any],
    *,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    with_locality: bool = False,
) -> Optional[PlaceRecord]:
    """Build a PlaceRecord from one Open-Meteo result entry.

    Coordinates missing from the entry fall back to the requested ones.
    Returns None when the entry carries no usable coordinates.
    """
    lat = result.get("latitude", latitude)
    lon = result.get("longitude", longitude)
    if lat is None or lon is None:
        return None
    try:
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError):
        return None

    locality = derive_locality(result) if with_locality else _text(result.get("locality"))
    name = _text(result.get("name")) or locality or ""

    return PlaceRecord(
        name=name,
        latitude=lat,
        longitude=lon,
        country=_text(result.get("country")),
        admin1=_text(result.get("admin1")),
        admin2=_text(result.get("admin2")),
        admin3=_text(result.get("admin3")),
        admin4=_text(result.get("admin4")),
        locality=locality,
        timezone=_text(result.get("timezone")),
        provider=PROVIDER_OPEN_METEO,
    )


def _results(data: Any) -> list[Mapping[str, Any]]:
    if not isinstance(data, Mapping):
        return []
    results = data.get("results") or []
    if not isinstance(results, list):
        return []
    return [r for r in results if isinstance(r, Mapping)]


@dataclass
class OpenMeteoGeocoderAdapter:
    """Open-Meteo forward search and primary reverse lookup.

    Attributes:
        config: Geocoding configuration
        client: Shared HTTP client (a short-lived one is used when None)
    """

    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)
    client: Optional[httpx.AsyncClient] = field(default=None, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def search_url(self, query: str) -> str:
        return build_search_url(
            query,
            self.config.effective_language,
            count=self.config.result_count,
            base_url=self.config.search_url,
        )

    def reverse_url(self, latitude: float, longitude: float) -> str:
        return build_reverse_url(
            latitude,
            longitude,
            self.config.effective_language,
            base_url=self.config.reverse_url,
        )

    async def search(self, query: str) -> list[PlaceRecord]:
        """Forward geocode a query.

        Args:
            query: Raw text typed by the user.

        Returns:
            Matching places, empty when the provider found nothing.

        Raises:
            NetworkError: On transport failure.
            ProviderError: On a non-success HTTP status.
        """
        url = self.search_url(query)
        data = await get_json(
            self.client, url, timeout=self.config.request_timeout_seconds
        )
        places = [
            place
            for place in (parse_place(result) for result in _results(data))
            if place is not None
        ]
        self._logger.debug(
            "Search completed",
            extra={"query": query, "results": len(places)},
        )
        return places

    async def reverse_once(
        self, latitude: float, longitude: float
    ) -> Optional[PlaceRecord]:
        """Single reverse lookup attempt against Open-Meteo.

        Returns:
            The first result, or None when the result set is empty.

        Raises:
            NetworkError: On transport failure.
            ProviderError: On a non-success HTTP status.
        """
        url = self.reverse_url(latitude, longitude)
        data = await get_json(
            self.client, url, timeout=self.config.request_timeout_seconds
        )
        for result in _results(data):
            place = parse_place(
                result, latitude=latitude, longitude=longitude, with_locality=True
            )
            if place is not None:
                return place
        return None
