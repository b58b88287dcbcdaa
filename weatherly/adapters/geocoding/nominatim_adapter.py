"""Nominatim reverse geocoder adapter.

Fallback reverse lookup used when Open-Meteo cannot name a position:
- Bounded by a hard timeout, the request is cancelled past it
- Identifies itself with the configured User-Agent (Nominatim usage policy)
- Builds the place name from address components by priority
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

from ...config import GeocodingConfig, get_config
from ...domain.errors import NetworkError
from ...domain.models import PROVIDER_NOMINATIM, PlaceRecord
from ..http import get_json
from .urls import build_nominatim_reverse_url

ADDRESS_NAME_KEYS = ("city", "town", "village", "suburb", "neighbourhood")


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_reverse_response(
    data: Any, latitude: float, longitude: float
) -> Optional[PlaceRecord]:
    """Build a PlaceRecord from a Nominatim jsonv2 reverse response.

    Returns None when neither the address nor the response names the place.
    """
    if not isinstance(data, Mapping):
        return None
    address = data.get("address") or {}
    if not isinstance(address, Mapping):
        address = {}

    name = None
    for key in ADDRESS_NAME_KEYS:
        name = _text(address.get(key))
        if name:
            break
    name = name or _text(data.get("display_name")) or _text(data.get("name"))
    if not name:
        return None

    return PlaceRecord(
        name=name,
        latitude=latitude,
        longitude=longitude,
        country=_text(address.get("country")),
        admin1=_text(address.get("state")),
        admin2=_text(address.get("county")),
        provider=PROVIDER_NOMINATIM,
    )


@dataclass
class NominatimReverseAdapter:
    """Nominatim reverse geocoder with a bounded timeout.

    Attributes:
        config: Geocoding configuration
        client: Shared HTTP client (a short-lived one is used when None)
    """

    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)
    client: Optional[httpx.AsyncClient] = field(default=None, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def headers(self) -> dict[str, str]:
        headers = {"User-Agent": self.config.user_agent}
        if self.config.referer:
            headers["Referer"] = self.config.referer
        return headers

    def reverse_url(self, latitude: float, longitude: float) -> str:
        return build_nominatim_reverse_url(
            latitude,
            longitude,
            self.config.effective_language,
            zoom=self.config.fallback_zoom,
            base_url=self.config.fallback_reverse_url,
        )

    async def reverse(self, latitude: float, longitude: float) -> Optional[PlaceRecord]:
        """Reverse geocode coordinates via address lookup.

        Args:
            latitude: Latitude of the point.
            longitude: Longitude of the point.

        Returns:
            Place named from the address, or None if nothing usable came back.

        Raises:
            NetworkError: On transport failure or when the timeout is exceeded.
            ProviderError: On a non-success HTTP status.
        """
        url = self.reverse_url(latitude, longitude)
        timeout = self.config.fallback_timeout_seconds
        try:
            data = await asyncio.wait_for(
                get_json(self.client, url, timeout=timeout, headers=self.headers),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            self._logger.warning(
                "Nominatim reverse timed out",
                extra={"lat": latitude, "lon": longitude, "timeout": timeout},
            )
            raise NetworkError("Fallback reverse lookup timed out", cause=exc, url=url) from exc

        place = parse_reverse_response(data, latitude, longitude)
        if place is None:
            self._logger.debug(
                "Nominatim returned no usable name",
                extra={"lat": latitude, "lon": longitude},
            )
        return place
