"""Geocode client combining Open-Meteo with a Nominatim fallback.

Reverse lookup policy:
1. Query Open-Meteo. A transport failure is retried once after a short delay.
2. A non-success status skips the retry and goes to the fallback.
3. An empty result set is retried once, then goes to the fallback.
4. Nominatim is queried with a bounded timeout.
5. If both providers come back empty or fail, the answer is None.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from ...config import GeocodingConfig, get_config
from ...domain.errors import NetworkError, ProviderError
from ...domain.models import PlaceRecord, ReverseDiagnostics, ReverseOutcome
from .nominatim_adapter import NominatimReverseAdapter
from .open_meteo_adapter import OpenMeteoGeocoderAdapter

PRIMARY_ATTEMPTS = 2


@dataclass
class FallbackGeocoder:
    """Implements GeocoderPort over a primary and a fallback provider.

    Attributes:
        config: Geocoding configuration
        primary: Open-Meteo adapter (search and reverse)
        fallback: Nominatim adapter (reverse only)
    """

    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)
    primary: Optional[OpenMeteoGeocoderAdapter] = None
    fallback: Optional[NominatimReverseAdapter] = None

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if self.primary is None:
            self.primary = OpenMeteoGeocoderAdapter(self.config)
        if self.fallback is None:
            self.fallback = NominatimReverseAdapter(self.config)

    @classmethod
    def with_client(
        cls, client: httpx.AsyncClient, config: Optional[GeocodingConfig] = None
    ) -> FallbackGeocoder:
        """Build both adapters around one shared HTTP client."""
        config = config or get_config().geocoding
        return cls(
            config=config,
            primary=OpenMeteoGeocoderAdapter(config, client),
            fallback=NominatimReverseAdapter(config, client),
        )

    async def search(self, query: str) -> list[PlaceRecord]:
        """Forward geocode through the primary provider.

        Raises:
            NetworkError: On transport failure.
            ProviderError: On a non-success HTTP status.
        """
        assert self.primary is not None
        return await self.primary.search(query)

    async def reverse(self, latitude: float, longitude: float) -> Optional[PlaceRecord]:
        """Resolve coordinates to a place, trying every provider in turn.

        Returns:
            The first place found, or None when all providers are exhausted.
        """
        outcome = await self.reverse_with_diagnostics(latitude, longitude)
        return outcome.place

    async def reverse_with_diagnostics(
        self, latitude: float, longitude: float
    ) -> ReverseOutcome:
        """Same lookup as reverse(), with the URLs and provider it used."""
        assert self.primary is not None and self.fallback is not None
        primary_url = self.primary.reverse_url(latitude, longitude)
        fallback_url = self.fallback.reverse_url(latitude, longitude)

        place = await self._reverse_primary(latitude, longitude)
        if place is None:
            place = await self._reverse_fallback(latitude, longitude)
        if place is None:
            self._logger.info(
                "Reverse lookup exhausted all providers",
                extra={"lat": latitude, "lon": longitude},
            )

        diagnostics = ReverseDiagnostics(
            latitude=latitude,
            longitude=longitude,
            primary_url=primary_url,
            fallback_url=fallback_url,
            provider=place.provider if place is not None else None,
            label=place.name if place is not None else None,
        )
        return ReverseOutcome(place=place, diagnostics=diagnostics)

    async def _reverse_primary(
        self, latitude: float, longitude: float
    ) -> Optional[PlaceRecord]:
        assert self.primary is not None
        for attempt in range(1, PRIMARY_ATTEMPTS + 1):
            try:
                place = await self.primary.reverse_once(latitude, longitude)
            except ProviderError as e:
                self._logger.warning(
                    "Primary reverse rejected",
                    extra={"status_code": e.status_code, "attempt": attempt},
                )
                return None
            except NetworkError as e:
                self._logger.warning(
                    "Primary reverse transport error",
                    extra={"error": str(e), "attempt": attempt},
                )
            else:
                if place is not None:
                    return place
                self._logger.debug(
                    "Primary reverse returned no results",
                    extra={"attempt": attempt},
                )

            if attempt < PRIMARY_ATTEMPTS:
                await asyncio.sleep(self.config.retry_delay_seconds)
        return None

    async def _reverse_fallback(
        self, latitude: float, longitude: float
    ) -> Optional[PlaceRecord]:
        assert self.fallback is not None
        try:
            return await self.fallback.reverse(latitude, longitude)
        except (NetworkError, ProviderError) as e:
            self._logger.warning(
                "Fallback reverse failed",
                extra={"lat": latitude, "lon": longitude, "error": str(e)},
            )
            return None
