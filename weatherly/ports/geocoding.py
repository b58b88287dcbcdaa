"""Geocoding port - Abstraction for forward and reverse place lookups.

This protocol defines the contract the resolution coordinator relies on,
allowing the provider chain (Open-Meteo, Nominatim, fakes in tests) to be
swapped freely.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import PlaceRecord, ReverseOutcome


class GeocoderPort(Protocol):
    """Port for geocoding services.

    Implementation: adapters/geocoding/fallback_geocoder.py
    """

    async def search(self, query: str) -> list[PlaceRecord]:
        """Forward geocode a free-text query.

        Args:
            query: The place name typed by the user (e.g., "Lon").

        Returns:
            Up to a handful of matches; an empty list when nothing matched.

        Raises:
            NetworkError: On transport failure.
            ProviderError: On a non-success HTTP status.
        """
        ...

    async def reverse(self, latitude: float, longitude: float) -> Optional[PlaceRecord]:
        """Reverse geocode coordinates to a place.

        Args:
            latitude: Latitude of the point.
            longitude: Longitude of the point.

        Returns:
            The best place found, or None once every provider is exhausted.
        """
        ...

    async def reverse_with_diagnostics(
        self, latitude: float, longitude: float
    ) -> ReverseOutcome:
        """Reverse geocode and report how this particular lookup went.

        The diagnostics describe this call only.
        """
        ...
