"""Geolocation port - Abstraction for the device position source."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import Coordinates


class GeolocationPort(Protocol):
    """Port for obtaining the device position.

    Implementations:
    - adapters/geolocation/static_adapter.py (configured or browser-reported position)
    """

    async def current_position(self) -> Coordinates:
        """Return the current device position.

        Raises:
            GeolocationError: With the platform code (1 denied,
                2 unavailable, 3 timeout).
        """
        ...
