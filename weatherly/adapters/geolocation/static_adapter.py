"""Position source for surfaces without a platform geolocation API.

The position is either configured up front (console runs, tests) or
reported by the browser for the current request (Gradio app). Platform
error codes reported alongside are turned into typed errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...config import ResolutionConfig, get_config
from ...domain.errors import POSITION_UNAVAILABLE, geolocation_error_for_code
from ...domain.models import Coordinates


@dataclass
class StaticGeolocationAdapter:
    """Implements GeolocationPort with a fixed or reported position.

    Attributes:
        latitude: Reported latitude, None when unknown
        longitude: Reported longitude, None when unknown
        error_code: Platform error code reported instead of a position
        error_message: Platform error message, if any
    """

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    error_code: Optional[int] = None
    error_message: str = ""

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: Optional[ResolutionConfig] = None) -> StaticGeolocationAdapter:
        config = config or get_config().resolution
        return cls(latitude=config.device_latitude, longitude=config.device_longitude)

    async def current_position(self) -> Coordinates:
        """Return the reported position.

        Raises:
            GeolocationError: With the reported code, or code 2 when no
                position is known.
        """
        if self.error_code is not None:
            raise geolocation_error_for_code(self.error_code, self.error_message)
        if self.latitude is None or self.longitude is None:
            self._logger.debug("No device position configured")
            raise geolocation_error_for_code(POSITION_UNAVAILABLE, self.error_message)
        try:
            return Coordinates(self.latitude, self.longitude)
        except ValueError as e:
            raise geolocation_error_for_code(POSITION_UNAVAILABLE, str(e)) from e
