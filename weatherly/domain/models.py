"""Domain models for the weather widget.

Value objects (places, coordinates, forecasts, view snapshots) are frozen
dataclasses with slots. SelectionState is the one mutable record: it is
owned and mutated by the resolution coordinator only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Literal, Optional

Provider = Literal["open-meteo", "nominatim"]

PROVIDER_OPEN_METEO: Provider = "open-meteo"
PROVIDER_NOMINATIM: Provider = "nominatim"

PLACEHOLDER_NAME = "My location"


class UnitSystem(str, Enum):
    """Unit system requested from the forecast provider."""

    METRIC = "metric"
    IMPERIAL = "imperial"

    @property
    def temperature_unit(self) -> str:
        return "fahrenheit" if self is UnitSystem.IMPERIAL else "celsius"

    @property
    def wind_speed_unit(self) -> str:
        return "mph" if self is UnitSystem.IMPERIAL else "kmh"

    @property
    def temperature_symbol(self) -> str:
        return "°F" if self is UnitSystem.IMPERIAL else "°C"

    @property
    def wind_speed_label(self) -> str:
        return "mph" if self is UnitSystem.IMPERIAL else "km/h"

    def toggled(self) -> UnitSystem:
        if self is UnitSystem.METRIC:
            return UnitSystem.IMPERIAL
        return UnitSystem.METRIC


class ResolutionPhase(Enum):
    """Conceptual state of the active lookup."""

    IDLE = auto()
    SEARCHING = auto()
    SUGGESTING = auto()
    SELECTED = auto()
    RESOLVING = auto()


@dataclass(frozen=True, slots=True)
class Coordinates:
    """GPS coordinates representing a geographic location."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )


@dataclass(frozen=True, slots=True)
class PlaceRecord:
    """A resolved place, compared structurally.

    Attributes:
        name: Place name as given by the provider (may be empty)
        latitude: Latitude of the place
        longitude: Longitude of the place
        country: Country name or code
        admin1: First-level administrative area (state, region)
        admin2: Second-level administrative area (county, district)
        admin3: Third-level administrative area
        admin4: Fourth-level administrative area
        locality: Neighbourhood or locality within the place
        timezone: IANA timezone name
        provider: Which provider produced the record
    """

    name: str
    latitude: float
    longitude: float
    country: Optional[str] = None
    admin1: Optional[str] = None
    admin2: Optional[str] = None
    admin3: Optional[str] = None
    admin4: Optional[str] = None
    locality: Optional[str] = None
    timezone: Optional[str] = None
    provider: Optional[Provider] = None

    @classmethod
    def placeholder(cls, latitude: float, longitude: float) -> PlaceRecord:
        """Synthesized record used until a real name is known."""
        return cls(name=PLACEHOLDER_NAME, latitude=latitude, longitude=longitude)

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)

    @property
    def has_admin_detail(self) -> bool:
        """Check if any administrative area is known."""
        return any((self.admin1, self.admin2, self.admin3, self.admin4))

    @property
    def is_placeholder(self) -> bool:
        return self.name == PLACEHOLDER_NAME and not self.has_admin_detail

    @property
    def needs_upgrade(self) -> bool:
        """Check if a background reverse lookup could improve the label."""
        return self.is_placeholder or not self.has_admin_detail


@dataclass(frozen=True, slots=True)
class CurrentWeather:
    """Current conditions, passed through verbatim."""

    temperature: Optional[float] = None
    wind_speed: Optional[float] = None
    weather_code: Optional[int] = None


@dataclass(frozen=True, slots=True)
class DailyForecast:
    """One day of the forecast.

    Attributes:
        date: ISO date string as returned by the provider
        max: Daily maximum temperature
        min: Daily minimum temperature
        weather_code: WMO weather code
    """

    date: str
    max: Optional[float] = None
    min: Optional[float] = None
    weather_code: Optional[int] = None


@dataclass(frozen=True, slots=True)
class WeatherReport:
    """Current and daily weather for a place in a unit system."""

    place: PlaceRecord
    units: UnitSystem
    current: CurrentWeather
    daily: tuple[DailyForecast, ...] = field(default_factory=tuple)

    def for_place(self, place: PlaceRecord) -> WeatherReport:
        """Return the same report attached to another place record."""
        return WeatherReport(
            place=place, units=self.units, current=self.current, daily=self.daily
        )


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    """Result of a forward search: places, or the error that prevented them.

    Typeahead callers inspect ``error`` and deliberately ignore it;
    explicit searches turn it into a message.
    """

    places: tuple[PlaceRecord, ...] = field(default_factory=tuple)
    error: Optional[Exception] = None

    @property
    def is_success(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class ReverseDiagnostics:
    """Details of the last reverse lookup, shown in the debug panel."""

    latitude: float
    longitude: float
    primary_url: str
    fallback_url: str
    provider: Optional[Provider] = None
    label: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ReverseOutcome:
    """Result of one reverse lookup together with its own diagnostics."""

    place: Optional[PlaceRecord] = None
    diagnostics: Optional[ReverseDiagnostics] = None


@dataclass
class SelectionState:
    """Mutable selection state owned by the resolution coordinator.

    Attributes:
        selected: The place currently driving the forecast fetch
        query: Live text of the search field
        last_applied_label: Label the coordinator last wrote into ``query``
        user_edited: True once ``query`` diverges from ``last_applied_label``
        pending_reverse: Coordinates of an in-flight label upgrade
    """

    selected: Optional[PlaceRecord] = None
    query: str = ""
    last_applied_label: Optional[str] = None
    user_edited: bool = False
    pending_reverse: Optional[Coordinates] = None


@dataclass(frozen=True, slots=True)
class WeatherView:
    """Snapshot of everything the presentation surface renders."""

    query: str = ""
    suggestions: tuple[PlaceRecord, ...] = field(default_factory=tuple)
    selected: Optional[PlaceRecord] = None
    weather: Optional[WeatherReport] = None
    units: UnitSystem = UnitSystem.METRIC
    phase: ResolutionPhase = ResolutionPhase.IDLE
    loading: bool = False
    resolving: bool = False
    error: Optional[str] = None
    from_geolocation: bool = False
    show_debug: bool = False
    diagnostics: Optional[ReverseDiagnostics] = None
