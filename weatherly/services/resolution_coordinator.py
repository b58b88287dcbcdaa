"""Resolution coordinator - owns the selection state of the widget.

Every user intent and every resolved lookup goes through one named
transition on this class. Async work (typeahead search, forecast fetch,
background reverse upgrade) is stamped with a token from the scheduler and
its result is dropped when a newer request has replaced it by the time it
resolves.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional, Set, Union

from ..config import ResolutionConfig, get_config
from ..domain.errors import (
    GeolocationError,
    LocationPermissionError,
    LocationTimeoutError,
    LocationUnavailableError,
    PreconditionError,
    WeatherlyError,
)
from ..domain.formatting import format_place, normalize_label
from ..domain.models import (
    PlaceRecord,
    ResolutionPhase,
    ReverseDiagnostics,
    SearchOutcome,
    SelectionState,
    UnitSystem,
    WeatherReport,
    WeatherView,
)
from ..ports.forecast import ForecastPort
from ..ports.geocoding import GeocoderPort
from ..ports.geolocation import GeolocationPort
from ..ports.presentation import PresentationPort
from .scheduler import TaskScheduler

SEARCH_KEY = "search"
FORECAST_KEY = "forecast"
REVERSE_KEY = "reverse"

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "[::1]"})

PERMISSION_DENIED_MESSAGE = (
    "Location permission denied. Allow location access or search for a city instead."
)
POSITION_UNAVAILABLE_MESSAGE = (
    "Location unavailable. Check your GPS or network connection."
)
TIMEOUT_MESSAGE = "Location request timed out. Try again or search for a city."
GEOLOCATION_FAILED_MESSAGE = "Unable to get your location."
INSECURE_CONTEXT_MESSAGE = (
    "Location requires a secure (HTTPS) connection. Search for a city instead."
)
SEARCH_FAILED_MESSAGE = "Failed to search location"
NO_MATCHES_MESSAGE = "No matching places found"
FORECAST_FAILED_MESSAGE = "Failed to fetch weather"


def is_loopback_host(hostname: Optional[str]) -> bool:
    """Check if ``hostname`` names the local machine."""
    if not hostname:
        return False
    host = hostname.strip().lower()
    if host.startswith("[") and "]" in host:
        host = host[: host.index("]") + 1]
    elif host.count(":") == 1:
        host = host.split(":", 1)[0]
    return host in LOOPBACK_HOSTS or host.endswith(".localhost")


def describe_geolocation_error(error: GeolocationError) -> str:
    """User-facing message for a geolocation failure."""
    if isinstance(error, LocationPermissionError):
        return PERMISSION_DENIED_MESSAGE
    if isinstance(error, LocationUnavailableError):
        return POSITION_UNAVAILABLE_MESSAGE
    if isinstance(error, LocationTimeoutError):
        return TIMEOUT_MESSAGE
    return GEOLOCATION_FAILED_MESSAGE


def _same_position(a: PlaceRecord, b: PlaceRecord) -> bool:
    return a.latitude == b.latitude and a.longitude == b.longitude


@dataclass
class ResolutionCoordinator:
    """State machine turning user intents into a selected place and forecast.

    Phases: IDLE -> SEARCHING -> SUGGESTING -> SELECTED -> (RESOLVING) -> SELECTED.

    Attributes:
        geocoder: Forward and reverse geocoding
        forecast: Forecast provider, called on every selection change
        geolocation: Device position source
        presenter: Surface receiving a WeatherView after each transition
        config: Debounce and secure-context settings
        units: Unit system used for forecast fetches
        state: Selection state, mutated only by this class
    """

    geocoder: GeocoderPort
    forecast: ForecastPort
    geolocation: Optional[GeolocationPort] = None
    presenter: Optional[PresentationPort] = None
    config: ResolutionConfig = field(default_factory=lambda: get_config().resolution)
    units: UnitSystem = UnitSystem.METRIC
    state: SelectionState = field(default_factory=SelectionState)
    scheduler: TaskScheduler = field(default_factory=TaskScheduler, repr=False)

    _suggestions: tuple[PlaceRecord, ...] = field(default=(), init=False, repr=False)
    _weather: Optional[WeatherReport] = field(default=None, init=False, repr=False)
    _phase: ResolutionPhase = field(default=ResolutionPhase.IDLE, init=False)
    _busy: Set[str] = field(default_factory=set, init=False, repr=False)
    _resolving: bool = field(default=False, init=False, repr=False)
    _error: Optional[str] = field(default=None, init=False, repr=False)
    _from_geolocation: bool = field(default=False, init=False, repr=False)
    _show_debug: bool = field(default=False, init=False, repr=False)
    _diagnostics: Optional[ReverseDiagnostics] = field(default=None, init=False, repr=False)
    _selection_id: int = field(default=0, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.units = UnitSystem(self.units)

    # ------------------------------------------------------------------ view

    @property
    def view(self) -> WeatherView:
        """Immutable snapshot of the current widget state."""
        return WeatherView(
            query=self.state.query,
            suggestions=self._suggestions,
            selected=self.state.selected,
            weather=self._weather,
            units=self.units,
            phase=self._phase,
            loading=bool(self._busy),
            resolving=self._resolving,
            error=self._error,
            from_geolocation=self._from_geolocation,
            show_debug=self._show_debug,
            diagnostics=self._diagnostics,
        )

    @property
    def phase(self) -> ResolutionPhase:
        return self._phase

    def _publish(self) -> None:
        if self.presenter is not None:
            self.presenter.render(self.view)

    def _settled_phase(self) -> ResolutionPhase:
        if self._resolving:
            return ResolutionPhase.RESOLVING
        if self.state.selected is not None:
            return ResolutionPhase.SELECTED
        return ResolutionPhase.IDLE

    # ------------------------------------------------------------ text input

    def on_text_input(self, text: str) -> None:
        """Handle a keystroke in the search field.

        Recomputes ``user_edited`` against the baseline label and restarts
        the debounce timer for the typeahead search.
        """
        self.state.query = text
        self.state.user_edited = normalize_label(text) != normalize_label(
            self.state.last_applied_label
        )

        query = text.strip()
        selected = self.state.selected
        if not query or (selected is not None and query == format_place(selected)):
            self.scheduler.cancel(SEARCH_KEY)
            self._suggestions = ()
            self._phase = self._settled_phase()
            self._publish()
            return

        self.scheduler.schedule(
            SEARCH_KEY,
            self.config.debounce_seconds,
            lambda token: self._run_typeahead(token, query),
        )
        self._publish()

    async def _search(self, query: str) -> SearchOutcome:
        try:
            places = await self.geocoder.search(query)
        except WeatherlyError as e:
            return SearchOutcome(error=e)
        except Exception as e:
            self._logger.exception("Unexpected error while searching", extra={"query": query})
            return SearchOutcome(error=e)
        return SearchOutcome(places=tuple(places))

    async def _run_typeahead(self, token: int, query: str) -> None:
        if not self.scheduler.is_current(SEARCH_KEY, token):
            return
        self._phase = ResolutionPhase.SEARCHING
        self._publish()

        outcome = await self._search(query)
        if (
            not self.scheduler.is_current(SEARCH_KEY, token)
            or self.state.query.strip() != query
        ):
            self._logger.debug("Discarding stale suggestions", extra={"query": query})
            return

        if outcome.error is not None:
            # Typeahead failures only mean no suggestions are shown
            self._logger.debug(
                "Typeahead search failed",
                extra={"query": query, "error": str(outcome.error)},
            )
            self._suggestions = ()
        else:
            self._suggestions = tuple(
                place for place in outcome.places if format_place(place) != query
            )

        if self._suggestions:
            self._phase = ResolutionPhase.SUGGESTING
        else:
            self._phase = self._settled_phase()
        self._publish()

    async def submit_search(self) -> Optional[PlaceRecord]:
        """Search the current query right away and select the top match."""
        query = self.state.query.strip()
        if not query:
            return None

        self.scheduler.cancel(SEARCH_KEY)
        token = self.scheduler.next_token(SEARCH_KEY)
        self._busy.add(SEARCH_KEY)
        self._error = None
        self._phase = ResolutionPhase.SEARCHING
        self._publish()

        outcome = await self._search(query)
        self._busy.discard(SEARCH_KEY)
        if not self.scheduler.is_current(SEARCH_KEY, token):
            return None

        if outcome.error is not None:
            self._logger.warning(
                "Search failed",
                extra={"query": query, "error": str(outcome.error)},
            )
            self._error = SEARCH_FAILED_MESSAGE
        elif not outcome.places:
            self._error = NO_MATCHES_MESSAGE
        else:
            top = outcome.places[0]
            self.choose_suggestion(top)
            return top

        self._phase = self._settled_phase()
        self._publish()
        return None

    # ------------------------------------------------------------- selection

    def choose_suggestion(
        self, choice: Union[PlaceRecord, int]
    ) -> Optional[asyncio.Task[None]]:
        """Make a suggestion the active selection.

        Args:
            choice: The place itself or its index in the current suggestions.

        Returns:
            The forecast fetch task started for the new selection.
        """
        if isinstance(choice, int):
            try:
                place = self._suggestions[choice]
            except IndexError:
                self._logger.warning("Unknown suggestion index", extra={"index": choice})
                return None
        else:
            place = choice

        self.scheduler.cancel(SEARCH_KEY)
        label = format_place(place)
        self.state.query = label
        self.state.last_applied_label = label
        self.state.user_edited = False
        self._suggestions = ()
        self._from_geolocation = False
        self._error = None
        return self._select(place)

    def _select(self, place: PlaceRecord) -> Optional[asyncio.Task[None]]:
        self.state.selected = place
        self._selection_id += 1
        self._phase = self._settled_phase()
        self._logger.info(
            "Selection changed",
            extra={
                "place": place.name,
                "lat": place.latitude,
                "lon": place.longitude,
                "provider": place.provider,
            },
        )
        return self._start_forecast()

    # -------------------------------------------------------------- forecast

    def _start_forecast(self) -> Optional[asyncio.Task[None]]:
        place = self.state.selected
        if place is None:
            self._publish()
            return None

        token = self.scheduler.next_token(FORECAST_KEY)
        units = self.units
        report = self._weather
        if report is not None and report.units == units and _same_position(report.place, place):
            # Same coordinates and units: keep the report on screen, relabel it
            self._weather = report.for_place(place)
        else:
            self._busy.add(FORECAST_KEY)
        self._publish()
        return self.scheduler.spawn(self._fetch_forecast(token, place, units))

    async def _fetch_forecast(self, token: int, place: PlaceRecord, units: UnitSystem) -> None:
        try:
            report = await self.forecast.fetch(place, units)
        except WeatherlyError as e:
            if not self.scheduler.is_current(FORECAST_KEY, token):
                return
            self._logger.warning(
                "Forecast fetch failed",
                extra={"lat": place.latitude, "lon": place.longitude, "error": str(e)},
            )
            self._error = FORECAST_FAILED_MESSAGE
        except Exception:
            if not self.scheduler.is_current(FORECAST_KEY, token):
                return
            self._logger.exception("Unexpected error while fetching the forecast")
            self._error = FORECAST_FAILED_MESSAGE
        else:
            if not self.scheduler.is_current(FORECAST_KEY, token):
                self._logger.debug(
                    "Discarding stale forecast",
                    extra={"lat": place.latitude, "lon": place.longitude},
                )
                return
            self._weather = report
        self._busy.discard(FORECAST_KEY)
        self._publish()

    def set_units(self, units: Union[UnitSystem, str]) -> Optional[asyncio.Task[None]]:
        """Switch unit system and re-fetch the forecast for the selection."""
        units = UnitSystem(units)
        if units == self.units:
            return None
        self.units = units
        return self._start_forecast()

    def toggle_units(self) -> Optional[asyncio.Task[None]]:
        return self.set_units(self.units.toggled())

    # ----------------------------------------------------------- geolocation

    def _is_secure_context(
        self, secure_context: Optional[bool], hostname: Optional[str]
    ) -> bool:
        secure = self.config.secure_context if secure_context is None else secure_context
        host = self.config.hostname if hostname is None else hostname
        return secure or is_loopback_host(host)

    async def _reverse(self, latitude: float, longitude: float) -> Optional[PlaceRecord]:
        try:
            outcome = await self.geocoder.reverse_with_diagnostics(latitude, longitude)
        except WeatherlyError as e:
            self._logger.warning("Reverse lookup failed", extra={"error": str(e)})
            return None
        except Exception:
            self._logger.exception("Unexpected error during reverse lookup")
            return None
        if outcome.diagnostics is not None:
            self._diagnostics = outcome.diagnostics
        return outcome.place

    async def use_my_location(
        self,
        *,
        secure_context: Optional[bool] = None,
        hostname: Optional[str] = None,
    ) -> Optional[PlaceRecord]:
        """Select the device position, named as well as currently possible.

        Args:
            secure_context: Whether the page is served over HTTPS
                (defaults to the configuration).
            hostname: Host the page is served from (defaults to the configuration).

        Returns:
            The selected record (possibly the "My location" placeholder),
            or None when no position could be obtained.
        """
        if not self._is_secure_context(secure_context, hostname):
            error = PreconditionError(
                INSECURE_CONTEXT_MESSAGE, hostname=hostname or self.config.hostname
            )
            self._logger.info("Geolocation refused", extra={"hostname": error.hostname})
            self._error = error.message
            self._publish()
            return None

        if self.geolocation is None:
            self._error = GEOLOCATION_FAILED_MESSAGE
            self._publish()
            return None

        # A new request replaces any pending upgrade
        token = self.scheduler.next_token(REVERSE_KEY)
        self.state.pending_reverse = None
        self._resolving = False
        self._error = None
        self._busy.add(REVERSE_KEY)
        self._publish()

        try:
            position = await self.geolocation.current_position()
        except GeolocationError as e:
            if self.scheduler.is_current(REVERSE_KEY, token):
                self._busy.discard(REVERSE_KEY)
                self._error = describe_geolocation_error(e)
                self._logger.info("Geolocation failed", extra={"code": e.code})
                self._phase = self._settled_phase()
                self._publish()
            return None

        place = await self._reverse(position.latitude, position.longitude)
        if not self.scheduler.is_current(REVERSE_KEY, token):
            return None
        self._busy.discard(REVERSE_KEY)
        if place is None:
            place = PlaceRecord.placeholder(position.latitude, position.longitude)

        self.scheduler.cancel(SEARCH_KEY)
        self._suggestions = ()
        if place.needs_upgrade:
            self.state.pending_reverse = position
            self._resolving = True
        self._select(place)

        label = format_place(place)
        self.state.query = label
        self.state.last_applied_label = label
        self.state.user_edited = False
        self._from_geolocation = True

        if self._resolving:
            self.scheduler.spawn(
                self._upgrade_pending_reverse(token, self._selection_id)
            )
        self._publish()
        return place

    async def _upgrade_pending_reverse(self, token: int, selection_id: int) -> None:
        """Best-effort upgrade of a placeholder or thin label."""
        pending = self.state.pending_reverse
        try:
            if pending is None:
                return
            place = await self._reverse(pending.latitude, pending.longitude)
            if not self.scheduler.is_current(REVERSE_KEY, token):
                self._logger.debug("Discarding superseded reverse upgrade")
                return
            if place is None:
                return
            if self._selection_id != selection_id:
                self._logger.debug(
                    "Selection moved on, dropping reverse upgrade",
                    extra={"place": place.name},
                )
                return

            baseline_intact = not self.state.user_edited or normalize_label(
                self.state.query
            ) == normalize_label(self.state.last_applied_label)
            self._select(place)
            if baseline_intact:
                label = format_place(place)
                self.state.query = label
                self.state.last_applied_label = label
                self.state.user_edited = False
            else:
                self._logger.debug(
                    "Keeping user-edited query",
                    extra={"query": self.state.query},
                )
        finally:
            if self.scheduler.is_current(REVERSE_KEY, token):
                self.state.pending_reverse = None
                self._resolving = False
                if self._phase is ResolutionPhase.RESOLVING:
                    self._phase = self._settled_phase()
                self._publish()

    # ----------------------------------------------------------------- misc

    def toggle_debug(self) -> bool:
        """Show or hide the reverse lookup diagnostics."""
        self._show_debug = not self._show_debug
        self._publish()
        return self._show_debug

    def clear_error(self) -> None:
        self._error = None
        self._publish()

    async def drain(self) -> None:
        """Wait for every outstanding timer, lookup and fetch to settle."""
        await self.scheduler.drain()

    def close(self) -> None:
        """Cancel outstanding work (end of session)."""
        self.scheduler.cancel_all()
