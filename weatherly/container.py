"""Dependency injection container.

Wires the provider adapters to their ports and hands out one
ResolutionCoordinator per UI session. Adapters are built lazily on first
resolve; registration and resolution are guarded by a lock because Gradio
runs handlers from several threads.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, TypeVar

from .config import AppConfig, get_config

T = TypeVar("T")


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        coordinator = container.resolve(ResolutionCoordinator)

        # Testing
        container = Container()
        container.register(GeocoderPort, lambda: FakeGeocoder())
        geocoder = container.resolve(GeocoderPort)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        with self._lock:
            self._factories[port_type] = factory
            if singleton:
                self._singleton_types.add(port_type)
            else:
                self._singleton_types.discard(port_type)
            self._singletons.pop(port_type, None)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._factories

    def clear_all(self) -> None:
        """Clear all registrations and singletons."""
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default production bindings.

        Adapters are singletons shared by every session; the coordinator
        is registered per call since each session owns its own state.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        from .adapters.forecast import OpenMeteoForecastAdapter
        from .adapters.geocoding import FallbackGeocoder
        from .adapters.geolocation import StaticGeolocationAdapter
        from .adapters.presentation import MarkdownPresenter
        from .domain.models import UnitSystem
        from .ports.forecast import ForecastPort
        from .ports.geocoding import GeocoderPort
        from .ports.geolocation import GeolocationPort
        from .ports.presentation import PresentationPort
        from .services import ResolutionCoordinator

        config = config or get_config()
        container = cls(config=config)

        # Providers
        container.register(
            GeocoderPort,
            lambda: FallbackGeocoder(config.geocoding),
        )
        container.register(
            ForecastPort,
            lambda: OpenMeteoForecastAdapter(config.forecast),
        )
        container.register(
            GeolocationPort,
            lambda: StaticGeolocationAdapter.from_config(config.resolution),
        )

        # Each session renders into its own presenter
        container.register(PresentationPort, MarkdownPresenter, singleton=False)

        def create_coordinator() -> ResolutionCoordinator:
            return ResolutionCoordinator(
                geocoder=container.resolve(GeocoderPort),
                forecast=container.resolve(ForecastPort),
                geolocation=container.resolve(GeolocationPort),
                presenter=container.resolve(PresentationPort),
                config=config.resolution,
                units=UnitSystem(config.forecast.default_units),
            )

        container.register(ResolutionCoordinator, create_coordinator, singleton=False)

        return container


# Global default container (lazy initialized)
_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get the default application container.

    Returns:
        The default Container instance (creates one if needed).
    """
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Reset the default container.

    Call this in tests to ensure a fresh container.
    """
    global _default_container
    with _container_lock:
        if _default_container is not None:
            _default_container.clear_all()
        _default_container = None
