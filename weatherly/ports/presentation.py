"""Presentation port - Abstraction for the surface that renders state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import WeatherView


class PresentationPort(Protocol):
    """Port for rendering the widget.

    Implementation: adapters/presentation/markdown_renderer.py
    """

    def render(self, view: WeatherView) -> None:
        """Render a state snapshot published by the coordinator."""
        ...
