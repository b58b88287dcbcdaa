"""Markdown rendering of the widget state.

The Gradio app displays these sections directly; tests read them to check
what the user would see.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from ...domain.formatting import format_place
from ...domain.models import WeatherView
from ...domain.weather_codes import code_to_label, code_to_symbol

TITLE = "Weatherly"
EMPTY_HINT = "Search for a city or use your location."


def _round(value: Optional[float]) -> str:
    if value is None:
        return "–"
    return str(math.floor(float(value) + 0.5))


def _day_label(value: str) -> str:
    try:
        return date.fromisoformat(value).strftime("%a, %b %d")
    except ValueError:
        return value


def render_status(view: WeatherView) -> str:
    lines = []
    if view.error:
        lines.append(f"⚠️ {view.error}")
    if view.loading:
        lines.append("⏳ Loading…")
    if view.resolving:
        lines.append("📍 Resolving your location…")
    return "\n\n".join(lines)


def suggestion_labels(view: WeatherView) -> list[str]:
    return [format_place(place) for place in view.suggestions]


def render_current(view: WeatherView) -> str:
    lines = ["### Current"]
    report = view.weather
    if report is None:
        if not view.loading:
            lines.append(EMPTY_HINT)
        return "\n\n".join(lines)

    units = report.units
    current = report.current
    lines.append(format_place(report.place))
    lines.append(
        f"**{_round(current.temperature)}{units.temperature_symbol}** "
        f"{code_to_symbol(current.weather_code)}"
    )
    lines.append(
        f"{code_to_label(current.weather_code)} · wind "
        f"{_round(current.wind_speed)} {units.wind_speed_label}"
    )
    return "\n\n".join(lines)


def render_forecast(view: WeatherView) -> str:
    lines = ["### 7-day forecast"]
    report = view.weather
    if report is None:
        return lines[0]
    symbol = report.units.temperature_symbol
    for day in report.daily:
        lines.append(
            f"- {_day_label(day.date)} · {code_to_symbol(day.weather_code)} "
            f"{code_to_label(day.weather_code)} · "
            f"{_round(day.min)}° / {_round(day.max)}{symbol}"
        )
    return "\n".join(lines)


def render_debug(view: WeatherView) -> str:
    if not view.show_debug:
        return ""
    lines = ["### Debug"]
    if view.selected is not None:
        lines.append(f"- Selected: {format_place(view.selected)}")
    diagnostics = view.diagnostics
    if diagnostics is None:
        lines.append("- No reverse lookup yet")
        return "\n".join(lines)
    lines.append(f"- Coordinates: {diagnostics.latitude}, {diagnostics.longitude}")
    lines.append(f"- Primary reverse: `{diagnostics.primary_url}`")
    lines.append(f"- Fallback reverse: `{diagnostics.fallback_url}`")
    lines.append(f"- Provider: {diagnostics.provider or 'none'}")
    if diagnostics.label:
        lines.append(f"- Resolved name: {diagnostics.label}")
    return "\n".join(lines)


def render_markdown(view: WeatherView) -> str:
    """Render the whole widget as one Markdown document."""
    sections = [f"## {TITLE}", f"Units: {view.units.temperature_symbol}, {view.units.wind_speed_label}"]
    status = render_status(view)
    if status:
        sections.append(status)
    labels = suggestion_labels(view)
    if labels:
        sections.append("\n".join(f"{i}. {label}" for i, label in enumerate(labels, 1)))
    sections.append(render_current(view))
    sections.append(render_forecast(view))
    debug = render_debug(view)
    if debug:
        sections.append(debug)
    return "\n\n".join(sections)


@dataclass
class MarkdownPresenter:
    """Implements PresentationPort by keeping the latest rendered Markdown.

    Attributes:
        on_render: Optional callback receiving each rendered document
    """

    on_render: Optional[Callable[[str], None]] = None
    last_view: Optional[WeatherView] = field(default=None, init=False)
    document: str = field(default="", init=False)
    renders: int = field(default=0, init=False)

    def render(self, view: WeatherView) -> None:
        self.last_view = view
        self.document = render_markdown(view)
        self.renders += 1
        if self.on_render is not None:
            self.on_render(self.document)
