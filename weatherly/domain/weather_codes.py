"""WMO weather code lookup tables."""

from __future__ import annotations

from typing import Optional

UNKNOWN_LABEL = "Unknown"
UNKNOWN_SYMBOL = "❔"

WEATHER_CODE_LABELS: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Drizzle: Light",
    53: "Drizzle: Moderate",
    55: "Drizzle: Dense",
    61: "Rain: Slight",
    63: "Rain: Moderate",
    65: "Rain: Heavy",
    71: "Snow fall: Slight",
    73: "Snow fall: Moderate",
    75: "Snow fall: Heavy",
    80: "Rain showers: Slight",
    81: "Rain showers: Moderate",
    82: "Rain showers: Violent",
    95: "Thunderstorm",
}

WEATHER_CODE_SYMBOLS: dict[int, str] = {
    0: "☀️",
    1: "🌤️",
    2: "⛅",
    3: "☁️",
    45: "🌫️",
    48: "🌫️",
    51: "🌦️",
    53: "🌦️",
    55: "🌦️",
    61: "🌧️",
    63: "🌧️",
    65: "🌧️",
    71: "🌨️",
    73: "🌨️",
    75: "❄️",
    80: "🌦️",
    81: "🌧️",
    82: "⛈️",
    95: "⛈️",
}


def code_to_label(code: Optional[int]) -> str:
    if code is None:
        return UNKNOWN_LABEL
    return WEATHER_CODE_LABELS.get(int(code), UNKNOWN_LABEL)


def code_to_symbol(code: Optional[int]) -> str:
    if code is None:
        return UNKNOWN_SYMBOL
    return WEATHER_CODE_SYMBOLS.get(int(code), UNKNOWN_SYMBOL)
