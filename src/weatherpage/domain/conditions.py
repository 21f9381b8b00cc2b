"""WMO weather code lookup and wind direction formatting."""

from __future__ import annotations

import math
from typing import NamedTuple


class Condition(NamedTuple):
    label: str
    icon: str


class _ConditionRow(NamedTuple):
    label: str
    day_icon: str
    night_icon: str


UNKNOWN_CONDITION = Condition("Unknown", "❓")


def _row(label: str, day_icon: str, night_icon: str | None = None) -> _ConditionRow:
    return _ConditionRow(label, day_icon, night_icon if night_icon is not None else day_icon)


def _expand(groups: dict[tuple[int, ...], _ConditionRow]) -> dict[int, _ConditionRow]:
    table: dict[int, _ConditionRow] = {}
    for codes, row in groups.items():
        for code in codes:
            table[code] = row
    return table


# Only codes 0 and 1 have a distinct night icon.
CONDITIONS: dict[int, _ConditionRow] = _expand(
    {
        (0,): _row("Clear sky", "☀️", "🌙"),
        (1,): _row("Mainly clear", "🌤️", "🌙"),
        (2,): _row("Partly cloudy", "⛅"),
        (3,): _row("Overcast", "☁️"),
        (45, 48): _row("Foggy", "🌫️"),
        (51, 53, 55): _row("Drizzle", "🌧️"),
        (56, 57): _row("Freezing drizzle", "🌧️❄️"),
        (61, 63, 65): _row("Rain", "🌧️"),
        (66, 67): _row("Freezing rain", "🌧️❄️"),
        (71, 73, 75): _row("Snow", "🌨️"),
        (77,): _row("Snow grains", "🌨️"),
        (80, 81, 82): _row("Rain showers", "🌦️"),
        (85, 86): _row("Snow showers", "🌨️"),
        (95,): _row("Thunderstorm", "⛈️"),
        (96, 99): _row("Thunderstorm with hail", "⛈️"),
    }
)

COMPASS_POINTS = (
    "N",
    "NNE",
    "NE",
    "ENE",
    "E",
    "ESE",
    "SE",
    "SSE",
    "S",
    "SSW",
    "SW",
    "WSW",
    "W",
    "WNW",
    "NW",
    "NNW",
)


def condition_for(code: int, is_day: bool) -> Condition:
    """Return the display label and icon for a provider weather code.

    Unmapped codes resolve to ``UNKNOWN_CONDITION``.
    """
    row = CONDITIONS.get(code)
    if row is None:
        return UNKNOWN_CONDITION
    return Condition(row.label, row.day_icon if is_day else row.night_icon)


def wind_direction_to_compass(degrees: int) -> str:
    index = math.floor(degrees / 22.5 + 0.5) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index]
