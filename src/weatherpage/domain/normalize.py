from __future__ import annotations

import re
from datetime import datetime

from .conditions import condition_for
from .models import (
    CurrentConditions,
    HourlyForecastEntry,
    ProviderCurrent,
    ProviderHourly,
    ProviderResponse,
    WeatherReport,
)

PROVIDER_TIME_FORMAT = "%Y-%m-%dT%H:%M"
PROVIDER_TIME_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")


def format_hour_label(raw_time: str) -> str:
    """Turn ``2024-03-15T15:00`` into ``3 PM``; unparsable input is returned as-is."""
    # strptime alone accepts unpadded fields such as ``2024-3-5T3:00``.
    if not isinstance(raw_time, str) or PROVIDER_TIME_PATTERN.fullmatch(raw_time) is None:
        return raw_time
    try:
        parsed = datetime.strptime(raw_time, PROVIDER_TIME_FORMAT)
    except (TypeError, ValueError):
        return raw_time
    hour = parsed.hour % 12 or 12
    meridiem = "AM" if parsed.hour < 12 else "PM"
    return f"{hour} {meridiem}"


def normalize_current(current: ProviderCurrent) -> CurrentConditions:
    is_day = current.is_day == 1
    condition = condition_for(current.weather_code, is_day)
    return CurrentConditions(
        temperature=current.temperature_2m,
        feels_like=current.apparent_temperature,
        humidity=current.relative_humidity_2m,
        wind_speed=current.wind_speed_10m,
        wind_direction=current.wind_direction_10m,
        weather_code=current.weather_code,
        is_day=is_day,
        precipitation=current.precipitation,
        cloud_cover=current.cloud_cover,
        last_updated=current.time,
        condition=condition.label,
        condition_emoji=condition.icon,
    )


def normalize_hourly(hourly: ProviderHourly) -> list[HourlyForecastEntry]:
    temperatures = hourly.temperature_2m
    weather_codes = hourly.weather_code
    day_flags = hourly.is_day
    precip_probs = hourly.precipitation_probability

    entries: list[HourlyForecastEntry] = []
    for index, raw_time in enumerate(hourly.time):
        # Temperature and weather code are required for a usable entry.
        if index >= len(temperatures) or index >= len(weather_codes):
            break

        is_day = index < len(day_flags) and day_flags[index] == 1
        precip_prob = precip_probs[index] if index < len(precip_probs) else 0
        weather_code = weather_codes[index]

        entries.append(
            HourlyForecastEntry(
                time=raw_time,
                hour=format_hour_label(raw_time),
                temperature=temperatures[index],
                weather_code=weather_code,
                condition_emoji=condition_for(weather_code, is_day).icon,
                precip_prob=precip_prob,
                is_day=is_day,
            )
        )
    return entries


def normalize(response: ProviderResponse) -> WeatherReport:
    return WeatherReport(
        current=normalize_current(response.current),
        hourly=normalize_hourly(response.hourly),
    )
