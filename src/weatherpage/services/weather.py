from __future__ import annotations

import logging

from ..adapters.weather import OpenMeteoClient, WeatherProvider
from ..domain.models import WeatherReport
from ..domain.normalize import normalize
from ..settings import AppSettings

LOGGER = logging.getLogger(__name__)


class WeatherService:
    """Fetches and normalizes a fresh report on every call."""

    def __init__(self, provider: WeatherProvider) -> None:
        self._provider = provider

    def get_report(self) -> WeatherReport:
        response = self._provider.fetch()
        report = normalize(response)
        LOGGER.debug(
            "Weather report built with %d hourly entries (%d timestamps received)",
            len(report.hourly),
            len(response.hourly.time),
        )
        return report


def _build_provider(settings: AppSettings) -> OpenMeteoClient:
    provider = settings.yaml.weather.provider
    if provider != "open_meteo":
        raise ValueError(f"Unsupported weather provider: {provider}")
    location = settings.yaml.location
    weather = settings.yaml.weather
    return OpenMeteoClient(
        location.latitude,
        location.longitude,
        timezone_name=location.timezone,
        forecast_hours=weather.forecast_hours,
        timeout_seconds=weather.timeout_seconds,
        base_url=weather.base_url,
    )


def build_weather_service(settings: AppSettings) -> WeatherService:
    return WeatherService(_build_provider(settings))
