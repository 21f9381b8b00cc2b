"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from weatherpage.adapters.weather import FetchError, WeatherAdapterError
from weatherpage.domain.models import ProviderResponse
from weatherpage.services.weather import WeatherService
from weatherpage.settings import (
    AppSettings,
    EnvSettings,
    WeatherPageYamlSettings,
    build_settings,
)

FIXTURE_DIR = Path(__file__).parent / "fixtures"


class StubProvider:
    """Returns a canned payload, or raises the configured error."""

    def __init__(
        self,
        response: ProviderResponse | None = None,
        error: WeatherAdapterError | None = None,
    ) -> None:
        self.response = response
        self.error = error
        self.calls = 0

    def fetch(self) -> ProviderResponse:
        self.calls += 1
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


@pytest.fixture
def forecast_payload() -> dict[str, Any]:
    """Return a decoded Open-Meteo forecast for Brooklyn."""
    with open(FIXTURE_DIR / "open_meteo_forecast.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def provider_response(forecast_payload: dict[str, Any]) -> ProviderResponse:
    return ProviderResponse.model_validate(forecast_payload)


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    env = EnvSettings(
        _env_file=None,
        weatherpage_env="test",
        weatherpage_db_path=tmp_path / "weatherpage.db",
        weatherpage_hostname="weather.test",
    )
    return build_settings(env, WeatherPageYamlSettings())


@pytest.fixture
def stub_provider(provider_response: ProviderResponse) -> StubProvider:
    return StubProvider(response=provider_response)


@pytest.fixture
def failing_provider() -> StubProvider:
    return StubProvider(error=FetchError("Open-Meteo returned status 500", status_code=500))


@pytest.fixture
def weather_service(stub_provider: StubProvider) -> WeatherService:
    return WeatherService(stub_provider)
