"""Tests for the HTML page and JSON API routes."""

import sqlite3
from email.message import Message
from urllib.error import HTTPError

import pytest
from fastapi.testclient import TestClient

from weatherpage import main
from weatherpage.adapters.weather import DecodeError, OpenMeteoClient
from weatherpage.adapters.weather import open_meteo
from weatherpage.main import API_ERROR_MESSAGE, PAGE_ERROR_MESSAGE, create_app
from weatherpage.services.weather import WeatherService
from weatherpage.storage.db import open_db


@pytest.fixture
def client(settings, weather_service):
    with TestClient(create_app(settings=settings, weather_service=weather_service)) as test_client:
        yield test_client


@pytest.fixture
def failing_client(settings, failing_provider):
    service = WeatherService(failing_provider)
    with TestClient(create_app(settings=settings, weather_service=service)) as test_client:
        yield test_client


class TestWeatherPage:
    def test_renders_current_conditions_and_hourly(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        body = response.text
        assert "Brooklyn, NY" in body
        assert "weather.test" in body
        assert "Partly cloudy" in body
        assert "54&deg;F" in body
        assert "9 mph SW" in body
        assert "3 PM" in body
        assert "12 AM" in body
        assert body.count('class="hourly-item') == 24
        assert PAGE_ERROR_MESSAGE not in body

    def test_fetch_error_renders_inline_message(self, failing_client: TestClient):
        response = failing_client.get("/")

        assert response.status_code == 200
        assert PAGE_ERROR_MESSAGE in response.text
        assert 'class="current"' not in response.text
        assert 'class="hourly"' not in response.text

    def test_decode_error_renders_inline_message(self, client: TestClient, stub_provider):
        stub_provider.error = DecodeError("Open-Meteo response was not valid JSON")

        response = client.get("/")

        assert response.status_code == 200
        assert PAGE_ERROR_MESSAGE in response.text

    def test_fetches_once_per_request(self, client: TestClient, stub_provider):
        client.get("/")
        client.get("/")

        assert stub_provider.calls == 2

    def test_counts_page_views(self, client: TestClient, settings):
        client.get("/")
        response = client.get("/")

        assert "2 views" in response.text
        with open_db(settings.db_path) as connection:
            row = connection.execute("SELECT count FROM page_views WHERE path = '/'").fetchone()
        assert row["count"] == 2

    def test_page_renders_when_page_view_write_fails(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ):
        def locked(db_path, path):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(main, "record_page_view", locked)

        response = client.get("/")

        assert response.status_code == 200
        assert "Partly cloudy" in response.text
        assert "views" not in response.text

    def test_serves_stylesheet(self, client: TestClient):
        response = client.get("/static/weather.css")

        assert response.status_code == 200
        assert "hourly-list" in response.text


class TestWeatherApi:
    def test_returns_report_json(self, client: TestClient):
        response = client.get("/api/weather")

        assert response.status_code == 200
        payload = response.json()
        assert payload["current"] == {
            "temperature": 54.3,
            "feelsLike": 50.1,
            "humidity": 61,
            "windSpeed": 9.4,
            "windDirection": 225,
            "weatherCode": 2,
            "isDay": True,
            "precipitation": 0.0,
            "cloudCover": 48,
            "lastUpdated": "2024-03-15T15:00",
            "condition": "Partly cloudy",
            "conditionEmoji": "⛅",
        }
        assert len(payload["hourly"]) == 24
        assert payload["hourly"][0] == {
            "time": "2024-03-15T15:00",
            "hour": "3 PM",
            "temperature": 52.0,
            "weatherCode": 3,
            "conditionEmoji": "☁️",
            "precipProb": 0,
            "isDay": True,
        }

    def test_fetch_error_returns_503(self, failing_client: TestClient):
        response = failing_client.get("/api/weather")

        assert response.status_code == 503
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == API_ERROR_MESSAGE

    def test_decode_error_returns_503(self, client: TestClient, stub_provider):
        stub_provider.error = DecodeError("Unexpected Open-Meteo response shape")

        response = client.get("/api/weather")

        assert response.status_code == 503
        assert response.text == API_ERROR_MESSAGE


class TestProviderFailuresEndToEnd:
    @pytest.fixture
    def open_meteo_client(self, settings, monkeypatch: pytest.MonkeyPatch):
        client = OpenMeteoClient(
            settings.yaml.location.latitude,
            settings.yaml.location.longitude,
            timezone_name=settings.yaml.location.timezone,
        )
        service = WeatherService(client)
        with TestClient(create_app(settings=settings, weather_service=service)) as test_client:
            yield test_client

    def _patch_urlopen(self, monkeypatch: pytest.MonkeyPatch, handler) -> None:
        monkeypatch.setattr(open_meteo, "urlopen", handler)

    def test_status_500_from_provider(self, open_meteo_client: TestClient, monkeypatch):
        def handler(request, timeout):
            raise HTTPError(request.full_url, 500, "Internal Server Error", Message(), None)

        self._patch_urlopen(monkeypatch, handler)

        page = open_meteo_client.get("/")
        api = open_meteo_client.get("/api/weather")

        assert page.status_code == 200
        assert PAGE_ERROR_MESSAGE in page.text
        assert 'class="current"' not in page.text
        assert api.status_code == 503

    def test_empty_body_from_provider(self, open_meteo_client: TestClient, monkeypatch):
        class EmptyResponse:
            status = 200

            def read(self):
                return b""

            def __enter__(self):
                return self

            def __exit__(self, *exc_info):
                return None

        self._patch_urlopen(monkeypatch, lambda request, timeout: EmptyResponse())

        page = open_meteo_client.get("/")
        api = open_meteo_client.get("/api/weather")

        assert page.status_code == 200
        assert PAGE_ERROR_MESSAGE in page.text
        assert api.status_code == 503
        assert api.text == API_ERROR_MESSAGE


class TestHealth:
    def test_health_reports_status(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "ok"
        assert payload["service"] == "weatherpage"
        assert payload["environment"] == "test"
        assert payload["location"] == "Brooklyn, NY"
