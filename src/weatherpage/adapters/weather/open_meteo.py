from __future__ import annotations

import json
import logging
import time
from http.client import HTTPException
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from pydantic import ValidationError

from ...domain.models import ProviderResponse
from .base import DecodeError, FetchError

LOGGER = logging.getLogger(__name__)

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_FORECAST_HOURS = 24
USER_AGENT = "weatherpage/0.1"
READ_CHUNK_SIZE = 8192

CURRENT_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "precipitation",
    "weather_code",
    "cloud_cover",
    "wind_speed_10m",
    "wind_direction_10m",
    "is_day",
)
HOURLY_FIELDS = (
    "temperature_2m",
    "weather_code",
    "precipitation_probability",
    "is_day",
)


def _read_chunks(response: Any, deadline: float) -> bytes:
    # read1 returns after one socket read.
    read = getattr(response, "read1", response.read)
    chunks: list[bytes] = []
    while True:
        if time.monotonic() > deadline:
            raise FetchError("Timed out fetching weather data from Open-Meteo")
        chunk = read(READ_CHUNK_SIZE)
        if not chunk:
            break
        chunks.append(chunk)
    if time.monotonic() > deadline:
        raise FetchError("Timed out fetching weather data from Open-Meteo")
    return b"".join(chunks)


def _read_body(request: Request, timeout: float) -> bytes:
    deadline = time.monotonic() + timeout
    try:
        with urlopen(request, timeout=timeout) as response:
            status = response.status
            body = _read_chunks(response, deadline)
    except HTTPError as exc:
        raise FetchError(
            f"Open-Meteo returned status {exc.code}",
            status_code=exc.code,
        ) from exc
    except (URLError, TimeoutError, HTTPException, OSError) as exc:
        raise FetchError("Failed to fetch weather data from Open-Meteo") from exc

    if status != 200:
        raise FetchError(f"Open-Meteo returned status {status}", status_code=status)
    return body


def _decode_payload(body: bytes) -> ProviderResponse:
    try:
        payload: Any = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError("Open-Meteo response was not valid JSON") from exc

    if not isinstance(payload, dict):
        raise DecodeError("Unexpected Open-Meteo response shape")

    try:
        return ProviderResponse.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError("Open-Meteo response did not match the expected fields") from exc


class OpenMeteoClient:
    def __init__(
        self,
        latitude: float,
        longitude: float,
        *,
        timezone_name: str,
        forecast_hours: int = DEFAULT_FORECAST_HOURS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        base_url: str = OPEN_METEO_FORECAST_URL,
    ) -> None:
        self._latitude = latitude
        self._longitude = longitude
        self._timezone_name = timezone_name
        self._forecast_hours = forecast_hours
        self._timeout_seconds = timeout_seconds
        self._base_url = base_url

    def build_url(self) -> str:
        params = {
            "latitude": f"{self._latitude:.4f}",
            "longitude": f"{self._longitude:.4f}",
            "current": ",".join(CURRENT_FIELDS),
            "hourly": ",".join(HOURLY_FIELDS),
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
            "precipitation_unit": "inch",
            "timezone": self._timezone_name,
            "forecast_hours": str(self._forecast_hours),
        }
        return f"{self._base_url}?{urlencode(params)}"

    def fetch(self) -> ProviderResponse:
        url = self.build_url()
        LOGGER.debug("Requesting Open-Meteo forecast: %s", url)
        request = Request(url, headers={"User-Agent": USER_AGENT})
        body = _read_body(request, self._timeout_seconds)
        return _decode_payload(body)
