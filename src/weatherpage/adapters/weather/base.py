from __future__ import annotations

from typing import Protocol

from ...domain.models import ProviderResponse


class WeatherAdapterError(RuntimeError):
    """Raised when a weather provider request cannot be completed."""


class FetchError(WeatherAdapterError):
    """Raised on transport failures, timeouts and non-success HTTP statuses."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(WeatherAdapterError):
    """Raised when the provider body is not the expected JSON payload."""


class WeatherProvider(Protocol):
    def fetch(self) -> ProviderResponse:
        """Fetch the raw forecast payload for the configured location."""
