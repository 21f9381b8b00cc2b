from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _null_to_zero(value: Any) -> Any:
    if value is None:
        return 0
    if isinstance(value, list):
        return [0 if item is None else item for item in value]
    return value


class ProviderCurrent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    time: str = ""
    temperature_2m: float = 0.0
    apparent_temperature: float = 0.0
    relative_humidity_2m: int = 0
    wind_speed_10m: float = 0.0
    wind_direction_10m: int = 0
    weather_code: int = 0
    is_day: int = 0
    precipitation: float = 0.0
    cloud_cover: int = 0

    @field_validator(
        "temperature_2m",
        "apparent_temperature",
        "relative_humidity_2m",
        "wind_speed_10m",
        "wind_direction_10m",
        "weather_code",
        "is_day",
        "precipitation",
        "cloud_cover",
        mode="before",
    )
    @classmethod
    def validate_nullable_number(cls, value: Any) -> Any:
        return _null_to_zero(value)

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, value: Any) -> Any:
        return "" if value is None else value


class ProviderHourly(BaseModel):
    """Parallel arrays of the hourly block, positionally indexed."""

    model_config = ConfigDict(extra="ignore")

    time: list[str] = Field(default_factory=list)
    temperature_2m: list[float] = Field(default_factory=list)
    weather_code: list[int] = Field(default_factory=list)
    precipitation_probability: list[int] = Field(default_factory=list)
    is_day: list[int] = Field(default_factory=list)

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return ["" if item is None else item for item in value]
        return value

    @field_validator(
        "temperature_2m",
        "weather_code",
        "precipitation_probability",
        "is_day",
        mode="before",
    )
    @classmethod
    def validate_nullable_series(cls, value: Any) -> Any:
        if value is None:
            return []
        return _null_to_zero(value)


class ProviderResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    current: ProviderCurrent = Field(default_factory=ProviderCurrent)
    hourly: ProviderHourly = Field(default_factory=ProviderHourly)

    @field_validator("current", "hourly", mode="before")
    @classmethod
    def validate_block(cls, value: Any) -> Any:
        return {} if value is None else value


class CurrentConditions(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    temperature: float
    feels_like: float
    humidity: int
    wind_speed: float
    wind_direction: int
    weather_code: int
    is_day: bool
    precipitation: float
    cloud_cover: int
    last_updated: str
    condition: str
    condition_emoji: str


class HourlyForecastEntry(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    time: str
    hour: str
    temperature: float
    weather_code: int
    condition_emoji: str
    precip_prob: int = 0
    is_day: bool = False


class WeatherReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: CurrentConditions
    hourly: list[HourlyForecastEntry] = Field(default_factory=list)
