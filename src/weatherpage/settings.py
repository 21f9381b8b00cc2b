from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .adapters.weather.open_meteo import (
    DEFAULT_FORECAST_HOURS,
    DEFAULT_TIMEOUT_SECONDS,
    OPEN_METEO_FORECAST_URL,
)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class UiSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = "Weather"


class LocationSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    label: str = "Brooklyn, NY"
    latitude: float = Field(default=40.6782, ge=-90, le=90)
    longitude: float = Field(default=-73.9442, ge=-180, le=180)
    timezone: str = "America/New_York"

    @field_validator("label")
    @classmethod
    def validate_label(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("location.label must not be empty")
        return text

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value


class WeatherSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    provider: Literal["open_meteo"] = "open_meteo"
    forecast_hours: int = Field(default=DEFAULT_FORECAST_HOURS, ge=1, le=168)
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=1, le=60)
    base_url: str = OPEN_METEO_FORECAST_URL

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        text = value.strip()
        parsed = urlparse(text)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("weather.base_url must be an absolute http(s) URL")
        return text


class WeatherPageYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ui: UiSettings = Field(default_factory=UiSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    weather: WeatherSettings = Field(default_factory=WeatherSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    weatherpage_env: Literal["dev", "test", "prod"] = "dev"
    weatherpage_config_path: Path = Path("config/weatherpage.yaml")
    weatherpage_db_path: Path = Path("data/weatherpage.db")
    weatherpage_hostname: str = "localhost"
    weatherpage_host: str = "0.0.0.0"
    weatherpage_port: int = Field(default=8000, ge=1, le=65535)
    weatherpage_log_level: Literal["debug", "info", "warning", "error"] = "info"

    @field_validator("weatherpage_log_level", mode="before")
    @classmethod
    def validate_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class AppSettings(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    env: EnvSettings
    yaml: WeatherPageYamlSettings
    project_root: Path
    config_path: Path
    db_path: Path
    timezone: ZoneInfo


def _resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def _load_yaml_settings(path: Path) -> WeatherPageYamlSettings:
    if not path.exists():
        raise FileNotFoundError(f"Weather page config file not found: {path}")

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Weather page config must be a YAML mapping/object at the top level")
    return WeatherPageYamlSettings.model_validate(raw_config)


def build_settings(env: EnvSettings, yaml_settings: WeatherPageYamlSettings) -> AppSettings:
    return AppSettings(
        env=env,
        yaml=yaml_settings,
        project_root=PROJECT_ROOT,
        config_path=_resolve_project_path(env.weatherpage_config_path),
        db_path=_resolve_project_path(env.weatherpage_db_path),
        timezone=ZoneInfo(yaml_settings.location.timezone),
    )


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    env = EnvSettings()
    config_path = _resolve_project_path(env.weatherpage_config_path)
    yaml_settings = _load_yaml_settings(config_path)
    return build_settings(env, yaml_settings)
