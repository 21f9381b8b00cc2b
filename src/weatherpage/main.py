from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .adapters.weather import WeatherAdapterError
from .domain.conditions import wind_direction_to_compass
from .services.weather import WeatherService, build_weather_service
from .settings import AppSettings, load_settings
from .storage.db import initialize_database, record_page_view

LOGGER = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
WEB_DIR = BASE_DIR / "web"
TEMPLATES_DIR = WEB_DIR / "templates"
STATIC_DIR = WEB_DIR / "static"

PAGE_ERROR_MESSAGE = "Unable to fetch weather data. Please try again later."
API_ERROR_MESSAGE = "Unable to fetch weather"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["wind_dir"] = wind_direction_to_compass


def _get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _get_weather_service(request: Request) -> WeatherService:
    return request.app.state.weather_service


def create_app(
    settings: AppSettings | None = None,
    weather_service: WeatherService | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(application: FastAPI):
        app_settings = settings or load_settings()
        initialize_database(app_settings.db_path)
        application.state.settings = app_settings
        application.state.weather_service = weather_service or build_weather_service(app_settings)
        application.state.started_at_utc = datetime.now(timezone.utc)
        LOGGER.info(
            "Serving weather for %s (%s)",
            app_settings.yaml.location.label,
            app_settings.env.weatherpage_env,
        )
        yield

    application = FastAPI(title="Weather Page", version="0.1.0", lifespan=lifespan)
    application.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @application.get("/", response_class=HTMLResponse)
    def weather_page(request: Request) -> HTMLResponse:
        app_settings = _get_settings(request)
        context: dict[str, Any] = {
            "title": app_settings.yaml.ui.title,
            "hostname": app_settings.env.weatherpage_hostname,
            "location_label": app_settings.yaml.location.label,
            "now": datetime.now(app_settings.timezone).isoformat(timespec="seconds"),
            "weather": None,
            "hourly": [],
            "error": None,
        }

        try:
            report = _get_weather_service(request).get_report()
        except WeatherAdapterError:
            LOGGER.exception("Fetching weather failed")
            context["error"] = PAGE_ERROR_MESSAGE
        else:
            context["weather"] = report.current
            context["hourly"] = report.hourly

        try:
            context["page_views"] = record_page_view(app_settings.db_path, request.url.path)
        except sqlite3.Error:
            LOGGER.exception("Recording page view failed")
            context["page_views"] = None
        return templates.TemplateResponse(request, "weather.html", context)

    @application.get("/api/weather")
    def weather_api(request: Request) -> Response:
        try:
            report = _get_weather_service(request).get_report()
        except WeatherAdapterError:
            LOGGER.exception("Fetching weather failed")
            return PlainTextResponse(API_ERROR_MESSAGE, status_code=503)
        return JSONResponse(report.model_dump(mode="json", by_alias=True))

    @application.get("/health", response_class=JSONResponse)
    def health(request: Request) -> JSONResponse:
        app_settings = _get_settings(request)
        return JSONResponse(
            {
                "status": "ok",
                "service": "weatherpage",
                "environment": app_settings.env.weatherpage_env,
                "location": app_settings.yaml.location.label,
                "started_at_utc": request.app.state.started_at_utc.isoformat(),
                "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            }
        )

    return application


app = create_app()
