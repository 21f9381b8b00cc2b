from .weather import WeatherService, build_weather_service

__all__ = ["WeatherService", "build_weather_service"]
