from .base import DecodeError, FetchError, WeatherAdapterError, WeatherProvider
from .open_meteo import OpenMeteoClient

__all__ = [
    "DecodeError",
    "FetchError",
    "OpenMeteoClient",
    "WeatherAdapterError",
    "WeatherProvider",
]
