from .backend import BackendWeatherClient, parse_weather_record
from .base import WeatherClient, WeatherClientError

__all__ = ["WeatherClient", "WeatherClientError", "BackendWeatherClient", "parse_weather_record"]
