from .mapper import WeatherViewModel, build_icon_url, convert_temperature, map_weather
from .view import NoticeBoard, ScreenModel, WeatherView

__all__ = [
    "NoticeBoard",
    "ScreenModel",
    "WeatherView",
    "WeatherViewModel",
    "build_icon_url",
    "convert_temperature",
    "map_weather",
]
