from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ..domain.models import UnitPreference, WeatherRecord

ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{icon}.png"


class WeatherViewModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    location_label: str
    name: str
    country: str | None = None
    unit: UnitPreference
    temperature: float
    temperature_display: str
    description: str | None = None
    icon_url: str | None = None
    wind_speed_display: str | None = None
    clouds_display: str | None = None
    pressure_display: str | None = None


def convert_temperature(celsius: float, unit: UnitPreference) -> float:
    if unit is UnitPreference.FAHRENHEIT:
        return celsius * 9 / 5 + 32
    return celsius


def build_icon_url(icon: str | None) -> str | None:
    if not icon:
        return None
    return ICON_URL_TEMPLATE.format(icon=icon)


def _format_number(value: float) -> str:
    # at most one decimal, no trailing zeros; "-0" collapses to "0"
    rounded = round(value, 1) + 0.0
    return f"{rounded:g}"


def _format_measure(value: float | None, suffix: str) -> str | None:
    if value is None:
        return None
    return f"{_format_number(value)}{suffix}"


def _normalize_label(city: str, country: str | None) -> str:
    country_text = (country or "").strip()
    if country_text:
        return f"{city}, {country_text}"
    return city


def map_weather(record: WeatherRecord, unit: UnitPreference) -> WeatherViewModel:
    temperature = convert_temperature(record.temperature_c, unit)
    return WeatherViewModel(
        location_label=_normalize_label(record.name, record.country),
        name=record.name,
        country=record.country,
        unit=unit,
        temperature=temperature,
        temperature_display=f"{_format_number(temperature)}{unit.symbol}",
        description=record.description,
        icon_url=build_icon_url(record.icon),
        wind_speed_display=_format_measure(record.wind_speed_ms, " m/s"),
        clouds_display=_format_measure(record.cloud_cover_pct, "%"),
        pressure_display=_format_measure(record.pressure_hpa, " hPa"),
    )
