from __future__ import annotations

import math

import pytest

from weatherapp.acquisition import GeoDenied, Idle, Loaded, Loading, Notice, StateStore
from weatherapp.domain.models import FailureKind, UnitPreference, WeatherRecord
from weatherapp.presentation import (
    NoticeBoard,
    WeatherView,
    build_icon_url,
    convert_temperature,
    map_weather,
)

from .fakes import make_record


@pytest.mark.parametrize("celsius", [-40.0, -12.3, 0.0, 15.0, 21.7, 36.6, 100.0])
def test_fahrenheit_conversion(celsius):
    displayed = convert_temperature(celsius, UnitPreference.FAHRENHEIT)
    assert math.isclose(displayed, celsius * 9 / 5 + 32)


@pytest.mark.parametrize("celsius", [-40.0, -12.3, 0.0, 15.0, 21.7])
def test_celsius_is_shown_unchanged(celsius):
    assert convert_temperature(celsius, UnitPreference.CELSIUS) == celsius


def test_map_weather_new_york():
    view_model = map_weather(make_record(), UnitPreference.CELSIUS)

    assert view_model.location_label == "New York, US"
    assert view_model.temperature == 15
    assert view_model.temperature_display == "15°C"
    assert view_model.description == "clear sky"
    assert view_model.icon_url == "https://openweathermap.org/img/wn/01d.png"
    assert view_model.wind_speed_display == "3.1 m/s"
    assert view_model.clouds_display == "10%"
    assert view_model.pressure_display == "1012 hPa"


def test_map_weather_fahrenheit_keeps_record_in_celsius():
    record = make_record(temp=21.5)

    view_model = map_weather(record, UnitPreference.FAHRENHEIT)

    assert view_model.temperature_display == "70.7°F"
    assert record.temperature_c == 21.5


def test_map_weather_tolerates_missing_optional_fields():
    record = WeatherRecord(name="Nowhere", temperature_c=-0.04)

    view_model = map_weather(record, UnitPreference.CELSIUS)

    assert view_model.location_label == "Nowhere"
    assert view_model.temperature_display == "0°C"
    assert view_model.icon_url is None
    assert view_model.wind_speed_display is None
    assert view_model.clouds_display is None
    assert view_model.pressure_display is None


def test_icon_url_is_none_without_icon():
    assert build_icon_url(None) is None
    assert build_icon_url("") is None


def test_view_follows_acquisition_state():
    store = StateStore(Idle())
    view = WeatherView(store)
    assert view.screen.screen == "idle"

    store.set(Loading(source="geolocation"))
    assert view.screen.screen == "loading"
    assert view.screen.message == "Loading weather data..."

    store.set(GeoDenied(reason=FailureKind.PERMISSION_DENIED))
    assert view.screen.screen == "geo_denied"
    assert view.screen.weather is None

    store.set(Loaded(record=make_record()))
    assert view.screen.screen == "loaded"
    assert view.screen.weather.temperature_display == "15°C"


def test_toggle_unit_rerenders_and_survives_refresh():
    store = StateStore(Loaded(record=make_record()))
    view = WeatherView(store)

    assert view.toggle_unit() is UnitPreference.FAHRENHEIT
    assert view.screen.weather.temperature_display == "59°F"

    store.set(Loading(source="city"))
    store.set(Loaded(record=make_record("Madrid", 20.0, "ES")))
    assert view.unit is UnitPreference.FAHRENHEIT
    assert view.screen.weather.temperature_display == "68°F"

    view.toggle_unit()
    assert view.screen.weather.temperature_display == "20°C"


def test_closed_view_stops_following_store():
    store = StateStore(Idle())
    view = WeatherView(store)
    view.close()

    store.set(Loading(source="city"))

    assert view.screen.screen == "idle"


def test_spanish_messages():
    view = WeatherView(StateStore(GeoDenied(reason=FailureKind.PERMISSION_DENIED)), language="es")

    assert view.screen.message.startswith("Por favor, permití la ubicación")


def test_notice_board_drains_once():
    board = NoticeBoard()
    board.push(Notice(kind=FailureKind.NOT_FOUND, query="Atlantis"))

    assert board.drain() == ["City not found, please check the name."]
    assert board.drain() == []


def test_notice_board_describes_failures_by_kind():
    board = NoticeBoard(language="es")
    board.push(Notice(kind=FailureKind.NOT_FOUND, query="Atlantis"))
    board.push(Notice(kind=FailureKind.NETWORK_ERROR, query="Madrid"))

    assert board.drain() == [
        "No se encontró la ciudad, por favor verificá el nombre.",
        "No se pudo cargar el clima, por favor intentá de nuevo.",
    ]
