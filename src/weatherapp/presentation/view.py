from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict

from ..acquisition.state import (
    AcquisitionState,
    GeoDenied,
    Idle,
    Loaded,
    Loading,
    Notice,
    StateStore,
)
from ..domain.models import FailureKind, UnitPreference
from .mapper import WeatherViewModel, map_weather
from .messages import get_messages

LOGGER = logging.getLogger(__name__)

Screen = Literal["idle", "loading", "geo_denied", "loaded"]


class ScreenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    screen: Screen
    unit: UnitPreference
    message: str | None = None
    weather: WeatherViewModel | None = None


class WeatherView:
    """Keeps a rendered ScreenModel in sync with acquisition state and unit preference."""

    def __init__(
        self,
        acquisition: StateStore[AcquisitionState],
        *,
        unit: UnitPreference = UnitPreference.CELSIUS,
        language: str = "en",
    ) -> None:
        self._acquisition = acquisition
        self._unit = StateStore(unit)
        self._messages = get_messages(language)
        self._screen = self._render()
        self._unsubscribers = [
            acquisition.subscribe(self._on_change),
            self._unit.subscribe(self._on_change),
        ]

    @property
    def screen(self) -> ScreenModel:
        return self._screen

    @property
    def unit(self) -> UnitPreference:
        return self._unit.value

    @property
    def messages(self) -> dict[str, str]:
        return self._messages

    def set_unit(self, unit: UnitPreference) -> None:
        self._unit.set(unit)

    def toggle_unit(self) -> UnitPreference:
        self._unit.set(self._unit.value.toggled())
        return self._unit.value

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_change(self, _value: object) -> None:
        self._screen = self._render()

    def _render(self) -> ScreenModel:
        state = self._acquisition.value
        unit = self._unit.value
        if isinstance(state, Loaded):
            return ScreenModel(screen="loaded", unit=unit, weather=map_weather(state.record, unit))
        if isinstance(state, GeoDenied):
            return ScreenModel(screen="geo_denied", unit=unit, message=self._messages["geo_denied"])
        if isinstance(state, Loading):
            return ScreenModel(screen="loading", unit=unit, message=self._messages["loading"])
        if isinstance(state, Idle):
            return ScreenModel(screen="idle", unit=unit, message=self._messages["idle"])
        raise TypeError(f"Unsupported acquisition state: {state!r}")


class NoticeBoard:
    """Queues city-search notices until the next render picks them up."""

    def __init__(self, *, language: str = "en") -> None:
        self._messages = get_messages(language)
        self._pending: list[Notice] = []

    def push(self, notice: Notice) -> None:
        LOGGER.info("Queued notice for '%s' (%s)", notice.query, notice.kind.value)
        self._pending.append(notice)

    def drain(self) -> list[str]:
        notices, self._pending = self._pending, []
        return [self.describe(notice) for notice in notices]

    def describe(self, notice: Notice) -> str:
        if notice.kind is FailureKind.NOT_FOUND:
            return self._messages["city_not_found"]
        return self._messages["search_failed"]
