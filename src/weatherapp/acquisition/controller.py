from __future__ import annotations

import logging
from typing import Callable

from ..adapters.weather import WeatherClient, WeatherClientError
from ..location import LocationError, LocationProbe
from .state import (
    AcquisitionState,
    GeoDenied,
    Idle,
    Loaded,
    Loading,
    Notice,
    RequestSource,
    StateStore,
)

LOGGER = logging.getLogger(__name__)


def _log_notice(notice: Notice) -> None:
    LOGGER.warning("City search notice for '%s' (%s) has no listener", notice.query, notice.kind.value)


class AcquisitionController:
    """Decides which source to query and applies results to the acquisition state.

    Every request is tagged with a sequence number. Only the result of the
    active request may change the state; anything older is dropped. A failed
    city search issued while the geolocation path is still pending hands the
    state back to that path instead of settling it.
    """

    def __init__(
        self,
        weather_client: WeatherClient,
        location_probe: LocationProbe,
        *,
        store: StateStore[AcquisitionState] | None = None,
        notify: Callable[[Notice], None] | None = None,
    ) -> None:
        self._weather_client = weather_client
        self._location_probe = location_probe
        self._store = store if store is not None else StateStore(Idle())
        self._notify = notify or _log_notice
        self._sequence = 0
        self._active = 0
        self._geolocation_sequence: int | None = None
        self._settled: AcquisitionState = self._store.value
        self._mounted = False
        self._closed = False

    @property
    def store(self) -> StateStore[AcquisitionState]:
        return self._store

    @property
    def state(self) -> AcquisitionState:
        return self._store.value

    async def mount(self) -> None:
        if self._mounted or not isinstance(self.state, Idle):
            LOGGER.warning("Ignoring mount: controller is no longer idle (%r)", self.state)
            return
        self._mounted = True

        self._geolocation_sequence = self._begin("geolocation")
        try:
            await self._resolve_geolocation(self._geolocation_sequence)
        finally:
            self._geolocation_sequence = None

    async def _resolve_geolocation(self, sequence: int) -> None:
        try:
            coordinates = await self._location_probe.current_position()
        except LocationError as exc:
            LOGGER.warning("Geolocation failed (%s): %s", exc.kind.value, exc)
            if self._is_current(sequence, "geolocation probe"):
                self._settle(GeoDenied(reason=exc.kind))
            return

        if not self._is_current(sequence, "geolocation probe"):
            return

        try:
            record = await self._weather_client.by_coordinates(
                coordinates.latitude, coordinates.longitude
            )
        except WeatherClientError as exc:
            LOGGER.warning(
                "Weather by coordinates (%s, %s) failed (%s): %s",
                coordinates.latitude,
                coordinates.longitude,
                exc.kind.value,
                exc,
            )
            if self._is_current(sequence, "coordinates fetch"):
                self._settle(GeoDenied(reason=exc.kind))
            return

        if self._is_current(sequence, "coordinates fetch"):
            self._settle(Loaded(record=record))

    async def search_city(self, query: str) -> bool:
        city = query.strip()
        if not city:
            return False

        sequence = self._begin("city")
        try:
            record = await self._weather_client.by_city(city)
        except WeatherClientError as exc:
            LOGGER.warning("Weather by city '%s' failed (%s): %s", city, exc.kind.value, exc)
            if self._is_current(sequence, "city fetch"):
                self._restore()
                self._notify(Notice(kind=exc.kind, query=city))
            return False

        if not self._is_current(sequence, "city fetch"):
            return False
        # a settled city result replaces anything the geolocation path could still deliver
        self._geolocation_sequence = None
        self._settle(Loaded(record=record))
        return True

    def close(self) -> None:
        self._closed = True

    def _begin(self, source: RequestSource) -> int:
        self._sequence += 1
        self._active = self._sequence
        LOGGER.info("Request #%s (%s) issued", self._sequence, source)
        self._store.set(Loading(source=source))
        return self._sequence

    def _restore(self) -> None:
        if self._geolocation_sequence is not None:
            LOGGER.info("Handing the state back to pending geolocation #%s", self._geolocation_sequence)
            self._active = self._geolocation_sequence
            self._store.set(Loading(source="geolocation"))
            return
        self._store.set(self._settled)

    def _is_current(self, sequence: int, operation: str) -> bool:
        if self._closed:
            LOGGER.info("Discarding %s result #%s after shutdown", operation, sequence)
            return False
        if sequence != self._active:
            LOGGER.info(
                "Discarding stale %s result #%s (active is #%s)", operation, sequence, self._active
            )
            return False
        return True

    def _settle(self, state: AcquisitionState) -> None:
        self._settled = state
        self._store.set(state)
