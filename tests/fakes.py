from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx

from weatherapp.adapters.weather import BackendWeatherClient, WeatherClientError
from weatherapp.domain.models import Coordinates, FailureKind, WeatherRecord
from weatherapp.location import LocationError

BASE_URL = "http://backend.test"


def new_york_payload() -> dict[str, Any]:
    return {
        "name": "New York",
        "main": {"temp": 15, "pressure": 1012},
        "weather": [{"id": 800, "description": "clear sky", "icon": "01d"}],
        "wind": {"speed": 3.1},
        "clouds": {"all": 10},
        "sys": {"country": "US"},
    }


def make_record(name: str = "New York", temp: float = 15.0, country: str = "US") -> WeatherRecord:
    return WeatherRecord(
        name=name,
        country=country,
        temperature_c=temp,
        condition_code=800,
        description="clear sky",
        icon="01d",
        wind_speed_ms=3.1,
        cloud_cover_pct=10,
        pressure_hpa=1012,
    )


def mock_backend(handler: Callable[[httpx.Request], httpx.Response]) -> BackendWeatherClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return BackendWeatherClient(BASE_URL, http_client=http_client)


class FakeWeatherClient:
    """Weather client whose answers are released by the test, one gate per call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.responses: dict[Any, WeatherRecord | WeatherClientError] = {}
        self.gates: dict[Any, asyncio.Event] = {}

    def gate(self, key: Any) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[key] = event
        return event

    async def by_city(self, name: str) -> WeatherRecord:
        self.calls.append(("city", name))
        return await self._answer(name)

    async def by_coordinates(self, lat: float, lon: float) -> WeatherRecord:
        self.calls.append(("coordinates", (lat, lon)))
        return await self._answer((lat, lon))

    async def _answer(self, key: Any) -> WeatherRecord:
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        response = self.responses.get(key)
        if response is None:
            raise WeatherClientError(f"no weather for {key}", kind=FailureKind.NOT_FOUND, status=404)
        if isinstance(response, WeatherClientError):
            raise response
        return response


class FakeLocationProbe:
    def __init__(
        self,
        coordinates: Coordinates | None = None,
        error: FailureKind | None = None,
    ) -> None:
        self._coordinates = coordinates
        self._error = error
        self.calls = 0
        self.gate: asyncio.Event | None = None

    async def current_position(self) -> Coordinates:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self._error is not None:
            raise LocationError("denied by test", kind=self._error)
        assert self._coordinates is not None
        return self._coordinates
