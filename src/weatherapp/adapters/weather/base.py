from __future__ import annotations

from typing import Protocol

from ...domain.models import FailureKind, WeatherRecord


class WeatherClientError(RuntimeError):
    """Raised when a current-weather request cannot produce a valid record."""

    def __init__(
        self,
        message: str,
        *,
        kind: FailureKind,
        status: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status = status
        self.detail = detail


class WeatherClient(Protocol):
    async def by_city(self, name: str) -> WeatherRecord:
        """Fetch the current weather for a city name."""

    async def by_coordinates(self, lat: float, lon: float) -> WeatherRecord:
        """Fetch the current weather for a latitude/longitude pair."""
