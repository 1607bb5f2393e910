from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from ..domain.models import Coordinates, FailureKind

LOGGER = logging.getLogger(__name__)

IP_GEOLOCATION_URL = "https://ipapi.co/json/"
DEFAULT_TIMEOUT_SECONDS = 10.0

# W3C GeolocationPositionError.PERMISSION_DENIED; any other code means unavailable
PERMISSION_DENIED_CODE = 1


class LocationError(RuntimeError):
    """Raised when the device position cannot be determined."""

    def __init__(self, message: str, *, kind: FailureKind) -> None:
        super().__init__(message)
        self.kind = kind


class LocationProbe(Protocol):
    async def current_position(self) -> Coordinates:
        """Resolve the device coordinates once, or raise LocationError."""


def failure_kind_for_code(code: int) -> FailureKind:
    if code == PERMISSION_DENIED_CODE:
        return FailureKind.PERMISSION_DENIED
    return FailureKind.UNAVAILABLE


class BrowserLocationProbe:
    """Bridges the browser's callback-style geolocation call into an awaitable.

    Every ``current_position()`` call opens a new single-shot request. The page
    answers it through ``report_position`` or ``report_error``; only the first
    answer for the pending request is used.
    """

    def __init__(self) -> None:
        self._pending: asyncio.Future[Coordinates] | None = None

    @property
    def waiting(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def current_position(self) -> Coordinates:
        future: asyncio.Future[Coordinates] = asyncio.get_running_loop().create_future()
        self._pending = future
        LOGGER.info("Waiting for the browser to report its position")
        try:
            return await future
        finally:
            if self._pending is future:
                self._pending = None

    def report_position(self, latitude: float, longitude: float) -> bool:
        if not self.waiting:
            LOGGER.info("Ignoring position report with no pending request")
            return False
        try:
            coordinates = Coordinates(latitude=latitude, longitude=longitude)
        except ValidationError:
            LOGGER.warning("Browser reported invalid coordinates (%s, %s)", latitude, longitude)
            self._pending.set_exception(
                LocationError("Browser reported invalid coordinates", kind=FailureKind.UNAVAILABLE)
            )
            return True
        self._pending.set_result(coordinates)
        return True

    def report_error(self, code: int) -> bool:
        if not self.waiting:
            LOGGER.info("Ignoring geolocation error %s with no pending request", code)
            return False
        kind = failure_kind_for_code(code)
        self._pending.set_exception(
            LocationError(f"Browser geolocation failed with code {code}", kind=kind)
        )
        return True


def _coerce_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class IpLocationProbe:
    """Approximates the device position from its public IP address."""

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient | None = None,
        url: str = IP_GEOLOCATION_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._url = url
        self._timeout = timeout_seconds
        self._http_client = http_client

    async def current_position(self) -> Coordinates:
        payload = await self._fetch_json()
        lat = _coerce_float(payload.get("latitude"))
        lon = _coerce_float(payload.get("longitude"))
        if lat is None or lon is None:
            raise LocationError(
                "IP geolocation response did not include coordinates",
                kind=FailureKind.UNAVAILABLE,
            )
        try:
            return Coordinates(latitude=lat, longitude=lon)
        except ValidationError as exc:
            raise LocationError(
                "IP geolocation returned out-of-range coordinates",
                kind=FailureKind.UNAVAILABLE,
            ) from exc

    async def _fetch_json(self) -> dict[str, Any]:
        headers = {"User-Agent": "weatherapp/0.1"}
        try:
            if self._http_client is None:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(self._url, headers=headers)
            else:
                response = await self._http_client.get(
                    self._url, headers=headers, timeout=self._timeout
                )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise LocationError(
                "Failed to resolve location from IP", kind=FailureKind.UNAVAILABLE
            ) from exc

        if not isinstance(payload, dict):
            raise LocationError("Unexpected IP geolocation response shape", kind=FailureKind.UNAVAILABLE)
        return payload
