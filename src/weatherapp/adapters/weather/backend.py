from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from ...domain.models import FailureKind, WeatherRecord
from .base import WeatherClientError

LOGGER = logging.getLogger(__name__)

CITY_PATH = "/weather/city"
COORDINATES_PATH = "/weather/coordinates"
DEFAULT_TIMEOUT_SECONDS = 10.0


def _malformed(message: str) -> WeatherClientError:
    return WeatherClientError(message, kind=FailureKind.MALFORMED_RESPONSE)


def _coerce_float(value: Any, *, field_name: str) -> float:
    if isinstance(value, bool):
        raise _malformed(f"Invalid numeric value for {field_name}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise _malformed(f"Invalid numeric value for {field_name}") from exc
    if not math.isfinite(number):
        raise _malformed(f"Non-finite numeric value for {field_name}")
    return number


def _coerce_optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _coerce_optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _optional_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def _optional_block(payload: dict[str, Any], key: str) -> dict[str, Any]:
    block = payload.get(key)
    return block if isinstance(block, dict) else {}


def parse_weather_record(payload: Any) -> WeatherRecord:
    """Validate a backend weather body and normalize it into a record.

    Only ``name``, ``main.temp`` and a non-empty ``weather`` list are required.
    Every other field falls back to ``None`` when absent or of the wrong type.
    """
    if not isinstance(payload, dict):
        raise _malformed("Unexpected weather response shape")

    name = _optional_text(payload.get("name"))
    if name is None:
        raise _malformed("Weather response did not include a location name")

    main = payload.get("main")
    if not isinstance(main, dict):
        raise _malformed("Weather response did not include a measurements block")
    temperature = _coerce_float(main.get("temp"), field_name="main.temp")

    conditions = payload.get("weather")
    if not isinstance(conditions, list) or not conditions or not isinstance(conditions[0], dict):
        raise _malformed("Weather response did not include any conditions")
    condition = conditions[0]

    cloud_cover = _coerce_optional_float(_optional_block(payload, "clouds").get("all"))
    if cloud_cover is not None and not 0 <= cloud_cover <= 100:
        cloud_cover = None

    return WeatherRecord(
        name=name,
        country=_optional_text(_optional_block(payload, "sys").get("country")),
        temperature_c=temperature,
        condition_code=_coerce_optional_int(condition.get("id")),
        description=_optional_text(condition.get("description")),
        icon=_optional_text(condition.get("icon")),
        wind_speed_ms=_coerce_optional_float(_optional_block(payload, "wind").get("speed")),
        cloud_cover_pct=cloud_cover,
        pressure_hpa=_coerce_optional_float(main.get("pressure")),
    )


class BackendWeatherClient:
    def __init__(
        self,
        base_url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def by_city(self, name: str) -> WeatherRecord:
        city = name.strip()
        if not city:
            raise ValueError("city name must not be empty")
        return await self._get(CITY_PATH, {"city": city})

    async def by_coordinates(self, lat: float, lon: float) -> WeatherRecord:
        if not -90 <= lat <= 90:
            raise ValueError(f"latitude out of range: {lat}")
        if not -180 <= lon <= 180:
            raise ValueError(f"longitude out of range: {lon}")
        return await self._get(COORDINATES_PATH, {"lat": lat, "lon": lon})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    async def _get(self, path: str, params: dict[str, Any]) -> WeatherRecord:
        url = f"{self._base_url}{path}"
        LOGGER.debug("GET %s params=%s", url, params)
        try:
            response = await self._http_client.get(url, params=params, timeout=self._timeout)
        except httpx.TimeoutException as exc:
            raise WeatherClientError(
                f"Timed out after {self._timeout:g}s requesting {path}",
                kind=FailureKind.NETWORK_ERROR,
                detail=str(exc) or exc.__class__.__name__,
            ) from exc
        except httpx.HTTPError as exc:
            raise WeatherClientError(
                f"Failed to reach weather backend at {path}",
                kind=FailureKind.NETWORK_ERROR,
                detail=str(exc) or exc.__class__.__name__,
            ) from exc

        if response.status_code == 404:
            raise WeatherClientError(
                f"No weather found for {params}",
                kind=FailureKind.NOT_FOUND,
                status=404,
            )
        if not response.is_success:
            raise WeatherClientError(
                f"Weather backend answered with status {response.status_code}",
                kind=FailureKind.SERVER_ERROR,
                status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise _malformed("Weather backend returned a non-JSON body") from exc
        return parse_weather_record(payload)
