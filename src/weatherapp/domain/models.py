from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UnitPreference(str, Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    @property
    def symbol(self) -> str:
        return "°C" if self is UnitPreference.CELSIUS else "°F"

    def toggled(self) -> UnitPreference:
        if self is UnitPreference.CELSIUS:
            return UnitPreference.FAHRENHEIT
        return UnitPreference.CELSIUS


class FailureKind(str, Enum):
    NETWORK_ERROR = "network_error"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    MALFORMED_RESPONSE = "malformed_response"
    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class WeatherRecord(BaseModel):
    """Snapshot of one successful current-weather query.

    Temperatures are always stored in Celsius; unit preference only affects
    presentation.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    country: str | None = None
    temperature_c: float
    condition_code: int | None = None
    description: str | None = None
    icon: str | None = None
    wind_speed_ms: float | None = None
    cloud_cover_pct: float | None = Field(default=None, ge=0, le=100)
    pressure_hpa: float | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("weather record name must not be empty")
        return text
