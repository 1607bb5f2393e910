from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import UnitPreference

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class UiSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = "Weather App"
    language: Literal["en", "es"] = "en"
    default_unit: UnitPreference = UnitPreference.CELSIUS
    poll_seconds: int = Field(default=2, ge=1, le=60)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("ui.title must not be empty")
        return text


class LocationSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mode: Literal["browser", "ip"] = "browser"


class HttpSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    timeout_seconds: float = Field(default=10.0, ge=1, le=60)


class WeatherAppYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ui: UiSettings = Field(default_factory=UiSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    weather_api_url: str
    weatherapp_env: Literal["dev", "test", "prod"] = "dev"
    weatherapp_config_path: Path = Path("config/weatherapp.yaml")
    weatherapp_host: str = "127.0.0.1"
    weatherapp_port: int = Field(default=8000, ge=1, le=65535)
    weatherapp_log_level: Literal["debug", "info", "warning", "error"] = "info"

    @field_validator("weather_api_url")
    @classmethod
    def validate_weather_api_url(cls, value: str) -> str:
        text = value.strip()
        parsed = urlparse(text)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("WEATHER_API_URL must be an absolute http(s) URL")
        return text.rstrip("/")

    @field_validator("weatherapp_log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class AppSettings(BaseModel):
    env: EnvSettings
    yaml: WeatherAppYamlSettings
    project_root: Path
    config_path: Path


def _resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def _load_yaml_settings(path: Path) -> WeatherAppYamlSettings:
    if not path.exists():
        raise FileNotFoundError(f"Weather app config file not found: {path}")

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Weather app config must be a YAML mapping/object at the top level")
    return WeatherAppYamlSettings.model_validate(raw_config)


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    env = EnvSettings()
    config_path = _resolve_project_path(env.weatherapp_config_path)
    yaml_settings = _load_yaml_settings(config_path)
    return AppSettings(
        env=env,
        yaml=yaml_settings,
        project_root=PROJECT_ROOT,
        config_path=config_path,
    )
