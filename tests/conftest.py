from __future__ import annotations

import pytest

from weatherapp.settings import load_settings

from .fakes import BASE_URL


@pytest.fixture()
def config_file(tmp_path):
    path = tmp_path / "weatherapp.yaml"
    path.write_text(
        "ui:\n  title: Test Weather\n  language: en\nlocation:\n  mode: browser\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def settings(config_file, monkeypatch):
    monkeypatch.setenv("WEATHER_API_URL", f"{BASE_URL}/")
    monkeypatch.setenv("WEATHERAPP_ENV", "test")
    monkeypatch.setenv("WEATHERAPP_CONFIG_PATH", str(config_file))
    load_settings.cache_clear()
    yield load_settings()
    load_settings.cache_clear()
