from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .acquisition import AcquisitionController, Idle, StateStore
from .adapters.weather import BackendWeatherClient, WeatherClient
from .location import BrowserLocationProbe, IpLocationProbe, LocationProbe
from .presentation import NoticeBoard, WeatherView
from .settings import AppSettings, load_settings

LOGGER = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
WEB_DIR = BASE_DIR / "web"
TEMPLATES_DIR = WEB_DIR / "templates"
STATIC_DIR = WEB_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


class LocationReport(BaseModel):
    model_config = ConfigDict(extra="ignore")

    latitude: float | None = None
    longitude: float | None = None
    error_code: int | None = None

    @model_validator(mode="after")
    def validate_report(self) -> LocationReport:
        has_position = self.latitude is not None and self.longitude is not None
        if has_position == (self.error_code is not None):
            raise ValueError("report either latitude and longitude, or error_code")
        return self


class CitySearch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    city: str = Field(default="", max_length=200)


def _get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _tile_context(request: Request) -> dict[str, Any]:
    view: WeatherView = request.app.state.view
    notices: NoticeBoard = request.app.state.notices
    return {
        "screen": view.screen,
        "messages": view.messages,
        "notices": notices.drain(),
        "poll_seconds": _get_settings(request).yaml.ui.poll_seconds,
    }


def _tile_response(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "components/tile_weather.html", _tile_context(request))


def _build_location_probe(settings: AppSettings, http_client: httpx.AsyncClient) -> LocationProbe:
    mode = settings.yaml.location.mode
    if mode == "browser":
        return BrowserLocationProbe()
    if mode == "ip":
        return IpLocationProbe(
            http_client=http_client,
            timeout_seconds=settings.yaml.http.timeout_seconds,
        )
    raise ValueError(f"Unsupported location mode: {mode}")


def create_app(
    *,
    settings: AppSettings | None = None,
    weather_client: WeatherClient | None = None,
    location_probe: LocationProbe | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(application: FastAPI):
        app_settings = settings or load_settings()
        timeout = app_settings.yaml.http.timeout_seconds
        http_client = httpx.AsyncClient(timeout=timeout)
        client = weather_client or BackendWeatherClient(
            app_settings.env.weather_api_url,
            http_client=http_client,
            timeout_seconds=timeout,
        )
        probe = location_probe or _build_location_probe(app_settings, http_client)

        ui = app_settings.yaml.ui
        store = StateStore(Idle())
        notices = NoticeBoard(language=ui.language)
        view = WeatherView(store, unit=ui.default_unit, language=ui.language)
        controller = AcquisitionController(client, probe, store=store, notify=notices.push)

        application.state.settings = app_settings
        application.state.controller = controller
        application.state.location_probe = probe
        application.state.view = view
        application.state.notices = notices
        application.state.started_at_utc = datetime.now(timezone.utc)
        application.state.mount_task = asyncio.create_task(controller.mount())
        # let mount reach the probe before any request is served
        await asyncio.sleep(0)
        LOGGER.info(
            "Weather app started (env=%s, location=%s, backend=%s)",
            app_settings.env.weatherapp_env,
            app_settings.yaml.location.mode,
            app_settings.env.weather_api_url,
        )

        try:
            yield
        finally:
            controller.close()
            view.close()
            mount_task = application.state.mount_task
            if not mount_task.done():
                mount_task.cancel()
            await asyncio.gather(mount_task, return_exceptions=True)
            await http_client.aclose()

    application = FastAPI(title="Weather App", version="0.1.0", lifespan=lifespan)
    application.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @application.get("/", response_class=HTMLResponse)
    async def weather_page(request: Request) -> HTMLResponse:
        app_settings = _get_settings(request)
        context = _tile_context(request)
        context.update(
            {
                "title": app_settings.yaml.ui.title,
                "language": app_settings.yaml.ui.language,
                "location_mode": app_settings.yaml.location.mode,
                "environment": app_settings.env.weatherapp_env,
            }
        )
        return templates.TemplateResponse(request, "weather.html", context)

    @application.get("/partials/weather", response_class=HTMLResponse)
    async def partial_weather(request: Request) -> HTMLResponse:
        return _tile_response(request)

    @application.post("/location", response_class=HTMLResponse)
    async def report_location(request: Request, report: LocationReport) -> HTMLResponse:
        probe = request.app.state.location_probe
        if not isinstance(probe, BrowserLocationProbe):
            raise HTTPException(status_code=409, detail="Browser location is not enabled")

        if report.error_code is not None:
            accepted = probe.report_error(report.error_code)
        else:
            accepted = probe.report_position(report.latitude, report.longitude)

        mount_task: asyncio.Task = request.app.state.mount_task
        if accepted and not mount_task.done():
            await asyncio.wait({mount_task})
        return _tile_response(request)

    @application.post("/search", response_class=HTMLResponse)
    async def search_city(request: Request, search: CitySearch) -> HTMLResponse:
        controller: AcquisitionController = request.app.state.controller
        await controller.search_city(search.city)
        return _tile_response(request)

    @application.post("/unit", response_class=HTMLResponse)
    async def toggle_unit(request: Request) -> HTMLResponse:
        view: WeatherView = request.app.state.view
        unit = view.toggle_unit()
        LOGGER.info("Unit preference switched to %s", unit.value)
        return _tile_response(request)

    @application.get("/api/weather", response_class=JSONResponse)
    async def weather_state(request: Request) -> JSONResponse:
        view: WeatherView = request.app.state.view
        return JSONResponse(view.screen.model_dump(mode="json"))

    @application.get("/health", response_class=JSONResponse)
    async def health(request: Request) -> JSONResponse:
        app_settings = _get_settings(request)
        view: WeatherView = request.app.state.view
        return JSONResponse(
            {
                "status": "ok",
                "service": "weatherapp",
                "environment": app_settings.env.weatherapp_env,
                "location_mode": app_settings.yaml.location.mode,
                "screen": view.screen.screen,
                "started_at_utc": request.app.state.started_at_utc.isoformat(),
                "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            }
        )

    return application


app = create_app()
