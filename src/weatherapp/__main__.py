from __future__ import annotations

import logging

import uvicorn

from .settings import load_settings


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.env.weatherapp_log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "weatherapp.main:app",
        host=settings.env.weatherapp_host,
        port=settings.env.weatherapp_port,
        log_level=settings.env.weatherapp_log_level,
    )


if __name__ == "__main__":
    main()
