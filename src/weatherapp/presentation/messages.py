from __future__ import annotations

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "title": "WEATHER APP",
        "idle": "Loading weather...",
        "loading": "Loading weather data...",
        "geo_denied": "Please allow location access to see the weather, or search for a city.",
        "city_not_found": "City not found, please check the name.",
        "search_failed": "Could not load the weather, please try again.",
        "search_placeholder": "Type a city...",
        "search_button": "Search",
        "toggle_unit": "Degrees °C / °F",
        "wind_speed": "Wind Speed",
        "clouds": "Clouds",
        "pressure": "Pressure",
    },
    "es": {
        "title": "WEATHER APP",
        "idle": "Cargando clima...",
        "loading": "Cargando datos del clima...",
        "geo_denied": "Por favor, permití la ubicación para ver el clima o buscá una ciudad.",
        "city_not_found": "No se encontró la ciudad, por favor verificá el nombre.",
        "search_failed": "No se pudo cargar el clima, por favor intentá de nuevo.",
        "search_placeholder": "Escribí una ciudad...",
        "search_button": "Buscar",
        "toggle_unit": "Grados °C / °F",
        "wind_speed": "Velocidad del viento",
        "clouds": "Nubes",
        "pressure": "Presión",
    },
}

DEFAULT_LANGUAGE = "en"


def get_messages(language: str) -> dict[str, str]:
    return MESSAGES.get(language, MESSAGES[DEFAULT_LANGUAGE])
