"""Current conditions via the OpenWeather API."""
import logging
import re

import httpx
from pydantic import TypeAdapter, ValidationError

from aurabot.core.config import settings
from aurabot.models.context import Category, ContextRecord, ProviderResult

logger = logging.getLogger(__name__)

OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
TIMEOUT_SECONDS = 3

_CITY_AFTER_WEATHER = re.compile(
    r"\b(?:weather|temperature|forecast|climate|raining|rain|sunny|snowing|snow|hot|cold|degrees|humid)\b"
    r".*?\b(?:in|for|at)\s+([A-Za-z][A-Za-z .\-]*?)"
    r"(?:\s+(?:today|tomorrow|tonight|now|right now|this week|rn)\b|[?!.,]|$)",
    re.IGNORECASE,
)
_CITY_BEFORE_WEATHER = re.compile(
    r"\bin\s+([A-Z][a-zA-Z\-]+(?:\s+[A-Z][a-zA-Z\-]+)*)"
)

_record_adapter = TypeAdapter(ContextRecord)


def extract_city_from_query(query: str) -> str | None:
    """Pull a city name out of phrases like "weather in new york today"."""
    match = _CITY_AFTER_WEATHER.search(query) or _CITY_BEFORE_WEATHER.search(query)
    if not match:
        return None
    city = match.group(1).strip(" .-")
    return city.title() if city else None


def parse_weather(data: dict):
    """Validate an OpenWeather current-weather payload into a WeatherReport."""
    return _record_adapter.validate_python({
        "kind": "weather",
        "city": data["name"],
        "temperature_c": data["main"]["temp"],
        "description": data["weather"][0]["description"],
        "feels_like_c": data["main"].get("feels_like"),
    })


async def fetch_weather(city: str) -> ProviderResult:
    if not settings.weather_enabled:
        return ProviderResult.failure(Category.WEATHER, "OPENWEATHER_API_KEY not set")

    try:
        async with httpx.AsyncClient(timeout=TIMEOUT_SECONDS) as client:
            resp = await client.get(
                OPENWEATHER_URL,
                params={
                    "q": city,
                    "appid": settings.OPENWEATHER_API_KEY,
                    "units": "metric",
                },
            )
            resp.raise_for_status()

        report = parse_weather(resp.json())
        return ProviderResult.success(Category.WEATHER, report)

    except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError, ValidationError) as e:
        logger.error(f"Weather error for {city}: {e}")
        return ProviderResult.failure(Category.WEATHER, str(e) or type(e).__name__)
