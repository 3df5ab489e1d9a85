"""Shared test fixtures: env vars, state resets and canned provider records."""

import os

import pytest

# Set required env vars before any aurabot imports
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("GROQ_API_KEY", "test-groq-key")
os.environ.setdefault("OPENWEATHER_API_KEY", "test-weather-key")
os.environ.setdefault("BRAVE_SEARCH_API_KEY", "")
os.environ.setdefault("DEFAULT_WEATHER_CITY", "New York")


@pytest.fixture(autouse=True)
def _reset_state():
    """Cache, quotas, cooldowns and conversation memory are module singletons."""
    from aurabot.core import rate_limit
    from aurabot.core.cache import _store
    from aurabot.services.memory_service import memory
    from aurabot.services.cooldown_service import cooldowns

    _store.clear()
    rate_limit.rate_limiter.reset()
    memory.clear()
    cooldowns.clear()
    yield
    _store.clear()
    rate_limit.rate_limiter.reset()
    memory.clear()
    cooldowns.clear()


@pytest.fixture
def btc_quote():
    from aurabot.models.context import CryptoQuote

    return CryptoQuote(coin_id="bitcoin", symbol="BTC", name="Bitcoin", price_usd=113000, change_24h_pct=-0.86)


@pytest.fixture
def london_weather():
    from aurabot.models.context import WeatherReport

    return WeatherReport(city="London", temperature_c=15.2, description="light rain", feels_like_c=14.1)


@pytest.fixture
def news_summary():
    from aurabot.models.context import SearchHit, SearchSummary

    hits = [SearchHit(title="Tesla unveils robotaxi", snippet="Shares jump 5% after event", url="https://example.com/a")]
    return SearchSummary(text="Tesla unveils robotaxi: Shares jump 5% after event", results=hits)
