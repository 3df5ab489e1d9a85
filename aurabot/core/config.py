"""Application configuration via environment variables (pydantic-settings)."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # LLM
    GEMINI_API_KEY: str
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_MODEL_FALLBACK: str = "gemini-2.0-flash"
    GROQ_API_KEY: str
    GROQ_MODEL: str = "moonshotai/kimi-k2-instruct-0905"
    LLM_TIMEOUT_SECONDS: float = 30.0

    # Data providers
    BRAVE_SEARCH_API_KEY: str = ""
    OPENWEATHER_API_KEY: str = ""
    COINGECKO_API_URL: str = "https://api.coingecko.com/api/v3"
    DEFAULT_WEATHER_CITY: str = "New York"
    PROVIDER_TIMEOUT_SECONDS: float = 5.0

    # Per-user quota, rolling window (0 = category disabled)
    RATE_LIMIT_WINDOW_SECONDS: int = 3600
    RATE_LIMIT_CRYPTO: int = 10
    RATE_LIMIT_WEATHER: int = 3
    RATE_LIMIT_NEWS: int = 5

    # Bot-wide daily caps (0 = uncapped)
    GLOBAL_DAILY_LIMIT_CRYPTO: int = 0
    GLOBAL_DAILY_LIMIT_WEATHER: int = 300
    GLOBAL_DAILY_LIMIT_NEWS: int = 500

    # Per-user message cooldown by platform
    COOLDOWN_TELEGRAM_SECONDS: float = 3.0
    COOLDOWN_TWITCH_SECONDS: float = 15.0
    COOLDOWN_KICK_SECONDS: float = 15.0
    COOLDOWN_DEFAULT_SECONDS: float = 10.0
    COOLDOWN_RETENTION_SECONDS: int = 3600

    # Conversation memory
    MEMORY_MAX_MESSAGES: int = 5
    MEMORY_TTL_SECONDS: int = 3600

    # Defaults
    LOG_LEVEL: str = "INFO"
    PROJECT_NAME: str = "AuraBot"

    @property
    def weather_enabled(self) -> bool:
        return bool(self.OPENWEATHER_API_KEY)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

@lru_cache
def get_settings():
    return Settings()

settings = get_settings()
