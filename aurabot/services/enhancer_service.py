"""Live-data context enhancement -- fetches every detected category in parallel.

Each provider call is independently fallible: a rejected query, an exhausted
quota, a timeout or a provider error only drops that category from the bundle.
"""

import asyncio
import logging
from typing import Optional

from aurabot.core import rate_limit
from aurabot.core.cache import cache_get, cache_set, make_key
from aurabot.core.config import settings
from aurabot.core.errors import ProviderUnavailableError
from aurabot.core.security import log_suspicious_activity, validate_query
from aurabot.models.context import Category, ContextBundle, Intent, ProviderResult, ordered
from aurabot.services import crypto_service, search_service, weather_service
from aurabot.services.intent_service import detect

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = {
    Category.CRYPTO: 300,
    Category.WEATHER: 1800,
    Category.NEWS: 3600,
}


def _provider_query(intent: Intent, category: Category) -> str:
    if category == Category.CRYPTO:
        return intent.coin_id
    if category == Category.WEATHER:
        return intent.city or settings.DEFAULT_WEATHER_CITY
    return intent.search_query


async def _call_provider(category: Category, query: str) -> ProviderResult:
    if category == Category.CRYPTO:
        return await crypto_service.fetch_quote(query)
    if category == Category.WEATHER:
        return await weather_service.fetch_weather(query)
    return await search_service.fetch_summary(query)


async def _lookup(
    category: Category,
    query: str,
    user_id: str,
    platform: str,
    limiter: rate_limit.RateLimiter,
) -> ProviderResult:
    """Guard, meter, cache and time-box one provider call."""
    check = validate_query(category, query)
    if not check.valid:
        log_suspicious_activity(user_id, platform, check.reason, query)
        return ProviderResult.failure(category, check.reason)

    # Every lookup counts against the user's quota, cached or not
    decision = limiter.try_acquire(user_id, platform, category)
    if not decision.allowed:
        return ProviderResult.failure(category, str(decision.error))

    cache_key = make_key(category.value, query)
    cached = cache_get(cache_key)
    if cached is not None:
        logger.info(f"Cache hit for {category.value}: {query}")
        return ProviderResult.success(category, cached)

    logger.info(f"{category.value} lookup {query!r} for {platform}:{user_id}")
    try:
        result = await asyncio.wait_for(
            _call_provider(category, query),
            timeout=settings.PROVIDER_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        error = ProviderUnavailableError(category.value, "timed out")
        logger.warning(str(error))
        return ProviderResult.failure(category, str(error))

    if result.ok:
        cache_set(cache_key, result.record, CACHE_TTL_SECONDS[category])
    return result


async def enhance(
    utterance: str,
    user_id: str,
    platform: str = "telegram",
    limiter: Optional[rate_limit.RateLimiter] = None,
) -> Optional[ContextBundle]:
    """Fetch live data for every category the utterance asks about.

    Returns None only when nothing was detected. When lookups ran but none
    produced data, the bundle comes back empty.
    """
    intent = detect(utterance)
    if not intent.needs_lookup:
        return None

    limiter = limiter or rate_limit.rate_limiter
    categories = ordered(intent.categories)
    results = await asyncio.gather(
        *[
            _lookup(c, _provider_query(intent, c), user_id, platform, limiter)
            for c in categories
        ],
        return_exceptions=True,
    )

    records = []
    for category, result in zip(categories, results):
        if isinstance(result, Exception):
            logger.error(f"{category.value} provider raised: {result!r}")
            continue
        if not result.ok:
            logger.info(f"No {category.value} data: {result.error}")
            continue
        records.append(result.record)

    bundle = ContextBundle.from_records(records)
    logger.info(
        f"Enhancement for {platform}:{user_id}: detected={[c.value for c in categories]} "
        f"fetched={[c.value for c in bundle.categories]}"
    )
    return bundle
