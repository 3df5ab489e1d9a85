"""Keyword intent detection: does this message want live data, and which kind?"""

import re

from aurabot.core.config import settings
from aurabot.models.context import Category, Intent
from aurabot.services.crypto_service import DEFAULT_COIN, extract_coin_from_query
from aurabot.services.search_service import extract_search_query
from aurabot.services.weather_service import extract_city_from_query

CRYPTO_TERMS = re.compile(
    r"\b(crypto\w*|coins?|markets?|stocks?|trading|invest\w*|prices?)\b",
    re.IGNORECASE,
)
WEATHER_TERMS = re.compile(
    r"\b(weather|temperature|forecast|climate|rain|raining|rainy|sunny|snow|snowing|"
    r"cold|hot|degrees|humid|humidity)\b",
    re.IGNORECASE,
)
NEWS_TERMS = re.compile(
    r"\b(news|happening|trending|latest|breaking|headlines?)\b"
    r"|\bwho\s+won\b|\bwhat\s+happened\b|\bupdate\s+on\b",
    re.IGNORECASE,
)


def detect(utterance: str) -> Intent:
    """Classify an utterance into zero or more live-data categories.

    Pure function of the input; an empty category set means "no lookup".
    """
    if not utterance or not utterance.strip():
        return Intent()

    categories = set()
    coin_id = extract_coin_from_query(utterance)
    if coin_id or CRYPTO_TERMS.search(utterance):
        categories.add(Category.CRYPTO)
    if WEATHER_TERMS.search(utterance):
        categories.add(Category.WEATHER)
    if NEWS_TERMS.search(utterance):
        categories.add(Category.NEWS)

    if not categories:
        return Intent()

    return Intent(
        categories=frozenset(categories),
        coin_id=coin_id or DEFAULT_COIN,
        city=(extract_city_from_query(utterance) or settings.DEFAULT_WEATHER_CITY)
        if Category.WEATHER in categories else None,
        search_query=extract_search_query(utterance) if Category.NEWS in categories else "",
    )
