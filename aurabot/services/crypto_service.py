import logging
import re

import httpx
from pydantic import TypeAdapter, ValidationError

from aurabot.core.config import settings
from aurabot.models.context import Category, ContextRecord, ProviderResult

logger = logging.getLogger(__name__)

SIMPLE_PRICE_PATH = "/simple/price"
TIMEOUT_SECONDS = 3

DEFAULT_COIN = "bitcoin"

# CoinGecko id -> (ticker, display name)
COINS = {
    "bitcoin": ("BTC", "Bitcoin"),
    "ethereum": ("ETH", "Ethereum"),
    "solana": ("SOL", "Solana"),
    "dogecoin": ("DOGE", "Dogecoin"),
    "ripple": ("XRP", "XRP"),
    "cardano": ("ADA", "Cardano"),
    "litecoin": ("LTC", "Litecoin"),
    "binancecoin": ("BNB", "BNB"),
}

# Map common names and tickers to CoinGecko ids for query detection
COIN_ALIASES = {
    "bitcoin": "bitcoin", "btc": "bitcoin",
    "ethereum": "ethereum", "eth": "ethereum", "ether": "ethereum",
    "solana": "solana", "sol": "solana",
    "dogecoin": "dogecoin", "doge": "dogecoin",
    "xrp": "ripple", "ripple": "ripple",
    "cardano": "cardano",
    "litecoin": "litecoin", "ltc": "litecoin",
    "bnb": "binancecoin",
}

_ALIAS_PATTERN = re.compile(
    r"\b(" + "|".join(sorted(map(re.escape, COIN_ALIASES), key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)

_record_adapter = TypeAdapter(ContextRecord)


def extract_coin_from_query(query: str) -> str | None:
    """Return the CoinGecko id of the first coin mentioned, if any."""
    match = _ALIAS_PATTERN.search(query)
    if not match:
        return None
    return COIN_ALIASES[match.group(1).lower()]


def parse_quote(coin_id: str, data: dict):
    """Validate a CoinGecko simple-price payload into a CryptoQuote."""
    entry = data[coin_id]
    symbol, name = COINS.get(coin_id, (coin_id.upper(), coin_id.title()))
    return _record_adapter.validate_python({
        "kind": "crypto",
        "coin_id": coin_id,
        "symbol": symbol,
        "name": name,
        "price_usd": entry["usd"],
        "change_24h_pct": round(entry.get("usd_24h_change") or 0.0, 2),
    })


async def fetch_quote(coin_id: str = DEFAULT_COIN) -> ProviderResult:
    """Fetch the USD price and 24h change for one coin from CoinGecko."""
    try:
        async with httpx.AsyncClient(timeout=TIMEOUT_SECONDS) as client:
            resp = await client.get(
                settings.COINGECKO_API_URL + SIMPLE_PRICE_PATH,
                params={
                    "ids": coin_id,
                    "vs_currencies": "usd",
                    "include_24hr_change": "true",
                },
            )
            resp.raise_for_status()

        quote = parse_quote(coin_id, resp.json())
        return ProviderResult.success(Category.CRYPTO, quote)

    except (httpx.HTTPError, KeyError, TypeError, ValueError, ValidationError) as e:
        logger.error(f"Crypto price error for {coin_id}: {e}")
        return ProviderResult.failure(Category.CRYPTO, str(e) or type(e).__name__)
