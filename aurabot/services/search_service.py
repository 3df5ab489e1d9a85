"""Web search via Brave API (primary) with DuckDuckGo HTML fallback."""
import logging
import re

import httpx
from bs4 import BeautifulSoup
from pydantic import TypeAdapter, ValidationError

from aurabot.core.config import settings
from aurabot.models.context import Category, ContextRecord, ProviderResult, SearchHit

logger = logging.getLogger(__name__)

DDG_URL = "https://html.duckduckgo.com/html/"
BRAVE_URL = "https://api.search.brave.com/res/v1/web/search"

MAX_RESULTS = 3
MAX_QUERY_CHARS = 100

# Conversational filler that only adds noise to a search query
_FILLER_PATTERNS = [
    re.compile(r"what'?s?\s+(?:is\s+)?(?:happening|going on)\s+(?:with|in)\s*", re.I),
    re.compile(r"^how(?:'s|\s+is)\s+", re.I),
    re.compile(r"\s+doing\b", re.I),
    re.compile(r"(?:the\s+)?price\s+of\s*", re.I),
    re.compile(r"(?:the\s+)?latest\s+on\s*", re.I),
    re.compile(r"any\s+news\s+(?:on|about)\s*", re.I),
    re.compile(r"\b(?:yo|hey|bro|pls|please)\b[,!]?\s*", re.I),
]

_record_adapter = TypeAdapter(ContextRecord)


def extract_search_query(message: str) -> str:
    """Strip filler phrases and cap the query length."""
    query = message
    for pattern in _FILLER_PATTERNS:
        query = pattern.sub("", query)
    query = re.sub(r"\s+", " ", query).strip(" ?!.,")
    if not query:
        query = message.strip()
    return query[:MAX_QUERY_CHARS]


async def brave_search(query: str, max_results: int = MAX_RESULTS) -> list[dict]:
    """Search via Brave Search API. Requires BRAVE_SEARCH_API_KEY."""
    try:
        async with httpx.AsyncClient(timeout=5) as client:
            resp = await client.get(
                BRAVE_URL,
                params={
                    "q": query,
                    "count": max_results,
                    "safesearch": "moderate",
                    "freshness": "pd",
                },
                headers={
                    "Accept": "application/json",
                    "Accept-Encoding": "gzip",
                    "X-Subscription-Token": settings.BRAVE_SEARCH_API_KEY,
                },
            )
            resp.raise_for_status()

        data = resp.json()
        results = []
        for item in (data.get("web", {}).get("results", []))[:max_results]:
            results.append({
                "title": item.get("title", ""),
                "snippet": item.get("description", ""),
                "url": item.get("url", ""),
            })
        return results

    except (httpx.HTTPError, ValueError, AttributeError) as e:
        logger.error(f"Brave search error: {e}")
        return []


async def ddg_search(query: str, max_results: int = MAX_RESULTS) -> list[dict]:
    """Search the web via DuckDuckGo HTML scraping — no API key needed."""
    try:
        async with httpx.AsyncClient(timeout=5, follow_redirects=True) as client:
            resp = await client.post(
                DDG_URL,
                data={"q": query, "b": ""},
                headers={
                    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7)",
                    "Referer": "https://duckduckgo.com/",
                },
            )
            resp.raise_for_status()

        soup = BeautifulSoup(resp.text, "html.parser")
        results = []

        for r in soup.select(".result"):
            title_tag = r.select_one(".result__a")
            snippet_tag = r.select_one(".result__snippet")
            if not title_tag:
                continue

            href = title_tag.get("href", "")
            title = title_tag.get_text(strip=True)
            snippet = snippet_tag.get_text(strip=True) if snippet_tag else ""

            if title and snippet:
                results.append({
                    "title": title,
                    "snippet": snippet,
                    "url": href,
                })

            if len(results) >= max_results:
                break

        return results

    except httpx.HTTPError as e:
        logger.error(f"DDG search error: {e}")
        return []


async def web_search(query: str, max_results: int = MAX_RESULTS) -> list[dict]:
    """Try Brave first (if key set), fall back to DDG."""
    if settings.BRAVE_SEARCH_API_KEY:
        results = await brave_search(query, max_results)
        if results:
            return results
    return await ddg_search(query, max_results)


def format_search_results(results: list[dict]) -> str:
    """One "title: snippet" line per hit, for prompt injection."""
    return "\n".join(f"{r['title']}: {r['snippet']}" for r in results)


async def fetch_summary(query: str) -> ProviderResult:
    results = await web_search(query)
    if not results:
        return ProviderResult.failure(Category.NEWS, f"no search results for {query!r}")
    try:
        summary = _record_adapter.validate_python({
            "kind": "news",
            "text": format_search_results(results),
            "results": [SearchHit(**r) for r in results],
        })
    except (ValidationError, TypeError) as e:
        logger.error(f"Malformed search results for {query!r}: {e}")
        return ProviderResult.failure(Category.NEWS, str(e))
    return ProviderResult.success(Category.NEWS, summary)
