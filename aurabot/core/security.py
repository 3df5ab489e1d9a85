"""Validation of user-derived queries before they reach third-party APIs."""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from aurabot.models.context import Category

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 200
MIN_SEARCH_QUERY_LENGTH = 3

BLOCKED_PATTERNS = [
    # credential extraction
    re.compile(r"api[_\s]*key", re.I),
    re.compile(r"token", re.I),
    re.compile(r"secret", re.I),
    re.compile(r"password", re.I),
    # system paths
    re.compile(r"/etc/passwd", re.I),
    re.compile(r"/proc/", re.I),
    re.compile(r"C:\\Windows", re.I),
    re.compile(r"\.\./\.\./"),
    re.compile(r"/var/log", re.I),
    re.compile(r"/home/", re.I),
    # script / code injection
    re.compile(r"<script", re.I),
    re.compile(r"javascript:", re.I),
    re.compile(r"eval\(", re.I),
    re.compile(r"require\(", re.I),
    re.compile(r"import\s+", re.I),
    # SQL injection
    re.compile(r"union\s+select", re.I),
    re.compile(r"drop\s+table", re.I),
    re.compile(r"delete\s+from", re.I),
]

CITY_PATTERN = re.compile(r"^[A-Za-z\s,.\-]+$")


@dataclass(frozen=True)
class QueryCheck:
    valid: bool
    reason: Optional[str] = None


def validate_query(category: Category, query: str) -> QueryCheck:
    if not query or not isinstance(query, str):
        return QueryCheck(False, "Invalid query format")
    if len(query) > MAX_QUERY_LENGTH:
        return QueryCheck(False, "Query too long")

    for pattern in BLOCKED_PATTERNS:
        if pattern.search(query):
            return QueryCheck(False, f"Query contains blocked content ({pattern.pattern})")

    if category == Category.NEWS and len(query.strip()) < MIN_SEARCH_QUERY_LENGTH:
        return QueryCheck(False, "Search query too short")
    if category == Category.WEATHER and not CITY_PATTERN.match(query):
        return QueryCheck(False, "Invalid city name format")

    return QueryCheck(True)


def log_suspicious_activity(user_id: str, platform: str, reason: str, query: str) -> None:
    logger.warning(f"Suspicious query from {platform}:{user_id} ({reason}): {query[:MAX_QUERY_LENGTH]!r}")
