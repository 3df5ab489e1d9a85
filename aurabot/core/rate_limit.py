"""Per-user rolling-window quotas and bot-wide daily caps for data lookups.

Each ``(platform, user_id, category)`` key keeps a sliding log of call
timestamps. Check and increment happen under one lock so concurrent
enhancement cycles can never both take the last slot.
"""
import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from aurabot.core.config import settings
from aurabot.core.errors import RateLimitExceededError
from aurabot.models.context import Category

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    current: int
    limit: int
    retry_after: float = 0.0
    error: Optional[RateLimitExceededError] = None


class RateLimiter:
    def __init__(
        self,
        user_limits: dict[Category, int],
        window_seconds: int,
        global_daily_limits: Optional[dict[Category, int]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.user_limits = dict(user_limits)
        self.window_seconds = window_seconds
        self.global_daily_limits = dict(global_daily_limits or {})
        self._clock = clock
        self._lock = threading.Lock()
        self._calls: dict[tuple[str, str, Category], deque[float]] = {}
        self._daily: dict[Category, int] = {}
        self._day = self._today()

    def _today(self) -> str:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc).date().isoformat()

    def _reset_daily_if_needed(self) -> None:
        today = self._today()
        if today != self._day:
            self._day = today
            self._daily = {}

    def _prune(self, log: deque, now: float) -> None:
        cutoff = now - self.window_seconds
        while log and log[0] <= cutoff:
            log.popleft()

    def _cleanup_locked(self, now: float) -> int:
        stale = []
        for key, log in self._calls.items():
            self._prune(log, now)
            if not log:
                stale.append(key)
        for key in stale:
            del self._calls[key]
        if stale:
            logger.debug(f"Cleaned up {len(stale)} idle rate limit keys")
        return len(stale)

    def try_acquire(self, user_id: str, platform: str, category: Category) -> RateLimitDecision:
        """Take one slot for this user and category, or explain why not.

        A category missing from ``user_limits`` or capped at 0 is disabled.
        """
        key = (platform, str(user_id), category)
        limit = self.user_limits.get(category, 0)

        with self._lock:
            now = self._clock()
            self._reset_daily_if_needed()

            log = self._calls.get(key)
            if log is None:
                # New key: sweep idle ones so the map tracks active users only
                self._cleanup_locked(now)
                log = deque()
            else:
                self._prune(log, now)

            if len(log) >= limit:
                retry_after = log[0] + self.window_seconds - now if log else float(self.window_seconds)
                error = RateLimitExceededError(category.value, len(log), limit)
                logger.warning(f"User {platform}:{user_id} hit {category.value} rate limit: {len(log)}/{limit}")
                return RateLimitDecision(False, len(log), limit, max(retry_after, 0.0), error)

            global_limit = self.global_daily_limits.get(category, 0)
            used_today = self._daily.get(category, 0)
            if global_limit and used_today >= global_limit:
                error = RateLimitExceededError(category.value, used_today, global_limit, scope="global")
                logger.warning(f"Global {category.value} daily limit reached: {used_today}/{global_limit}")
                return RateLimitDecision(False, used_today, global_limit, error=error)

            log.append(now)
            self._calls[key] = log
            self._daily[category] = used_today + 1
            return RateLimitDecision(True, len(log), limit)

    def cleanup(self) -> int:
        """Drop keys whose window has fully elapsed. Returns the number removed."""
        with self._lock:
            return self._cleanup_locked(self._clock())

    def usage_stats(self) -> dict:
        with self._lock:
            self._reset_daily_if_needed()
            return {
                "day": self._day,
                "daily": {c.value: self._daily.get(c, 0) for c in Category},
                "global_limits": {c.value: self.global_daily_limits.get(c, 0) for c in Category},
                "user_limits": {c.value: self.user_limits.get(c, 0) for c in Category},
                "window_seconds": self.window_seconds,
                "active_keys": len(self._calls),
            }

    def reset(self) -> None:
        with self._lock:
            self._calls.clear()
            self._daily.clear()


def build_rate_limiter() -> RateLimiter:
    return RateLimiter(
        user_limits={
            Category.CRYPTO: settings.RATE_LIMIT_CRYPTO,
            Category.WEATHER: settings.RATE_LIMIT_WEATHER,
            Category.NEWS: settings.RATE_LIMIT_NEWS,
        },
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        global_daily_limits={
            Category.CRYPTO: settings.GLOBAL_DAILY_LIMIT_CRYPTO,
            Category.WEATHER: settings.GLOBAL_DAILY_LIMIT_WEATHER,
            Category.NEWS: settings.GLOBAL_DAILY_LIMIT_NEWS,
        },
    )


rate_limiter = build_rate_limiter()
