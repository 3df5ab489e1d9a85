"""Per-user message cooldowns so one chatter can't spam the bot.

Each platform has its own cooldown; unknown platforms use the default.
Entries older than the retention period are swept as new users arrive.
"""

import logging
import threading
import time
from typing import Callable, Optional

from aurabot.core.config import settings

logger = logging.getLogger(__name__)


class UserCooldowns:
    def __init__(
        self,
        durations: dict[str, float],
        default_seconds: float,
        retention_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self.durations = dict(durations)
        self.default_seconds = default_seconds
        self.retention_seconds = retention_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._last_used: dict[tuple[str, str], float] = {}

    def duration_for(self, platform: str) -> float:
        return self.durations.get(platform, self.default_seconds)

    def _remaining_locked(self, key: tuple[str, str], now: float) -> float:
        last_used = self._last_used.get(key)
        if last_used is None:
            return 0.0
        return max(0.0, last_used + self.duration_for(key[0]) - now)

    def remaining(self, user_id: str, platform: str) -> float:
        """Seconds until this user may send again; 0 when they're free."""
        with self._lock:
            return self._remaining_locked((platform, str(user_id)), self._clock())

    def is_on_cooldown(self, user_id: str, platform: str) -> bool:
        return self.remaining(user_id, platform) > 0

    def try_start(self, user_id: str, platform: str) -> float:
        """Start a cooldown if none is running.

        Returns 0 when the message may go through, otherwise the seconds left.
        """
        key = (platform, str(user_id))
        with self._lock:
            now = self._clock()
            left = self._remaining_locked(key, now)
            if left > 0:
                return left
            if key not in self._last_used:
                self._cleanup_locked(now)
            self._last_used[key] = now
            return 0.0

    def _cleanup_locked(self, now: float) -> int:
        cutoff = now - self.retention_seconds
        stale = [key for key, last_used in self._last_used.items() if last_used < cutoff]
        for key in stale:
            del self._last_used[key]
        if stale:
            logger.debug(f"Cleaned up {len(stale)} old cooldown entries")
        return len(stale)

    def cleanup(self) -> int:
        with self._lock:
            return self._cleanup_locked(self._clock())

    def clear(self) -> None:
        with self._lock:
            self._last_used.clear()

    @property
    def active(self) -> int:
        return len(self._last_used)


def build_cooldowns(clock: Optional[Callable[[], float]] = None) -> UserCooldowns:
    return UserCooldowns(
        durations={
            "telegram": settings.COOLDOWN_TELEGRAM_SECONDS,
            "twitch": settings.COOLDOWN_TWITCH_SECONDS,
            "kick": settings.COOLDOWN_KICK_SECONDS,
        },
        default_seconds=settings.COOLDOWN_DEFAULT_SECONDS,
        retention_seconds=settings.COOLDOWN_RETENTION_SECONDS,
        clock=clock or time.time,
    )


cooldowns = build_cooldowns()
