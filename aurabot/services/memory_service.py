"""Short-term conversation memory: the last few turns per user and platform.

The whole conversation for a key expires once it has been idle for
MEMORY_TTL_SECONDS, mirroring a Redis list with a refreshed TTL.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass

from aurabot.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class _Conversation:
    messages: deque
    expires_at: float


class ConversationMemory:
    def __init__(self, max_messages: int = 5, ttl_seconds: int = 3600):
        self.max_messages = max_messages
        self.ttl_seconds = ttl_seconds
        self._conversations: dict[str, _Conversation] = {}

    @staticmethod
    def _key(user_id: str, platform: str) -> str:
        return f"chat:{platform}:{user_id}"

    def get_history(self, user_id: str, platform: str) -> list[dict]:
        """Return prior turns oldest-first as OpenAI-style messages."""
        key = self._key(user_id, platform)
        convo = self._conversations.get(key)
        if convo is None:
            return []
        if time.time() > convo.expires_at:
            self._conversations.pop(key, None)
            return []
        return [dict(m) for m in convo.messages]

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, convo in self._conversations.items() if now > convo.expires_at]
        for key in expired:
            del self._conversations[key]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired conversations")

    def append(self, user_id: str, platform: str, role: str, content: str) -> None:
        key = self._key(user_id, platform)
        now = time.time()
        convo = self._conversations.get(key)
        if convo is None or now > convo.expires_at:
            self._evict_expired(now)
            convo = _Conversation(messages=deque(maxlen=self.max_messages), expires_at=0.0)
            self._conversations[key] = convo
        convo.messages.append({"role": role, "content": content})
        convo.expires_at = now + self.ttl_seconds

    def record_exchange(self, user_id: str, platform: str, user_message: str, reply: str) -> None:
        self.append(user_id, platform, "user", user_message)
        self.append(user_id, platform, "assistant", reply)

    def clear(self) -> None:
        self._conversations.clear()


memory = ConversationMemory(
    max_messages=settings.MEMORY_MAX_MESSAGES,
    ttl_seconds=settings.MEMORY_TTL_SECONDS,
)
