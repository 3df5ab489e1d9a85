"""Base persona assistant: one LLM call with short-term conversation memory."""

import logging
from typing import Optional

from aurabot.core.errors import AssistantInvocationError
from aurabot.core.llm import llm_call
from aurabot.core.prompts import EMPTY_MESSAGE_REPLY, persona_prompt
from aurabot.services.memory_service import memory

logger = logging.getLogger(__name__)

REPLY_MAX_TOKENS = 120
REPLY_TEMPERATURE = 0.9


async def invoke(
    user_id: str,
    message: str,
    platform: str = "telegram",
    conversation_id: Optional[str] = None,
    safe_mode: bool = True,
    system_prompt: Optional[str] = None,
    remember_as: Optional[str] = None,
) -> str:
    """Ask the persona model for a reply.

    ``system_prompt`` overrides the persona for this call only. ``remember_as``
    is what gets written to memory in place of ``message`` (the enhancer passes
    the raw utterance so stale live-data annotations are not replayed).

    Raises AssistantInvocationError when no LLM provider produced a reply.
    """
    if not message or not message.strip():
        return EMPTY_MESSAGE_REPLY

    prompt = system_prompt if system_prompt is not None else persona_prompt(safe_mode)
    history = memory.get_history(user_id, platform)
    messages = [
        {"role": "system", "content": prompt},
        *history,
        {"role": "user", "content": message},
    ]

    reply = await llm_call(messages, temperature=REPLY_TEMPERATURE, max_tokens=REPLY_MAX_TOKENS)
    if not reply:
        raise AssistantInvocationError(
            f"No reply for {platform}:{user_id} (conversation {conversation_id or '-'})"
        )

    try:
        memory.record_exchange(user_id, platform, remember_as or message, reply)
    except Exception as e:
        logger.error(f"Error storing conversation for {platform}:{user_id}: {e}")

    return reply
