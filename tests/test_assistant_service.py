"""Tests for the base assistant call and conversation memory."""

from unittest.mock import AsyncMock, patch

import pytest

from aurabot.core.errors import AssistantInvocationError
from aurabot.core.prompts import EMPTY_MESSAGE_REPLY, persona_prompt
from aurabot.services import assistant_service
from aurabot.services.memory_service import ConversationMemory, memory


class TestConversationMemory:
    def test_keeps_last_n_messages(self):
        mem = ConversationMemory(max_messages=3, ttl_seconds=60)
        for i in range(5):
            mem.append("u1", "telegram", "user", f"m{i}")
        assert [m["content"] for m in mem.get_history("u1", "telegram")] == ["m2", "m3", "m4"]

    def test_scoped_by_platform(self):
        mem = ConversationMemory()
        mem.record_exchange("u1", "telegram", "hi", "yo")
        assert mem.get_history("u1", "twitch") == []
        assert len(mem.get_history("u1", "telegram")) == 2

    def test_expires(self):
        mem = ConversationMemory(ttl_seconds=0)
        mem.append("u1", "telegram", "user", "hi")
        with patch("aurabot.services.memory_service.time.time", return_value=10**12):
            assert mem.get_history("u1", "telegram") == []

    def test_new_conversation_evicts_expired_ones(self):
        mem = ConversationMemory(ttl_seconds=60)
        with patch("aurabot.services.memory_service.time.time", return_value=1000.0):
            for i in range(500):
                mem.record_exchange(f"u{i}", "telegram", "hi", "yo")
        assert len(mem._conversations) == 500

        with patch("aurabot.services.memory_service.time.time", return_value=2000.0):
            mem.append("fresh", "telegram", "user", "hi")
        assert list(mem._conversations) == ["chat:telegram:fresh"]

    def test_live_conversations_survive_eviction(self):
        mem = ConversationMemory(ttl_seconds=60)
        with patch("aurabot.services.memory_service.time.time", return_value=1000.0):
            mem.append("u1", "telegram", "user", "hi")
        with patch("aurabot.services.memory_service.time.time", return_value=1030.0):
            mem.append("u2", "telegram", "user", "yo")
            assert mem.get_history("u1", "telegram") == [{"role": "user", "content": "hi"}]

    def test_history_is_a_copy(self):
        mem = ConversationMemory()
        mem.append("u1", "telegram", "user", "hi")
        mem.get_history("u1", "telegram")[0]["content"] = "tampered"
        assert mem.get_history("u1", "telegram")[0]["content"] == "hi"


@pytest.mark.asyncio
async def test_invoke_uses_persona_and_records_exchange():
    with patch.object(assistant_service, "llm_call", AsyncMock(return_value="yo what's good 🔥")) as llm:
        reply = await assistant_service.invoke("u1", "hey", "telegram", None, safe_mode=True)

    assert reply == "yo what's good 🔥"
    messages = llm.await_args.args[0]
    assert messages[0] == {"role": "system", "content": persona_prompt(True)}
    assert messages[-1] == {"role": "user", "content": "hey"}
    assert memory.get_history("u1", "telegram") == [
        {"role": "user", "content": "hey"},
        {"role": "assistant", "content": "yo what's good 🔥"},
    ]


@pytest.mark.asyncio
async def test_invoke_replays_history():
    memory.record_exchange("u1", "telegram", "first", "reply one")
    with patch.object(assistant_service, "llm_call", AsyncMock(return_value="reply two")) as llm:
        await assistant_service.invoke("u1", "second", "telegram")

    roles = [m["role"] for m in llm.await_args.args[0]]
    assert roles == ["system", "user", "assistant", "user"]


@pytest.mark.asyncio
async def test_explicit_prompt_and_remember_as():
    with patch.object(assistant_service, "llm_call", AsyncMock(return_value="btc 113k")) as llm:
        await assistant_service.invoke(
            "u1", "btc? [LIVE DATA: ...]", "telegram",
            system_prompt="custom prompt", remember_as="btc?",
        )

    assert llm.await_args.args[0][0]["content"] == "custom prompt"
    assert memory.get_history("u1", "telegram")[0]["content"] == "btc?"


@pytest.mark.asyncio
async def test_blank_message_short_circuits():
    with patch.object(assistant_service, "llm_call", AsyncMock()) as llm:
        reply = await assistant_service.invoke("u1", "   ", "telegram")
    assert reply == EMPTY_MESSAGE_REPLY
    llm.assert_not_awaited()


@pytest.mark.asyncio
async def test_no_llm_reply_raises():
    with patch.object(assistant_service, "llm_call", AsyncMock(return_value=None)):
        with pytest.raises(AssistantInvocationError):
            await assistant_service.invoke("u1", "hey", "telegram")
    assert memory.get_history("u1", "telegram") == []
