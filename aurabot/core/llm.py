"""Centralised chat LLM wrapper: Gemini primary → Gemini fallback model → Groq (emergency)."""
import asyncio
import logging
import re

from google import genai
from google.genai import types
from groq import AsyncGroq

from aurabot.core.config import settings

logger = logging.getLogger(__name__)

# --- Clients ---
_gemini_client = genai.Client(api_key=settings.GEMINI_API_KEY)
_groq_client = AsyncGroq(api_key=settings.GROQ_API_KEY)


def _strip_markdown(text: str) -> str:
    """Remove markdown formatting that renders as raw characters in chat."""
    text = re.sub(r'\*\*(.+?)\*\*', r'\1', text)  # **bold**
    text = re.sub(r'\*(.+?)\*', r'\1', text)       # *italic*
    text = re.sub(r'__(.+?)__', r'\1', text)       # __underline__
    text = re.sub(r'^#{1,6}\s+', '', text, flags=re.MULTILINE)  # # headers
    text = re.sub(r'```[\s\S]*?```', '', text)     # ```code blocks```
    text = re.sub(r'`(.+?)`', r'\1', text)         # `inline code`
    text = re.sub(r'\[(.+?)\]\(.+?\)', r'\1', text)  # [links](url)
    return text.strip()


def _convert_messages(messages: list[dict]) -> tuple[str | None, list[types.Content]]:
    """Convert OpenAI-style messages to Gemini (system_instruction, contents).

    Assistant turns become the "model" role so history replays as a dialogue.
    """
    system_parts = []
    contents = []

    for msg in messages:
        role = msg.get("role", "user")
        text = msg.get("content", "")
        if role == "system":
            system_parts.append(text)
        else:
            contents.append(types.Content(
                role="model" if role == "assistant" else "user",
                parts=[types.Part(text=text)],
            ))

    system_text = "\n\n".join(system_parts) if system_parts else None
    return system_text, contents


async def _gemini_call(
    messages: list[dict],
    timeout: float,
    temperature: float,
    max_tokens: int | None,
    model: str,
) -> str | None:
    """Call a Gemini model with 1 retry."""
    system_text, contents = _convert_messages(messages)

    config_kwargs: dict = {"temperature": temperature}
    if system_text:
        config_kwargs["system_instruction"] = system_text
    if max_tokens:
        config_kwargs["max_output_tokens"] = max_tokens

    config = types.GenerateContentConfig(**config_kwargs)

    for attempt in range(2):
        try:
            response = await asyncio.wait_for(
                _gemini_client.aio.models.generate_content(
                    model=model,
                    contents=contents,
                    config=config,
                ),
                timeout=timeout,
            )
            text = _strip_markdown(response.text or "")
            if text:
                return text
            logger.warning(f"Gemini ({model}) returned an empty response")
            return None
        except Exception as e:
            if attempt == 0:
                logger.warning(f"Gemini ({model}) attempt 1 failed ({e}), retrying in 1s...")
                await asyncio.sleep(1)
            else:
                logger.warning(f"Gemini ({model}) failed after 2 attempts: {e}")
    return None


async def _groq_call(
    messages: list[dict],
    timeout: float,
    temperature: float,
    max_tokens: int | None,
) -> str | None:
    """Call Groq as emergency fallback."""
    call_kwargs: dict = dict(
        model=settings.GROQ_MODEL,
        messages=messages,
        temperature=temperature,
    )
    if max_tokens:
        call_kwargs["max_tokens"] = max_tokens

    for attempt in range(2):
        try:
            result = await asyncio.wait_for(
                _groq_client.chat.completions.create(**call_kwargs),
                timeout=timeout,
            )
            return _strip_markdown(result.choices[0].message.content or "") or None
        except Exception as e:
            if attempt == 0:
                logger.warning(f"Groq emergency attempt 1 failed ({e}), retrying in 1s...")
                await asyncio.sleep(1)
            else:
                logger.error(f"Groq emergency failed after 2 attempts: {e}")
    return None


async def llm_call(
    messages: list[dict],
    timeout: float | None = None,
    temperature: float = 0.9,
    max_tokens: int | None = None,
) -> str | None:
    """Call LLM: Gemini primary → Gemini fallback → Groq (emergency) → None.

    Returns the reply text, or None when every provider failed.
    """
    timeout = timeout or settings.LLM_TIMEOUT_SECONDS

    # 1. Primary Gemini model
    result = await _gemini_call(messages, timeout, temperature, max_tokens, settings.GEMINI_MODEL)
    if result:
        return result

    # 2. Fallback Gemini model
    logger.info(f"Falling back to {settings.GEMINI_MODEL_FALLBACK}...")
    result = await _gemini_call(messages, timeout, temperature, max_tokens, settings.GEMINI_MODEL_FALLBACK)
    if result:
        return result

    # 3. Emergency fallback to Groq
    logger.info("Emergency fallback to Groq...")
    result = await _groq_call(messages, timeout, temperature, max_tokens)
    if result:
        return result

    logger.error("All LLM providers failed")
    return None
