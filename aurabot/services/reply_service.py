"""Reply composition: inject live data into the message and the persona prompt, then delegate.

The effective prompt is built as a local value and handed to the assistant
for this call only, so concurrent replies for different users never see each
other's injected context.
"""

import logging
from typing import Optional

from aurabot.core.errors import AssistantInvocationError
from aurabot.core.prompts import (
    ASSISTANT_DOWN_REPLY,
    CROSS_REFERENCE_INSTRUCTIONS,
    LIVE_DATA_INSTRUCTIONS,
    persona_prompt,
)
from aurabot.models.context import ContextBundle, CryptoQuote, WeatherReport
from aurabot.services import assistant_service, enhancer_service

logger = logging.getLogger(__name__)

HEADLINE_CHARS = 160


def format_price(price_usd: float) -> str:
    if price_usd >= 1000:
        return f"${price_usd:,.0f}"
    return f"${price_usd:,.2f}"


def describe_change(change_pct: float) -> str:
    direction = "up" if change_pct > 0 else "down" if change_pct < 0 else "flat"
    if direction == "flat":
        return "flat in 24h"
    return f"{direction} {abs(change_pct):.2f}% in 24h"


def describe_crypto(quote: CryptoQuote) -> str:
    return f"{quote.name} ({quote.symbol}) is {format_price(quote.price_usd)}, {describe_change(quote.change_24h_pct)}"


def describe_weather(report: WeatherReport) -> str:
    line = f"{report.city} is {report.temperature_c:.0f}°C, {report.description}"
    if report.feels_like_c is not None:
        line += f" (feels like {report.feels_like_c:.0f}°C)"
    return line


def build_injected_message(utterance: str, bundle: ContextBundle) -> str:
    """Append the authoritative values to the user's message."""
    facts = []
    if bundle.crypto_quote:
        facts.append(describe_crypto(bundle.crypto_quote))
    if bundle.weather:
        facts.append(f"Weather: {describe_weather(bundle.weather)}")
    if bundle.search_summary:
        headline = bundle.search_summary.text.splitlines()[0][:HEADLINE_CHARS]
        facts.append(f"Top result: {headline}")
    return f"{utterance} [LIVE DATA: {'; '.join(facts)}]"


def build_injected_prompt(base_prompt: str, bundle: ContextBundle) -> str:
    """Persona prompt plus the raw data and the facts-first instructions."""
    lines = []
    if bundle.crypto_quote:
        q = bundle.crypto_quote
        sign = "+" if q.change_24h_pct > 0 else ""
        lines.append(f"[CRYPTO]: {q.name} {format_price(q.price_usd)}, {sign}{q.change_24h_pct:.2f}% 24h change")
    if bundle.weather:
        lines.append(f"[WEATHER]: {describe_weather(bundle.weather)}")
    if bundle.search_summary:
        lines.append(f"[SEARCH RESULTS]:\n{bundle.search_summary.text}")

    prompt = base_prompt + LIVE_DATA_INSTRUCTIONS.format(data_block="\n".join(lines))
    if bundle.cross_reference:
        prompt += CROSS_REFERENCE_INSTRUCTIONS.format(
            categories=" + ".join(c.value for c in bundle.cross_reference)
        )
    return prompt


async def _plain_reply(
    user_id: str,
    utterance: str,
    platform: str,
    conversation_id: Optional[str],
    safe_mode: bool,
) -> str:
    return await assistant_service.invoke(
        user_id, utterance, platform, conversation_id, safe_mode,
        system_prompt=persona_prompt(safe_mode),
    )


async def compose(
    user_id: str,
    utterance: str,
    platform: str = "telegram",
    conversation_id: Optional[str] = None,
    safe_mode: bool = True,
) -> str:
    """Detect → enhance → delegate, falling back to a plain reply on any failure.

    Raises AssistantInvocationError only when the plain fallback fails too.
    """
    enhanced = False
    try:
        bundle = await enhancer_service.enhance(utterance, user_id, platform)
        if bundle is None or bundle.is_empty:
            return await _plain_reply(user_id, utterance, platform, conversation_id, safe_mode)

        enhanced = True
        logger.info(f"Using live data for {platform}:{user_id}: {[c.value for c in bundle.categories]}")
        message = build_injected_message(utterance, bundle)
        prompt = build_injected_prompt(persona_prompt(safe_mode), bundle)
        return await assistant_service.invoke(
            user_id, message, platform, conversation_id, safe_mode,
            system_prompt=prompt,
            remember_as=utterance,
        )
    except Exception:
        attempt = "Enhanced" if enhanced else "First"
        logger.exception(f"{attempt} reply attempt failed for {platform}:{user_id}, retrying as plain reply")

    return await _plain_reply(user_id, utterance, platform, conversation_id, safe_mode)


async def get_reply(
    user_id: str,
    utterance: str,
    platform: str = "telegram",
    conversation_id: Optional[str] = None,
    safe_mode: bool = True,
) -> str:
    """Caller-facing entry point. Always returns a reply string."""
    try:
        return await compose(user_id, utterance, platform, conversation_id, safe_mode)
    except AssistantInvocationError as e:
        logger.error(f"Assistant unavailable for {platform}:{user_id}: {e}")
        return ASSISTANT_DOWN_REPLY
