import logging
import math

from fastapi import FastAPI
from pydantic import BaseModel, Field

from aurabot.core.config import settings
from aurabot.core import rate_limit
from aurabot.core.prompts import COOLDOWN_REPLY
from aurabot.services import cooldown_service
from aurabot.services.reply_service import get_reply

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)


class ChatRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    message: str
    platform: str = "web"
    conversation_id: str | None = None
    safe_mode: bool = True


class ChatResponse(BaseModel):
    reply: str


@app.post("/chat", response_model=ChatResponse)
async def chat(req: ChatRequest):
    wait = cooldown_service.cooldowns.try_start(req.user_id, req.platform)
    if wait:
        logger.info(f"{req.platform}:{req.user_id} on cooldown for {wait:.1f}s")
        return ChatResponse(reply=COOLDOWN_REPLY.format(seconds=math.ceil(wait)))

    reply = await get_reply(
        req.user_id,
        req.message,
        platform=req.platform,
        conversation_id=req.conversation_id,
        safe_mode=req.safe_mode,
    )
    return ChatResponse(reply=reply)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/usage")
async def usage():
    rate_limit.rate_limiter.cleanup()
    cooldown_service.cooldowns.cleanup()
    stats = rate_limit.rate_limiter.usage_stats()
    stats["active_cooldowns"] = cooldown_service.cooldowns.active
    return stats
