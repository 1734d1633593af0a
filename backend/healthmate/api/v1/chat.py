import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from healthmate.core.config import settings
from healthmate.core.dependencies import get_current_user
from healthmate.core.errors import RateLimited
from healthmate.db.session import get_db
from healthmate.models.user import User
from healthmate.schemas.chat import ChatRequest, ChatResponse
from healthmate.services.chat_service import process_chat_message
from healthmate.services.llm_gateway import LLMGateway, get_llm_gateway
from healthmate.utils.rate_limit import SlidingWindowRateLimiter

logger = logging.getLogger("healthmate.chat")

chat_rate_limiter = SlidingWindowRateLimiter(
    max_attempts=settings.CHAT_RATE_LIMIT_MAX_ATTEMPTS,
    window_seconds=settings.CHAT_RATE_LIMIT_WINDOW_SECONDS,
    block_seconds=settings.CHAT_RATE_LIMIT_BLOCK_SECONDS,
)

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gateway: LLMGateway = Depends(get_llm_gateway),
):
    if not chat_rate_limiter.check(current_user.id):
        logger.info("Chat rate limit hit for user %s", current_user.id)
        raise RateLimited(
            f"User {current_user.id} exceeded chat rate limit",
            user_message="You're sending messages too quickly. Please wait a moment and try again.",
        )

    try:
        result = await process_chat_message(
            db,
            user_id=current_user.id,
            conversation_id=payload.conversation_id,
            message=payload.message,
            gateway=gateway,
            language=payload.language or current_user.preferred_language or "en",
        )
    except Exception:
        db.rollback()
        raise

    response.headers["X-RateLimit-Remaining"] = str(chat_rate_limiter.remaining(current_user.id))

    return ChatResponse(
        conversation_id=result["conversation_id"],
        chat_message_id=result["assistant_message_id"],
        reply=result["reply"],
        intent=result["intent"],
        verified=result["verified"],
        sources=result["sources"],
        error_code=result["error_code"],
    )
