import logging
from collections import deque
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from healthmate.core.errors import HealthMateError, ValidationError
from healthmate.models.chat_message import ChatMessage
from healthmate.models.conversation import Conversation
from healthmate.services.conversation_router import Intent, route_message
from healthmate.services.llm_gateway import (
    HISTORY_WINDOW,
    MAX_MESSAGE_CHARS,
    SUPPORTED_LANGUAGES,
    AssistantReply,
    HistoryEntry,
    LLMGateway,
    UnverifiedReply,
)
from healthmate.utils.conversation_title import generate_conversation_title

logger = logging.getLogger("healthmate.chat")


WELCOME_MESSAGE = (
    "Hello! I'm AI HealthMate, your Public Health Assistant. 🏥\n\n"
    "I can help you with:\n"
    "• 📅 **Book appointments** - \"Book appointment with cardiologist\"\n"
    "• 🔍 **Find doctors** - \"Find doctor near me\"\n"
    "• 🚨 **Emergency help** - \"Emergency\" or \"Ambulance\"\n"
    "• 💬 **Health questions** - Ask about symptoms, treatments, wellness\n\n"
    "How can I assist you today?"
)


# ------------------------------------------------------------------
# Conversation window
# ------------------------------------------------------------------

class ConversationWindow:
    """
    The most recent `size` messages, oldest first. Appending past the
    limit drops the oldest entry; order is never changed.
    """

    def __init__(self, size: int = HISTORY_WINDOW, entries: Iterable[HistoryEntry] = ()):
        self.size = size
        self._entries: deque = deque(entries, maxlen=size)

    @classmethod
    def from_messages(cls, messages: Iterable[ChatMessage], size: int = HISTORY_WINDOW) -> "ConversationWindow":
        return cls(size, (HistoryEntry(role=m.role, content=m.content) for m in messages))

    def append(self, role: str, content: str) -> None:
        self._entries.append(HistoryEntry(role=role, content=content))

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


# ------------------------------------------------------------------
# Chat session state
# ------------------------------------------------------------------

class ChatSession:
    """
    Explicit state for one conversation.

    Turn transitions: append user message -> start loading -> append
    assistant reply or error -> finish loading. Loading is cleared on
    every path, including failures.
    """

    def __init__(self, conversation_id: Optional[int] = None, window: Optional[ConversationWindow] = None):
        self.conversation_id = conversation_id
        self.window = window or ConversationWindow()
        self.is_loading = False
        self.last_error: Optional[HealthMateError] = None
        self._awaiting_reply = False

    def context(self) -> List[HistoryEntry]:
        return self.window.entries()

    def append_user_message(self, content: str) -> None:
        if self.is_loading:
            raise RuntimeError("A reply is already in progress for this conversation")
        self.window.append("user", content)
        self._awaiting_reply = True

    def start_loading(self) -> None:
        if not self._awaiting_reply:
            raise RuntimeError("No user message is waiting for a reply")
        self.is_loading = True
        self.last_error = None

    def append_reply(self, reply: AssistantReply) -> None:
        self.window.append("assistant", reply.text)
        self._awaiting_reply = False

    def append_error(self, error: HealthMateError) -> None:
        self.last_error = error
        self.window.append("assistant", error.user_message)
        self._awaiting_reply = False

    def finish_loading(self) -> None:
        self.is_loading = False


# ------------------------------------------------------------------
# Conversation lifecycle
# ------------------------------------------------------------------

def get_or_create_conversation(
    db: Session,
    user_id: int,
    conversation_id: Optional[int] = None,
    language: str = "en",
) -> Conversation:
    if conversation_id:
        conversation = (
            db.query(Conversation)
            .filter(
                Conversation.id == conversation_id,
                Conversation.user_id == user_id,
            )
            .first()
        )
        if conversation:
            return conversation

    conversation = Conversation(user_id=user_id, language=language)
    db.add(conversation)
    return conversation


def save_message(
    db: Session,
    *,
    user_id: int,
    conversation_id: int,
    role: str,
    content: str,
    meta: Optional[Dict[str, Any]] = None,
) -> ChatMessage:
    message = ChatMessage(
        user_id=user_id,
        conversation_id=conversation_id,
        role=role,
        content=content,
        meta=meta,
    )
    db.add(message)

    if role == "user":
        conversation = (
            db.query(Conversation)
            .filter(
                Conversation.id == conversation_id,
                Conversation.user_id == user_id,
            )
            .first()
        )
        if conversation and not conversation.title:
            conversation.title = generate_conversation_title(content)

    return message


def get_conversation_history(
    db: Session,
    *,
    conversation_id: int,
    limit: int = HISTORY_WINDOW,
) -> List[ChatMessage]:
    """
    The `limit` most recent messages, returned oldest first.
    """
    recent = (
        db.query(ChatMessage)
        .filter(ChatMessage.conversation_id == conversation_id)
        .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .limit(limit)
        .all()
    )
    return list(reversed(recent))


def validate_chat_message(message: Any) -> str:
    if not isinstance(message, str) or not message.strip():
        raise ValidationError("Empty chat message", user_message="Please type a message.")
    if len(message) > MAX_MESSAGE_CHARS:
        raise ValidationError(
            f"Chat message is {len(message)} characters",
            user_message=f"Please keep your message under {MAX_MESSAGE_CHARS} characters.",
        )
    return message


def _reply_meta(intent: Intent, reply: AssistantReply) -> Dict[str, Any]:
    return {
        "intent": intent.value,
        "verified": reply.verified,
        "sources": list(reply.sources),
    }


# ------------------------------------------------------------------
# Main chat processor
# ------------------------------------------------------------------

async def process_chat_message(
    db: Session,
    *,
    user_id: int,
    conversation_id: Optional[int],
    message: str,
    gateway: LLMGateway,
    language: str = "en",
) -> Dict[str, Any]:
    validate_chat_message(message)
    if language not in SUPPORTED_LANGUAGES:
        raise ValidationError(f"Unsupported language {language!r}", user_message="Invalid language selection.")

    conversation = get_or_create_conversation(db, user_id, conversation_id, language)
    db.flush()

    # context is taken before the new message is stored
    history = get_conversation_history(db, conversation_id=conversation.id)
    session = ChatSession(conversation.id, ConversationWindow.from_messages(history))
    context = session.context()

    user_msg = save_message(
        db=db,
        user_id=user_id,
        conversation_id=conversation.id,
        role="user",
        content=message,
    )
    session.append_user_message(message)
    db.flush()

    decision = route_message(message)
    meta: Dict[str, Any]

    session.start_loading()
    try:
        if decision.needs_llm:
            reply = await gateway.answer(message, context, language)
        else:
            reply = UnverifiedReply(text=decision.canned_reply)

        session.append_reply(reply)
        reply_text = reply.text
        meta = _reply_meta(decision.intent, reply)

    except HealthMateError as e:
        logger.warning(
            "Chat reply failed for conversation %s (%s): %s",
            conversation.id,
            e.code,
            e,
        )
        session.append_error(e)
        reply_text = e.user_message
        meta = {
            "intent": decision.intent.value,
            "verified": False,
            "sources": [],
            "error_code": e.code,
        }
    finally:
        session.finish_loading()

    assistant_msg = save_message(
        db=db,
        user_id=user_id,
        conversation_id=conversation.id,
        role="assistant",
        content=reply_text,
        meta=meta,
    )

    db.commit()

    return {
        "conversation_id": conversation.id,
        "user_message_id": user_msg.id,
        "assistant_message_id": assistant_msg.id,
        "reply": reply_text,
        "intent": decision.intent.value,
        "verified": meta["verified"],
        "sources": meta["sources"],
        "error_code": meta.get("error_code"),
    }
