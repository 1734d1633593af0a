from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from healthmate.core.dependencies import get_current_user
from healthmate.core.errors import NotFound
from healthmate.db.session import get_db
from healthmate.models.chat_message import ChatMessage
from healthmate.models.conversation import Conversation
from healthmate.schemas.conversation import (
    ConversationOut,
    ConversationDetailOut,
    ChatMessageOut,
)
from healthmate.services.chat_service import WELCOME_MESSAGE

router = APIRouter(prefix="/conversations", tags=["Conversations"])


def _get_own_conversation(db: Session, conversation_id: int, user_id: int) -> Conversation:
    conversation = (
        db.query(Conversation)
        .filter(
            Conversation.id == conversation_id,
            Conversation.user_id == user_id,
        )
        .first()
    )
    if not conversation:
        raise NotFound("Conversation not found", user_message="Conversation not found.")
    return conversation


# List conversations (most recent first)
@router.get("", response_model=list[ConversationOut])
def list_conversations(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return (
        db.query(Conversation)
        .filter(Conversation.user_id == current_user.id)
        .order_by(Conversation.started_at.desc(), Conversation.id.desc())
        .all()
    )


@router.get("/welcome")
def welcome():
    return {"message": WELCOME_MESSAGE}


# Get a conversation + messages
@router.get("/{conversation_id}", response_model=ConversationDetailOut)
def get_conversation(
    conversation_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    conversation = _get_own_conversation(db, conversation_id, current_user.id)

    messages = (
        db.query(ChatMessage)
        .filter(ChatMessage.conversation_id == conversation.id)
        .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        .all()
    )

    return {
        "conversation": ConversationOut.model_validate(conversation),
        "messages": [ChatMessageOut.model_validate(m) for m in messages],
        "welcome_message": WELCOME_MESSAGE,
    }


@router.delete("/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_conversation(
    conversation_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    conversation = _get_own_conversation(db, conversation_id, current_user.id)
    db.delete(conversation)
    db.commit()
