from pydantic import BaseModel
from typing import Optional, List

from healthmate.schemas.user import LanguageCode


class ChatRequest(BaseModel):
    # length is checked by the chat service so the user gets a friendly message
    message: str
    conversation_id: Optional[int] = None
    language: Optional[LanguageCode] = None


class ChatResponse(BaseModel):
    conversation_id: int
    chat_message_id: int
    reply: str
    intent: str

    verified: bool = False
    sources: List[str] = []

    # set when the reply is a friendly failure message
    error_code: Optional[str] = None
