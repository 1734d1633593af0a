from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import List, Optional


class ConversationOut(BaseModel):
    id: int
    title: str | None
    language: str
    started_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ChatMessageOut(BaseModel):
    id: int
    role: str
    content: str
    created_at: datetime

    verified: bool = False
    sources: List[str] = []

    model_config = ConfigDict(from_attributes=True)


class ConversationDetailOut(BaseModel):
    conversation: ConversationOut
    messages: List[ChatMessageOut]
    welcome_message: Optional[str] = None
