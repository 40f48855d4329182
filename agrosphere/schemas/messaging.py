from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from agrosphere.schemas.base import BaseSchema


class MessageCreateIn(BaseModel):
    conversation_id: int
    content: str


class ConversationCreateIn(BaseModel):
    participant_id: int


class ConversationOut(BaseSchema):
    id: int
    created_at: datetime
    last_message_at: Optional[datetime] = None
    participant_ids: list[int]


class MessageOut(BaseSchema):
    id: int
    conversation_id: int
    sender_id: int
    sender_name: str
    content: str
    is_read: bool
    created_at: datetime


class ConversationSummaryOut(BaseSchema):
    conversation_id: int
    created_at: datetime
    last_message_at: Optional[datetime] = None
    last_message_content: Optional[str] = None
    last_message_created_at: Optional[datetime] = None
    unread_count: int
    other_user_id: Optional[int] = None
    other_user_name: Optional[str] = None


class MarkReadOut(BaseModel):
    updated: int


class UnreadCountOut(BaseModel):
    unread_count: int
