# models/message.py

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class MessageCreate(BaseModel):
    """Reply inside an existing conversation."""
    content: str = Field(..., description="Message body")

    @field_validator("content")
    def content_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class ConversationStart(MessageCreate):
    """First contact from a buyer about a listing."""
    property_id: str = Field(..., description="Listing the conversation is about")


class MessageRead(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str
    is_read: bool = False
    created_at: Optional[datetime] = None


class ConversationRead(BaseModel):
    id: str
    property_id: Optional[str] = None
    buyer_id: str
    seller_id: str
    last_message_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ConversationThread(BaseModel):
    conversation: ConversationRead
    messages: List[MessageRead] = Field(default_factory=list)
