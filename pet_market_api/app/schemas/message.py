"""
Pydantic models for messages and conversation summaries.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .user import UserProfile


class MessageCreate(BaseModel):
    """Payload for sending a message about a listing.

    All three fields are required; absence is reported by the service
    as a 400 error.  Numeric ids are accepted and stored as strings.
    """

    pet_id: Optional[str] = Field(None, alias="petId")
    recipient_id: Optional[str] = Field(None, alias="recipientId")
    content: Optional[str] = Field(None, examples=["Is Max still available?"])

    model_config = {
        "populate_by_name": True,
        "coerce_numbers_to_str": True,
    }


class MessageRead(BaseModel):
    id: str
    pet_id: str = Field(..., alias="petId")
    sender_id: str = Field(..., alias="senderId")
    recipient_id: str = Field(..., alias="recipientId")
    content: str
    read: bool = False
    created_at: str = Field(..., alias="createdAt")

    model_config = {
        "populate_by_name": True,
    }


class MessageEnvelope(BaseModel):
    message: MessageRead


class ThreadEnvelope(BaseModel):
    messages: List[MessageRead]


class ConversationSummary(BaseModel):
    other_user: Optional[UserProfile] = Field(None, alias="otherUser")
    last_message: Optional[MessageRead] = Field(None, alias="lastMessage")
    unread_count: int = Field(0, alias="unreadCount")

    model_config = {
        "populate_by_name": True,
    }


class ConversationListEnvelope(BaseModel):
    conversations: List[ConversationSummary]
