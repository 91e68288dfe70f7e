"""
Message endpoints for API v1.

Signed-in users can message each other about a listing and read the
thread they share with another user.  A pair of users has a single
thread covering all listings they have discussed.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from pet_market_api.app.core.auth import get_optional_user
from pet_market_api.app.schemas.message import MessageCreate, MessageEnvelope, ThreadEnvelope
from pet_market_api.app.services.conversation_service import ConversationService


router = APIRouter()


@router.post("", response_model=MessageEnvelope, status_code=status.HTTP_201_CREATED)
async def send_message(body: MessageCreate, current_user: dict = Depends(get_optional_user)) -> Dict[str, Any]:
    """Send a message; ``petId``, ``recipientId`` and ``content`` are required."""
    message = await ConversationService.send(current_user, body.pet_id, body.recipient_id, body.content)
    return {"message": message}


@router.get("/{other_user_id}", response_model=ThreadEnvelope)
async def get_thread(other_user_id: str, current_user: dict = Depends(get_optional_user)) -> Dict[str, Any]:
    """Return the caller's thread with ``other_user_id``, oldest message first."""
    return {"messages": await ConversationService.get_thread(current_user, other_user_id)}
