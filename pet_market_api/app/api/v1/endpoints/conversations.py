"""
Conversation list endpoint for API v1.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from pet_market_api.app.core.auth import get_optional_user
from pet_market_api.app.schemas.message import ConversationListEnvelope
from pet_market_api.app.services.conversation_service import ConversationService


router = APIRouter()


@router.get("", response_model=ConversationListEnvelope)
async def list_conversations(current_user: dict = Depends(get_optional_user)) -> Dict[str, Any]:
    """List the caller's threads with the other participant and the last message.

    ``unreadCount`` is always 0.
    """
    return {"conversations": await ConversationService.list_conversations(current_user)}
