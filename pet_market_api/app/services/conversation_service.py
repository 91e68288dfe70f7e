"""
Service layer for buyer/seller messages.

Messages are append-only documents under ``message:<id>``.  Each pair
of users shares exactly one thread, indexed under
``conversation:<a>:<b>`` where ``a`` and ``b`` are the two user ids in
lexicographic order, so the key is the same whoever writes first.  The
index holds message ids in send order regardless of which listing a
message refers to.

Appending to the index is a read-modify-write on a single key.  Two
concurrent sends between the same pair from different worker
processes can both read the same list and the later write drops the
other's id.  The message document itself is never lost, only its
thread membership.  No lock is taken here.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from pet_market_api.app.core import kv_store
from pet_market_api.app.core.auth import profile_key
from pet_market_api.app.core.errors import BadRequestError, InternalError, UnauthorizedError
from pet_market_api.app.core.timeutils import now_iso, parse_timestamp

logger = logging.getLogger(__name__)

MESSAGE_PREFIX = "message:"
CONVERSATION_PREFIX = "conversation:"


def message_key(message_id: str) -> str:
    return f"{MESSAGE_PREFIX}{message_id}"


def conversation_key(user_a: str, user_b: str) -> str:
    """Canonical index key for the unordered pair ``{user_a, user_b}``."""
    first, second = sorted((user_a, user_b))
    return f"{CONVERSATION_PREFIX}{first}:{second}"


def _require_caller(profile: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if profile is None:
        raise UnauthorizedError()
    return profile


def _resolve(key: str) -> Optional[Any]:
    """Best-effort lookup used for enrichment; failures become ``None``."""
    try:
        return kv_store.get(key)
    except InternalError:
        logger.warning("Could not resolve %s", key)
        return None


class ConversationService:
    """Message storage and per-pair threading."""

    @classmethod
    async def send(
        cls,
        sender: Optional[Dict[str, Any]],
        pet_id: Optional[str],
        recipient_id: Optional[str],
        content: Optional[str],
    ) -> Dict[str, Any]:
        """Store a message and append it to the pair's thread."""
        sender = _require_caller(sender)
        if not pet_id or not recipient_id or not content:
            raise BadRequestError("Pet ID, recipient ID, and message content are required")

        message_id = str(uuid.uuid4())
        message = {
            "id": message_id,
            "petId": pet_id,
            "senderId": sender["id"],
            "recipientId": recipient_id,
            "content": content,
            "read": False,
            "createdAt": now_iso(),
        }
        kv_store.set(message_key(message_id), message)

        key = conversation_key(sender["id"], recipient_id)
        thread = kv_store.get(key) or []
        thread.append(message_id)
        kv_store.set(key, thread)

        logger.info("Message %s sent from %s to %s", message_id, sender["id"], recipient_id)
        return message

    @classmethod
    async def get_thread(cls, caller: Optional[Dict[str, Any]], other_user_id: str) -> List[Dict[str, Any]]:
        """Return the messages exchanged with ``other_user_id``, oldest first.

        Ids in the index that no longer resolve are skipped.
        """
        caller = _require_caller(caller)
        message_ids = kv_store.get(conversation_key(caller["id"], other_user_id)) or []
        messages = [m for m in (_resolve(message_key(mid)) for mid in message_ids) if m]
        return sorted(messages, key=lambda m: parse_timestamp(m.get("createdAt")))

    @classmethod
    async def list_conversations(cls, caller: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Summarise every thread the caller takes part in.

        Each summary is ``{"otherUser", "lastMessage", "unreadCount"}``.
        The other participant's profile and the last message are
        resolved best-effort.  ``unreadCount`` is always 0: the
        ``read`` flag is stored on messages but nothing updates it.
        """
        caller = _require_caller(caller)
        user_id = caller["id"]
        summaries: List[Dict[str, Any]] = []
        for key, message_ids in kv_store.scan_prefix(CONVERSATION_PREFIX):
            participants = key[len(CONVERSATION_PREFIX):].split(":", 1)
            if len(participants) != 2 or user_id not in participants:
                continue
            first, second = participants
            other_id = second if first == user_id else first
            last_message = None
            if message_ids:
                last_message = _resolve(message_key(message_ids[-1]))
            summaries.append(
                {
                    "otherUser": _resolve(profile_key(other_id)),
                    "lastMessage": last_message,
                    "unreadCount": 0,
                }
            )
        return summaries
