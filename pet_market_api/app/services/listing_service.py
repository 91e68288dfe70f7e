"""
Business logic for pet listings.

Listings are stored as JSON documents under ``pet:<id>`` keys.  There
is no secondary index: every query is a full prefix scan filtered and
sorted in Python.  Mutations follow the owner-or-admin rule, always
checked against the stored listing and never against ownership
claimed in the request body.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from pet_market_api.app.core import kv_store
from pet_market_api.app.core.auth import ROLE_ADMIN, profile_key
from pet_market_api.app.core.errors import ForbiddenError, InternalError, NotFoundError
from pet_market_api.app.core.timeutils import now_iso, parse_timestamp

logger = logging.getLogger(__name__)

PET_PREFIX = "pet:"
STATUS_ACTIVE = "active"
STATUS_PENDING = "pending"
STATUS_SOLD = "sold"

SEARCH_FIELDS = ("name", "breed", "description")


def pet_key(pet_id: str) -> str:
    return f"{PET_PREFIX}{pet_id}"


def sort_newest_first(pets: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sort listings by ``createdAt`` descending.

    The sort is stable, so listings with equal timestamps keep their
    scan (insertion) order.
    """
    return sorted(pets, key=lambda pet: parse_timestamp(pet.get("createdAt")), reverse=True)


def _contains(value: Any, needle: str) -> bool:
    return isinstance(value, str) and needle in value.lower()


class ListingService:
    """Repository for ``pet:*`` entries."""

    @classmethod
    async def create(cls, owner: Dict[str, Any], fields: Dict[str, Any]) -> Dict[str, Any]:
        """Create a listing owned by ``owner``.

        Client fields are stored as submitted, then the server-owned
        fields (``id``, ``ownerId``, ``ownerEmail``, ``status`` and both
        timestamps) are pinned over them.
        """
        pet_id = str(uuid.uuid4())
        now = now_iso()
        pet = {
            **fields,
            "id": pet_id,
            "ownerId": owner["id"],
            "ownerEmail": owner.get("email"),
            "status": STATUS_ACTIVE,
            "createdAt": now,
            "updatedAt": now,
        }
        kv_store.set(pet_key(pet_id), pet)
        logger.info("Created pet listing %s by user %s", pet_id, owner["id"])
        return pet

    @classmethod
    async def get(cls, pet_id: str) -> Dict[str, Any]:
        """Return a listing with its owner's profile embedded as ``ownerInfo``.

        A missing owner profile embeds ``None`` rather than failing.
        """
        pet = kv_store.get(pet_key(pet_id))
        if pet is None:
            raise NotFoundError("Pet not found")
        owner = None
        if pet.get("ownerId"):
            try:
                owner = kv_store.get(profile_key(pet["ownerId"]))
            except InternalError:
                logger.warning("Could not resolve owner of pet %s", pet_id)
        pet["ownerInfo"] = owner
        return pet

    @classmethod
    async def list(
        cls,
        category: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Return listings matching every supplied filter, newest first.

        - ``category``: case-insensitive equality; ignored when empty or ``"all"``.
        - ``status``: exact equality.
        - ``search``: case-insensitive substring of name, breed or description.
        """
        pets = kv_store.get_by_prefix(PET_PREFIX)

        if category and category.lower() != "all":
            wanted = category.lower()
            pets = [p for p in pets if isinstance(p.get("category"), str) and p["category"].lower() == wanted]

        if status:
            pets = [p for p in pets if p.get("status") == status]

        if search:
            needle = search.lower()
            pets = [p for p in pets if any(_contains(p.get(field), needle) for field in SEARCH_FIELDS)]

        return sort_newest_first(pets)

    @classmethod
    def _load_for_write(cls, pet_id: str, caller: Dict[str, Any], action: str) -> Dict[str, Any]:
        pet = kv_store.get(pet_key(pet_id))
        if pet is None:
            raise NotFoundError("Pet not found")
        if pet.get("ownerId") != caller.get("id") and caller.get("role") != ROLE_ADMIN:
            logger.warning("User %s may not %s pet %s", caller.get("id"), action, pet_id)
            raise ForbiddenError(f"Forbidden - you can only {action} your own listings")
        return pet

    @classmethod
    async def update(cls, pet_id: str, caller: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
        """Merge ``patch`` into a listing.

        ``id`` and ``ownerId`` are re-pinned to their stored values
        whatever the patch contains.
        """
        existing = cls._load_for_write(pet_id, caller, "edit")
        updated = {
            **existing,
            **patch,
            "id": existing["id"],
            "ownerId": existing.get("ownerId"),
            "updatedAt": now_iso(),
        }
        kv_store.set(pet_key(pet_id), updated)
        logger.info("Updated pet listing %s by user %s", pet_id, caller.get("id"))
        return updated

    @classmethod
    async def delete(cls, pet_id: str, caller: Dict[str, Any]) -> None:
        cls._load_for_write(pet_id, caller, "delete")
        kv_store.delete(pet_key(pet_id))
        logger.info("Deleted pet listing %s by user %s", pet_id, caller.get("id"))
