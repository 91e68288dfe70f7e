"""
Pet listing endpoints for API v1.

Browsing is public.  Creating a listing requires a signed-in user, who
becomes its owner; editing and deleting are limited to the owner and
administrators.  Listing bodies are free-form JSON objects: known
fields are ``name``, ``breed``, ``category``, ``age``, ``price``,
``location``, ``description``, ``healthInfo``, ``images`` and
``status``, and anything else is stored as submitted.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from pet_market_api.app.core.auth import get_current_user
from pet_market_api.app.services.listing_service import ListingService


router = APIRouter()

PET_EXAMPLE = {
    "name": "Max",
    "breed": "Labrador",
    "category": "Dogs",
    "age": "2 years",
    "price": 1500,
    "location": "Cape Town",
    "description": "Friendly and house trained",
    "healthInfo": "Vaccinated",
    "images": [],
}


@router.get("")
async def list_pets(
    category: Optional[str] = Query(None, description="Category name, or ``all``"),
    status_filter: Optional[str] = Query(None, alias="status", description="active, pending or sold"),
    search: Optional[str] = Query(None, description="Matches name, breed or description"),
) -> Dict[str, Any]:
    """List listings, newest first, filtered by category, status and search text."""
    pets = await ListingService.list(category=category, status=status_filter, search=search)
    return {"pets": pets}


@router.get("/{pet_id}")
async def get_pet(pet_id: str) -> Dict[str, Any]:
    """Return one listing with its owner's profile under ``ownerInfo``."""
    return {"pet": await ListingService.get(pet_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_pet(
    body: Dict[str, Any] = Body(..., examples=[PET_EXAMPLE]),
    current_user: dict = Depends(get_current_user),
) -> Dict[str, Any]:
    """Create a listing owned by the caller.

    ``id``, ``ownerId``, ``ownerEmail``, ``status`` and the timestamps
    are always set by the server.
    """
    return {"pet": await ListingService.create(current_user, body)}


@router.put("/{pet_id}")
async def update_pet(
    pet_id: str,
    body: Dict[str, Any] = Body(...),
    current_user: dict = Depends(get_current_user),
) -> Dict[str, Any]:
    """Partially update a listing (owner or admin).

    ``id`` and ``ownerId`` in the body are ignored.
    """
    return {"pet": await ListingService.update(pet_id, current_user, body)}


@router.delete("/{pet_id}")
async def delete_pet(pet_id: str, current_user: dict = Depends(get_current_user)) -> Dict[str, Any]:
    await ListingService.delete(pet_id, current_user)
    return {"message": "Pet listing deleted successfully"}
