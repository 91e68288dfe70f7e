"""
Service health and development helpers.
"""

from typing import Any, Dict

from fastapi import APIRouter

from pet_market_api.app.core.config import settings
from pet_market_api.app.core.errors import NotFoundError
from pet_market_api.app.services.user_service import UserService


router = APIRouter()


@router.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.post("/seed")
async def seed() -> Dict[str, Any]:
    """Create the demo admin and user accounts.

    Only available when ``DEBUG`` is enabled; otherwise answers 404.
    """
    if not settings.debug:
        raise NotFoundError()
    accounts = await UserService.seed_demo_accounts()
    return {"message": "Demo accounts created successfully", "accounts": accounts}
