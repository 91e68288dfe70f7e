"""
Administrator endpoints for API v1.

Both routes require a signed-in user whose profile has the ``admin``
role: anonymous callers get 401 and other users 403.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from pet_market_api.app.core.auth import ROLE_ADMIN, require_role_dependency
from pet_market_api.app.schemas.user import UserListEnvelope
from pet_market_api.app.services.analytics_service import AnalyticsService
from pet_market_api.app.services.user_service import UserService


router = APIRouter()


@router.get("/analytics")
async def analytics(current_user: dict = Depends(require_role_dependency(ROLE_ADMIN))) -> Dict[str, Any]:
    """Return marketplace statistics computed from the current data.

    The payload holds ``stats`` (listing counts by status, user count,
    revenue and average sold price), ``categoryStats``, ``monthlyData``
    for the last six calendar months, the ten most recent listings
    with their owner's name and the top five categories.
    """
    return await AnalyticsService.dashboard(current_user)


@router.get("/users", response_model=UserListEnvelope)
async def list_users(current_user: dict = Depends(require_role_dependency(ROLE_ADMIN))) -> Dict[str, Any]:
    """List every user profile without any credential material."""
    return {"users": await UserService.list_users()}
