"""
Authentication endpoints for API v1.

Signup creates an account with the identity provider and mirrors it
into a marketplace profile; signin returns a bearer token to send as
``Authorization: Bearer <token>`` on protected routes.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from pet_market_api.app.core.auth import get_current_user
from pet_market_api.app.schemas.user import SessionEnvelope, SignInRequest, SignUpRequest, UserEnvelope
from pet_market_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/signup", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def sign_up(body: SignUpRequest) -> Dict[str, Any]:
    """Register a new user.

    ``role`` defaults to ``user``.  Passwords shorter than 6
    characters and already registered emails are rejected with 400.
    """
    profile = await UserService.sign_up(body.email, body.password, body.name, body.role)
    return {"user": profile}


@router.post("/signin", response_model=SessionEnvelope)
async def sign_in(body: SignInRequest) -> Dict[str, Any]:
    """Exchange email and password for a bearer token and the user's profile."""
    return await UserService.sign_in(body.email, body.password)


@router.get("/me", response_model=UserEnvelope)
async def me(current_user: dict = Depends(get_current_user)) -> Dict[str, Any]:
    return {"user": current_user}
