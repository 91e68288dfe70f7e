"""
Business logic for users.

Accounts are owned by the identity provider (``core.identity``); this
service mirrors each account into a marketplace profile stored under
``user:<id>`` and exposes signup, signin and the administrator's user
list.  Profiles are never deleted here, and the role is only set at
signup.
"""

import logging
from typing import Any, Dict, List, Optional

from pet_market_api.app.core import kv_store
from pet_market_api.app.core.auth import ROLE_ADMIN, ROLE_USER, ROLES, profile_key, synthesize_profile
from pet_market_api.app.core.errors import (
    AlreadyRegisteredError,
    BadRequestError,
    InternalError,
)
from pet_market_api.app.core.identity import identity_provider
from pet_market_api.app.core.timeutils import now_iso

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
PUBLIC_PROFILE_FIELDS = ("id", "email", "name", "role", "createdAt")

DEMO_ACCOUNTS = (
    {"email": "admin@pettrader.co.za", "password": "admin123", "name": "Admin User", "role": ROLE_ADMIN},
    {"email": "user@pettrader.co.za", "password": "user123", "name": "Regular User", "role": ROLE_USER},
)


def sanitize_profile(profile: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the public profile fields."""
    return {field: profile.get(field) for field in PUBLIC_PROFILE_FIELDS}


class UserService:
    """Signup, signin and profile lookups."""

    @classmethod
    async def sign_up(
        cls,
        email: Optional[str],
        password: Optional[str],
        name: Optional[str],
        role: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create an account and its profile; return the profile.

        ``role`` defaults to ``user``.  The profile write happens after
        the account exists, so a failure there is logged rather than
        undoing the signup; such users get a synthesized profile until
        one is stored.
        """
        logger.info("Signup request for %s", email)
        if not email or not password or not name:
            raise BadRequestError("Email, password, and name are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise BadRequestError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        role = role or ROLE_USER
        if role not in ROLES:
            raise BadRequestError(f"Role must be one of: {', '.join(ROLES)}")

        identity = identity_provider.create_user(email, password, {"name": name, "role": role})
        profile = {
            "id": identity["id"],
            "email": email,
            "name": name,
            "role": role,
            "createdAt": now_iso(),
        }
        try:
            kv_store.set(profile_key(identity["id"]), profile)
        except InternalError:
            logger.warning("Profile for %s not stored; continuing with account only", identity["id"])
        logger.info("Registered user %s (%s)", identity["id"], role)
        return profile

    @classmethod
    async def sign_in(cls, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """Check credentials and return ``{"accessToken", "user"}``."""
        if not email or not password:
            raise BadRequestError("Email and password are required")
        session = identity_provider.sign_in_with_password(email, password)
        identity = session["identity"]
        profile = await cls.get_profile(identity["id"]) or synthesize_profile(identity)
        return {"accessToken": session["access_token"], "user": profile}

    @classmethod
    async def get_profile(cls, user_id: str) -> Optional[Dict[str, Any]]:
        """Return the stored profile for ``user_id`` or ``None``."""
        return kv_store.get(profile_key(user_id))

    @classmethod
    async def list_users(cls) -> List[Dict[str, Any]]:
        """Return every stored profile with only its public fields."""
        return [sanitize_profile(profile) for profile in kv_store.get_by_prefix("user:")]

    @classmethod
    async def seed_demo_accounts(cls) -> List[Dict[str, Any]]:
        """Create the demo admin and user accounts if they do not exist.

        Returns the demo credentials.  Intended for development only.
        """
        for account in DEMO_ACCOUNTS:
            try:
                await cls.sign_up(account["email"], account["password"], account["name"], account["role"])
            except AlreadyRegisteredError:
                logger.info("Demo account %s already exists", account["email"])
        return [
            {"email": a["email"], "password": a["password"], "role": a["role"]}
            for a in DEMO_ACCOUNTS
        ]
