"""
Request authentication and role checks.

``resolve_identity`` turns a bearer credential into a stored user
profile, or ``None`` for anonymous callers.  Many read endpoints are
open to anonymous callers, so a missing, malformed, invalid or expired
credential is never an error at this level; endpoints that need a
caller depend on ``get_current_user`` which raises ``UnauthorizedError``.

The resolved profile is passed explicitly to every service call.
Services never look up the current user on their own.
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from . import kv_store
from .errors import ForbiddenError, UnauthorizedError
from .identity import identity_provider

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)

security = HTTPBearer(auto_error=False)


def profile_key(user_id: str) -> str:
    return f"user:{user_id}"


def synthesize_profile(identity: Dict[str, Any]) -> Dict[str, Any]:
    """Build a minimal profile for an identity with no stored profile.

    The role is always ``user``: elevated roles only come from a stored
    profile.
    """
    metadata = identity.get("user_metadata") or {}
    return {
        "id": identity["id"],
        "email": identity.get("email"),
        "name": metadata.get("name"),
        "role": ROLE_USER,
        "createdAt": None,
    }


def resolve_identity(credential: Optional[str]) -> Optional[Dict[str, Any]]:
    """Resolve a bearer credential to a user profile or ``None``."""
    if not credential:
        return None
    identity = identity_provider.get_user(credential)
    if identity is None:
        logger.info("Rejected invalid or expired credential")
        return None
    profile = kv_store.get(profile_key(identity["id"]))
    if profile is None:
        return synthesize_profile(identity)
    return profile


def require_role(profile: Optional[Dict[str, Any]], role: str) -> Dict[str, Any]:
    """Return ``profile`` if it has ``role``; raise ``ForbiddenError`` otherwise."""
    if profile is None or profile.get("role") != role:
        raise ForbiddenError(f"Forbidden - {role} access required")
    return profile


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Dict[str, Any]]:
    """Dependency yielding the caller's profile or ``None`` when anonymous."""
    if credentials is None:
        return None
    return resolve_identity(credentials.credentials)


def get_current_user(
    profile: Optional[Dict[str, Any]] = Depends(get_optional_user),
) -> Dict[str, Any]:
    """Dependency requiring an authenticated caller."""
    if profile is None:
        raise UnauthorizedError()
    return profile


def require_role_dependency(role: str) -> Callable[..., Dict[str, Any]]:
    """Dependency factory enforcing ``role`` on an authenticated caller.

    Use as ``Depends(require_role_dependency("admin"))``.  Anonymous
    callers get 401, authenticated callers without the role get 403.
    """

    def _role_dependency(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        try:
            return require_role(current_user, role)
        except ForbiddenError:
            logger.warning("User %s denied %s-only access", current_user.get("id"), role)
            raise

    return _role_dependency
