"""
Local identity provider.

Accounts (email, password hash and free-form metadata such as the
display name and requested role) live in the ``identities`` table,
separate from the marketplace's key-value namespace.  The provider
exposes the small capability the rest of the service relies on:

* ``create_user`` registers an account,
* ``sign_in_with_password`` checks credentials and issues a bearer token,
* ``get_user`` turns a bearer token back into an identity.

An identity is a plain dict ``{"id", "email", "user_metadata"}``.
Services treat it as opaque apart from those three keys; user
profiles are stored separately under ``user:<id>``.
"""

import json
import logging
import sqlite3
import uuid
from typing import Any, Dict, Optional

from .db import get_cursor
from .errors import AlreadyRegisteredError, InternalError, UnauthorizedError
from .security import create_access_token, decode_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def _row_to_identity(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "email": row["email"],
        "user_metadata": json.loads(row["metadata"]) if row["metadata"] else {},
    }


class LocalIdentityProvider:
    """Email/password accounts with HMAC-signed bearer tokens."""

    def create_user(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Register a new account and return its identity.

        Raises ``AlreadyRegisteredError`` when the email (compared case
        insensitively) already has an account.
        """
        identity_id = str(uuid.uuid4())
        try:
            with get_cursor() as cursor:
                cursor.execute(
                    "INSERT INTO identities (id, email, password, metadata) VALUES (?, ?, ?, ?)",
                    (identity_id, email, hash_password(password), json.dumps(metadata or {})),
                )
        except sqlite3.IntegrityError as exc:
            raise AlreadyRegisteredError() from exc
        except sqlite3.Error as exc:
            logger.exception("Identity creation failed for %s", email)
            raise InternalError("Failed to create account") from exc
        return {"id": identity_id, "email": email, "user_metadata": metadata or {}}

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        with get_cursor() as cursor:
            row = cursor.execute(
                "SELECT id, email, metadata FROM identities WHERE email = ?", (email,)
            ).fetchone()
        return _row_to_identity(row) if row else None

    def find_by_id(self, identity_id: str) -> Optional[Dict[str, Any]]:
        with get_cursor() as cursor:
            row = cursor.execute(
                "SELECT id, email, metadata FROM identities WHERE id = ?", (identity_id,)
            ).fetchone()
        return _row_to_identity(row) if row else None

    def issue_token(self, identity: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
        return create_access_token({"sub": identity["id"], "email": identity["email"]}, expires_delta)

    def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        """Return ``{"access_token", "identity"}`` for valid credentials.

        Raises ``UnauthorizedError`` otherwise; the message does not say
        whether the email or the password was wrong.
        """
        with get_cursor() as cursor:
            row = cursor.execute(
                "SELECT id, email, password, metadata FROM identities WHERE email = ?", (email,)
            ).fetchone()
        if not row or not verify_password(password, row["password"]):
            logger.warning("Failed sign in for %s", email)
            raise UnauthorizedError("Invalid login credentials")
        identity = _row_to_identity(row)
        return {"access_token": self.issue_token(identity), "identity": identity}

    def get_user(self, token: str) -> Optional[Dict[str, Any]]:
        """Resolve a bearer token to an identity, or ``None`` if invalid.

        A token whose account no longer exists is treated as invalid.
        """
        payload = decode_access_token(token)
        if not payload or not payload.get("sub"):
            return None
        return self.find_by_id(str(payload["sub"]))

    def set_password(self, email: str, password: str) -> bool:
        """Replace the password hash for ``email``; ``False`` if unknown."""
        with get_cursor() as cursor:
            cursor.execute(
                "UPDATE identities SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
                (hash_password(password), email),
            )
            return cursor.rowcount > 0


identity_provider = LocalIdentityProvider()
