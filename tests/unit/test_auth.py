"""
Unit tests for credential resolution, role checks and token primitives.
"""

import pytest

from pet_market_api.app.core import kv_store
from pet_market_api.app.core.auth import require_role, resolve_identity
from pet_market_api.app.core.errors import ForbiddenError
from pet_market_api.app.core.identity import identity_provider
from pet_market_api.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestTokens:
    def test_round_trip(self):
        token = create_access_token({"sub": "user-1"})
        payload = decode_access_token(token)
        assert payload["sub"] == "user-1"
        assert "exp" in payload

    def test_expired_token_is_rejected(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=-60)
        assert decode_access_token(token) is None

    def test_tampered_token_is_rejected(self):
        header, payload, signature = create_access_token({"sub": "user-1"}).split(".")
        forged = create_access_token({"sub": "admin"}).split(".")[1]
        assert decode_access_token(f"{header}.{forged}.{signature}") is None

    @pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c", "...", "not.a!.token"])
    def test_malformed_token_is_rejected(self, token):
        assert decode_access_token(token) is None


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret!")
        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed)
        assert not verify_password("wrong", hashed)

    def test_salts_differ(self):
        assert hash_password("same") != hash_password("same")

    def test_garbage_hash_does_not_verify(self):
        assert not verify_password("x", "not-a-hash")


class TestResolveIdentity:
    """Unit tests for resolve_identity."""

    @pytest.mark.parametrize("credential", [None, "", "garbage", "a.b.c"])
    def test_missing_or_invalid_credential_is_anonymous(self, credential):
        assert resolve_identity(credential) is None

    def test_valid_credential_returns_stored_profile(self, make_user):
        profile, token = make_user("admin@example.com", role="admin")
        assert resolve_identity(token) == profile

    def test_missing_profile_is_synthesized(self, make_user):
        """Test an account with no stored profile still resolves, as a plain user."""
        profile, token = make_user("early@example.com", role="admin", name="Early Bird", store_profile=False)

        resolved = resolve_identity(token)

        assert resolved["id"] == profile["id"]
        assert resolved["email"] == "early@example.com"
        assert resolved["name"] == "Early Bird"
        assert resolved["role"] == "user"

    def test_token_for_unknown_account_is_anonymous(self):
        token = create_access_token({"sub": "deleted-account"})
        assert resolve_identity(token) is None

    def test_role_comes_from_stored_profile(self, make_user):
        profile, token = make_user("promoted@example.com")
        kv_store.set(f"user:{profile['id']}", {**profile, "role": "admin"})
        assert resolve_identity(token)["role"] == "admin"


class TestRequireRole:
    def test_matching_role_passes(self):
        profile = {"id": "1", "role": "admin"}
        assert require_role(profile, "admin") is profile

    def test_other_role_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            require_role({"id": "1", "role": "user"}, "admin")

    def test_anonymous_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            require_role(None, "admin")


class TestIdentityProvider:
    def test_sign_in_issues_resolvable_token(self):
        identity = identity_provider.create_user("jane@example.com", "s3cret!", {"name": "Jane"})
        session = identity_provider.sign_in_with_password("jane@example.com", "s3cret!")
        assert session["identity"]["id"] == identity["id"]
        assert identity_provider.get_user(session["access_token"])["email"] == "jane@example.com"

    def test_set_password(self):
        identity_provider.create_user("jane@example.com", "old-pass", {})
        assert identity_provider.set_password("jane@example.com", "new-pass")
        assert not identity_provider.set_password("nobody@example.com", "new-pass")
        identity_provider.sign_in_with_password("jane@example.com", "new-pass")
