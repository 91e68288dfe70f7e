"""
Shared fixtures.

Every test runs against its own SQLite file in a temporary directory
with migrations applied, so tests never see each other's data.
"""

import uuid

import pytest

from pet_market_api.app.core import kv_store
from pet_market_api.app.core.auth import profile_key
from pet_market_api.app.core.config import settings
from pet_market_api.app.core.db import init_db
from pet_market_api.app.core.identity import identity_provider
from pet_market_api.app.services.listing_service import pet_key

TEST_PASSWORD = "password123"


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point the service at a fresh database for each test."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "pet_market_test.db"))
    init_db()
    yield


@pytest.fixture
def make_user():
    """Factory creating an account; returns ``(profile, token)``.

    With ``store_profile=False`` only the account exists, as for users
    who signed up before profiles were stored.
    """

    def _make(email, role="user", name=None, store_profile=True):
        name = name or email.split("@")[0].title()
        identity = identity_provider.create_user(email, TEST_PASSWORD, {"name": name, "role": role})
        profile = {
            "id": identity["id"],
            "email": email,
            "name": name,
            "role": role,
            "createdAt": "2026-01-01T00:00:00.000Z",
        }
        if store_profile:
            kv_store.set(profile_key(identity["id"]), profile)
        return profile, identity_provider.issue_token(identity)

    return _make


@pytest.fixture
def put_pet():
    """Factory storing a listing record directly, bypassing the service.

    Lets tests control ``createdAt`` and ``status`` precisely.
    """

    def _put(**fields):
        record = {
            "id": str(uuid.uuid4()),
            "ownerId": "owner-1",
            "ownerEmail": "owner@example.com",
            "status": "active",
            "createdAt": "2026-01-01T00:00:00.000Z",
            "updatedAt": "2026-01-01T00:00:00.000Z",
        }
        record.update(fields)
        kv_store.set(pet_key(record["id"]), record)
        return record

    return _put
