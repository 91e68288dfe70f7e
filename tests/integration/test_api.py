"""
End-to-end tests of the HTTP API through FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from pet_market_api.app.core.config import settings
from pet_market_api.app.main import app

API = "/api/v1"


@pytest.fixture
def client():
    return TestClient(app)


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def seller(make_user):
    return make_user("seller@example.com", name="Sally Seller")


@pytest.fixture
def buyer(make_user):
    return make_user("buyer@example.com", name="Bob Buyer")


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", role="admin", name="Admin User")


class TestHealth:
    def test_health(self, client):
        response = client.get(f"{API}/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_seed_hidden_outside_debug(self, client, monkeypatch):
        monkeypatch.setattr(settings, "debug", False)
        response = client.post(f"{API}/seed")
        assert response.status_code == 404
        assert "error" in response.json()

    def test_seed_in_debug(self, client, monkeypatch):
        monkeypatch.setattr(settings, "debug", True)
        response = client.post(f"{API}/seed")
        assert response.status_code == 200
        assert {a["role"] for a in response.json()["accounts"]} == {"admin", "user"}

        signin = client.post(f"{API}/auth/signin", json={"email": "admin@pettrader.co.za", "password": "admin123"})
        assert signin.status_code == 200
        assert signin.json()["user"]["role"] == "admin"


class TestAuthFlow:
    def test_signup_signin_me(self, client):
        signup = client.post(
            f"{API}/auth/signup",
            json={"email": "jane@example.com", "password": "s3cret!", "name": "Jane"},
        )
        assert signup.status_code == 201
        assert signup.json()["user"]["role"] == "user"
        assert "createdAt" in signup.json()["user"]

        signin = client.post(f"{API}/auth/signin", json={"email": "jane@example.com", "password": "s3cret!"})
        assert signin.status_code == 200
        token = signin.json()["accessToken"]

        me = client.get(f"{API}/auth/me", headers=auth_header(token))
        assert me.status_code == 200
        assert me.json()["user"]["email"] == "jane@example.com"

    def test_short_password_is_rejected(self, client):
        response = client.post(
            f"{API}/auth/signup",
            json={"email": "jane@example.com", "password": "12345", "name": "Jane"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Password must be at least 6 characters"}

    def test_duplicate_email_is_rejected(self, client, seller):
        response = client.post(
            f"{API}/auth/signup",
            json={"email": "seller@example.com", "password": "s3cret!", "name": "Again"},
        )
        assert response.status_code == 400
        assert "already registered" in response.json()["error"]

    def test_bad_credentials(self, client, seller):
        response = client.post(f"{API}/auth/signin", json={"email": "seller@example.com", "password": "nope!!"})
        assert response.status_code == 401
        assert "error" in response.json()

    @pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer garbage"}, {"Authorization": "Basic abc"}])
    def test_me_requires_valid_token(self, client, headers):
        response = client.get(f"{API}/auth/me", headers=headers)
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}


class TestPets:
    def test_listing_lifecycle(self, client, seller, buyer, admin):
        _, seller_token = seller
        _, buyer_token = buyer
        _, admin_token = admin

        created = client.post(
            f"{API}/pets",
            json={"name": "Max", "category": "Dogs", "price": 1500, "ownerId": "someone-else"},
            headers=auth_header(seller_token),
        )
        assert created.status_code == 201
        pet = created.json()["pet"]
        assert pet["ownerId"] == seller[0]["id"]
        assert pet["status"] == "active"

        listed = client.get(f"{API}/pets").json()["pets"]
        assert [p["id"] for p in listed] == [pet["id"]]

        detail = client.get(f"{API}/pets/{pet['id']}").json()["pet"]
        assert detail["ownerInfo"]["name"] == "Sally Seller"

        forbidden = client.put(f"{API}/pets/{pet['id']}", json={"price": 1}, headers=auth_header(buyer_token))
        assert forbidden.status_code == 403
        assert "error" in forbidden.json()

        updated = client.put(
            f"{API}/pets/{pet['id']}", json={"status": "sold"}, headers=auth_header(admin_token)
        )
        assert updated.status_code == 200
        assert updated.json()["pet"]["status"] == "sold"
        assert updated.json()["pet"]["ownerId"] == seller[0]["id"]

        deleted = client.delete(f"{API}/pets/{pet['id']}", headers=auth_header(seller_token))
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Pet listing deleted successfully"}

        missing = client.get(f"{API}/pets/{pet['id']}")
        assert missing.status_code == 404
        assert missing.json() == {"error": "Pet not found"}

    @pytest.mark.parametrize("path", ["/pets", "/conversations"])
    def test_collection_paths_answer_without_redirect(self, client, buyer, path):
        response = client.get(f"{API}{path}", headers=auth_header(buyer[1]), follow_redirects=False)
        assert response.status_code == 200

    def test_non_object_body_is_bad_request(self, client, seller):
        response = client.post(f"{API}/pets", json=["Max"], headers=auth_header(seller[1]))
        assert response.status_code == 400
        assert "error" in response.json()

    def test_malformed_json_is_bad_request(self, client, seller):
        response = client.post(
            f"{API}/pets",
            content=b"{not json",
            headers={**auth_header(seller[1]), "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "error" in response.json()

    def test_create_requires_auth(self, client):
        response = client.post(f"{API}/pets", json={"name": "Max"})
        assert response.status_code == 401

    def test_filters(self, client, put_pet):
        put_pet(name="Rex", category="Dogs", status="active")
        put_pet(name="Tom", category="Cats", status="sold")

        by_category = client.get(f"{API}/pets", params={"category": "Cats"}).json()["pets"]
        assert [p["name"] for p in by_category] == ["Tom"]

        everything = client.get(f"{API}/pets", params={"category": "all"}).json()["pets"]
        assert len(everything) == 2

        by_status = client.get(f"{API}/pets", params={"status": "active"}).json()["pets"]
        assert [p["name"] for p in by_status] == ["Rex"]

        by_search = client.get(f"{API}/pets", params={"search": "rE"}).json()["pets"]
        assert [p["name"] for p in by_search] == ["Rex"]


class TestMessaging:
    def test_conversation_flow(self, client, seller, buyer):
        seller_profile, seller_token = seller
        buyer_profile, buyer_token = buyer

        first = client.post(
            f"{API}/messages",
            json={"petId": "pet-1", "recipientId": seller_profile["id"], "content": "Is Max available?"},
            headers=auth_header(buyer_token),
        )
        assert first.status_code == 201
        assert first.json()["message"]["read"] is False

        client.post(
            f"{API}/messages",
            json={"petId": "pet-1", "recipientId": buyer_profile["id"], "content": "Yes he is"},
            headers=auth_header(seller_token),
        )

        thread = client.get(f"{API}/messages/{seller_profile['id']}", headers=auth_header(buyer_token))
        assert thread.status_code == 200
        assert [m["content"] for m in thread.json()["messages"]] == ["Is Max available?", "Yes he is"]

        conversations = client.get(f"{API}/conversations", headers=auth_header(buyer_token)).json()
        assert len(conversations["conversations"]) == 1
        summary = conversations["conversations"][0]
        assert summary["otherUser"]["id"] == seller_profile["id"]
        assert summary["lastMessage"]["content"] == "Yes he is"
        assert summary["unreadCount"] == 0

    def test_missing_fields(self, client, buyer):
        response = client.post(f"{API}/messages", json={"petId": "pet-1"}, headers=auth_header(buyer[1]))
        assert response.status_code == 400
        assert response.json() == {"error": "Pet ID, recipient ID, and message content are required"}

    def test_numeric_pet_id_is_accepted(self, client, seller, buyer):
        response = client.post(
            f"{API}/messages",
            json={"petId": 7, "recipientId": seller[0]["id"], "content": "hi"},
            headers=auth_header(buyer[1]),
        )
        assert response.status_code == 201
        assert response.json()["message"]["petId"] == "7"

    def test_wrongly_typed_field_is_bad_request(self, client, buyer):
        response = client.post(
            f"{API}/messages",
            json={"petId": 7, "recipientId": "u", "content": {"text": "hi"}},
            headers=auth_header(buyer[1]),
        )
        assert response.status_code == 400
        assert list(response.json()) == ["error"]
        assert "content" in response.json()["error"]

    def test_anonymous_is_rejected(self, client):
        assert client.get(f"{API}/conversations").status_code == 401
        assert client.get(f"{API}/messages/someone").status_code == 401


class TestAdmin:
    def test_analytics_requires_admin(self, client, seller):
        assert client.get(f"{API}/admin/analytics").status_code == 401
        response = client.get(f"{API}/admin/analytics", headers=auth_header(seller[1]))
        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden - admin access required"}

    def test_analytics_for_admin(self, client, admin, put_pet):
        put_pet(status="sold", price=300)

        response = client.get(f"{API}/admin/analytics", headers=auth_header(admin[1]))

        assert response.status_code == 200
        body = response.json()
        assert body["stats"]["soldListings"] == 1
        assert body["stats"]["totalRevenue"] == 300
        assert len(body["monthlyData"]) == 6

    def test_user_list(self, client, admin, seller):
        assert client.get(f"{API}/admin/users", headers=auth_header(seller[1])).status_code == 403

        response = client.get(f"{API}/admin/users", headers=auth_header(admin[1]))

        assert response.status_code == 200
        emails = sorted(u["email"] for u in response.json()["users"])
        assert emails == ["admin@example.com", "seller@example.com"]
