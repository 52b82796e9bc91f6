"""Tests for user profile and admin endpoints."""

from fastapi.testclient import TestClient


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestProfile:
    """Tests for /users/me."""

    def test_get_me(self, client: TestClient, test_user: dict):
        response = client.get("/api/v1/users/me", headers=bearer(test_user["access_token"]))
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == test_user["user_id"]
        assert data["email"] == "test@example.com"
        assert data["role_name"] == "user"
        assert "password_hash" not in data
        assert "reset_password_token" not in data

    def test_get_me_invalid_token(self, client: TestClient):
        response = client.get("/api/v1/users/me", headers=bearer("invalid.token.here"))
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    def test_get_me_without_token(self, client: TestClient):
        assert client.get("/api/v1/users/me").status_code == 401

    def test_update_me(self, client: TestClient, test_user: dict):
        response = client.patch(
            "/api/v1/users/me",
            json={"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"},
            headers=bearer(test_user["access_token"]),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["first_name"] == "Ada"
        assert data["email"] == "ada@example.com"

    def test_update_me_to_taken_email(self, client: TestClient, test_user: dict, admin_user: dict):
        response = client.patch(
            "/api/v1/users/me",
            json={"first_name": "Ada", "email": "admin@example.com"},
            headers=bearer(test_user["access_token"]),
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Credentials taken"


class TestListUsers:
    """Tests for the admin user listing."""

    def test_regular_user_is_denied(self, client: TestClient, test_user: dict):
        response = client.get("/api/v1/users/", headers=bearer(test_user["access_token"]))
        assert response.status_code == 403
        assert response.json()["detail"] == "Insufficient role"

    def test_admin_lists_users(self, client: TestClient, test_user: dict, admin_user: dict):
        response = client.get("/api/v1/users/", headers=bearer(admin_user["access_token"]))
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {u["email"] for u in data["items"]} == {"test@example.com", "admin@example.com"}

    def test_pagination(self, client: TestClient, test_user: dict, admin_user: dict):
        response = client.get("/api/v1/users/?limit=1&offset=1", headers=bearer(admin_user["access_token"]))
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert len(data["items"]) == 1
