"""
Integration tests for authentication and profile endpoints
"""
import pytest
from fastapi import status

PASSWORD = "Passw0rd123"


@pytest.fixture
def test_user_data():
    return {
        "email": "test@example.com",
        "password": PASSWORD,
        "full_name": "Test User",
    }


def login(client, email, password=PASSWORD):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


class TestAuthenticationFlow:
    """Test complete authentication flow"""

    def test_register_user(self, client, test_user_data):
        response = client.post("/api/v1/auth/register", json=test_user_data)

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["data"]["email"] == test_user_data["email"]
        assert body["data"]["role"] == "buyer"
        assert "password_hash" not in body["data"]

    def test_register_duplicate_email(self, client, test_user_data):
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post("/api/v1/auth/register", json=test_user_data)

        assert response.status_code == status.HTTP_409_CONFLICT
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "CONFLICT"

    def test_register_invalid_email(self, client, test_user_data):
        response = client.post("/api/v1/auth/register", json={**test_user_data, "email": "nope"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_register_weak_password(self, client, test_user_data):
        response = client.post("/api/v1/auth/register", json={**test_user_data, "password": "password"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["details"]["field"] == "password"

    def test_register_admin_rejected(self, client, test_user_data):
        response = client.post("/api/v1/auth/register", json={**test_user_data, "role": "admin"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_login_success(self, client, buyer):
        response = login(client, "buyer@example.com")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0

    def test_login_wrong_password(self, client, buyer):
        response = login(client, "buyer@example.com", "WrongPassw0rd")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["WWW-Authenticate"] == "Bearer"
        body = response.json()
        assert body == {
            "success": False,
            "error": {"code": "UNAUTHORIZED", "message": "Incorrect email or password", "details": {}},
        }

    def test_login_nonexistent_user(self, client):
        response = login(client, "nonexistent@example.com")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_rotation(self, client, buyer):
        tokens = login(client, "buyer@example.com").json()["data"]

        first = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        second = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

        assert first.status_code == status.HTTP_200_OK
        assert first.json()["data"]["refresh_token"] != tokens["refresh_token"]
        assert second.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout(self, client, buyer):
        tokens = login(client, "buyer@example.com").json()["data"]
        headers = {"Authorization": f"Bearer {tokens['access_token']}"}

        response = client.post("/api/v1/auth/logout", json={"refresh_token": tokens["refresh_token"]}, headers=headers)
        again = client.post("/api/v1/auth/logout", json={"refresh_token": tokens["refresh_token"]}, headers=headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"] == {"revoked": 1}
        assert again.status_code == status.HTTP_200_OK
        assert again.json()["data"] == {"revoked": 0}

        refreshed = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert refreshed.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_requires_auth(self, client):
        response = client.post("/api/v1/auth/logout", json={"refresh_token": "whatever"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_invalid_bearer_token(self, client):
        response = client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_token_is_not_an_access_token(self, client, buyer):
        tokens = login(client, "buyer@example.com").json()["data"]

        response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestProfile:

    def test_get_current_user(self, client, buyer, buyer_headers):
        response = client.get("/api/v1/users/me", headers=buyer_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["email"] == "buyer@example.com"
        assert data["id"] == str(buyer.id)

    def test_update_profile(self, client, buyer_headers):
        response = client.put("/api/v1/users/me", json={"full_name": "Jamie"}, headers=buyer_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["full_name"] == "Jamie"

    def test_change_password(self, client, buyer, buyer_headers):
        response = client.post(
            "/api/v1/users/me/password",
            json={"current_password": PASSWORD, "new_password": "NewPassw0rd9"},
            headers=buyer_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert login(client, "buyer@example.com").status_code == status.HTTP_401_UNAUTHORIZED
        assert login(client, "buyer@example.com", "NewPassw0rd9").status_code == status.HTTP_200_OK

    def test_deactivate_account(self, client, buyer, buyer_headers):
        response = client.delete("/api/v1/users/me", headers=buyer_headers)

        assert response.status_code == status.HTTP_200_OK
        assert client.get("/api/v1/users/me", headers=buyer_headers).status_code == status.HTTP_401_UNAUTHORIZED
        assert login(client, "buyer@example.com").status_code == status.HTTP_401_UNAUTHORIZED
