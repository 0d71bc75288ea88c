"""Test authentication API endpoints.

Covers:
- POST /api/v1/auth/login
- POST /api/v1/auth/refresh-token

Status codes tested:
- 200 OK
- 400 Bad Request
- 401 Unauthorized
"""
from datetime import timedelta
from uuid import UUID

import pytest
from httpx import AsyncClient

from accounts.domain.token_service import (
    TokenType,
    create_access_token,
    create_refresh_token,
    decode_token,
    extract_subject,
)
from accounts.models.user import User
from conftest import WENDY


@pytest.mark.integration
class TestAuthLogin:
    """Test user login endpoint."""

    async def test_login_200_success(self, client: AsyncClient, user_a: User):
        """Test successful login returns a token pair for the user."""
        response = await client.post(
            "/api/v1/auth/login",
            json={"username": "wendy", "password": "123123123"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert extract_subject(decode_token(data["access_token"])) == user_a.id
        assert extract_subject(decode_token(data["refresh_token"], TokenType.REFRESH)) == user_a.id

    async def test_login_200_by_email(self, client: AsyncClient, user_a: User):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": WENDY["email"], "password": WENDY["password"]}
        )
        assert response.status_code == 200

    async def test_login_200_by_mixed_case_email(self, client: AsyncClient):
        """The address typed at registration also works at login."""
        register = await client.post(
            "/api/v1/users",
            json={**WENDY, "email": "Wendy@Example.COM"}
        )
        assert register.status_code == 201

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "Wendy@Example.COM", "password": WENDY["password"]}
        )
        assert response.status_code == 200
        assert extract_subject(decode_token(response.json()["access_token"])) == UUID(register.json()["id"])

    async def test_login_200_username_with_surrounding_spaces(self, client: AsyncClient, user_a: User):
        response = await client.post(
            "/api/v1/auth/login",
            json={"username": "  wendy ", "password": WENDY["password"]}
        )
        assert response.status_code == 200

    async def test_login_401_same_message_for_wrong_password_and_unknown_user(
        self, client: AsyncClient, user_a: User
    ):
        """Username enumeration is not possible through the error message."""
        wrong_password = await client.post(
            "/api/v1/auth/login",
            json={"username": "wendy", "password": "wrong_password"}
        )
        unknown_user = await client.post(
            "/api/v1/auth/login",
            json={"username": "nonexistent", "password": "wrong_password"}
        )
        assert wrong_password.status_code == 401
        assert unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json() == {"error": "wrong credentials"}

    async def test_login_400_missing_password(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/login", json={"username": "wendy"})
        assert response.status_code == 400
        assert "error" in response.json()

    async def test_login_400_missing_identifier(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/login", json={"password": "123123123"})
        assert response.status_code == 400


@pytest.mark.integration
class TestRefreshToken:
    """Test refresh token endpoint."""

    async def test_refresh_200_rotates_tokens(
        self, client: AsyncClient, user_a: User, user_a_tokens: dict
    ):
        response = await client.post(
            "/api/v1/auth/refresh-token",
            json={"refresh_token": user_a_tokens["refresh_token"]},
            headers={"Authorization": f"Bearer {user_a_tokens['access_token']}"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["refresh_token"] != user_a_tokens["refresh_token"]
        assert extract_subject(decode_token(data["access_token"])) == user_a.id

        # The new access token works on protected routes
        profile = await client.get(
            f"/api/v1/users/{user_a.id}",
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert profile.status_code == 200

    async def test_refresh_200_without_bearer(self, client: AsyncClient, user_a_tokens: dict):
        response = await client.post(
            "/api/v1/auth/refresh-token",
            json={"refresh_token": user_a_tokens["refresh_token"]},
        )
        assert response.status_code == 200

    async def test_refresh_200_with_expired_access_token(self, client: AsyncClient, user_a: User):
        expired_access = create_access_token(user_a.id, expires_delta=timedelta(seconds=-10))
        response = await client.post(
            "/api/v1/auth/refresh-token",
            json={"refresh_token": create_refresh_token(user_a.id)},
            headers={"Authorization": f"Bearer {expired_access}"},
        )
        assert response.status_code == 200

    async def test_refresh_400_access_token_in_body(self, client: AsyncClient, user_a_tokens: dict):
        """An access token cannot be used to mint new tokens."""
        response = await client.post(
            "/api/v1/auth/refresh-token",
            json={"refresh_token": user_a_tokens["access_token"]},
        )
        assert response.status_code == 400

    async def test_refresh_401_expired_refresh_token(self, client: AsyncClient, user_a: User):
        expired = create_refresh_token(user_a.id, expires_delta=timedelta(seconds=-10))
        response = await client.post(
            "/api/v1/auth/refresh-token",
            json={"refresh_token": expired},
        )
        assert response.status_code == 401

    async def test_refresh_401_tokens_of_different_users(
        self, client: AsyncClient, user_a_tokens: dict, user_b_jwt: str
    ):
        response = await client.post(
            "/api/v1/auth/refresh-token",
            json={"refresh_token": user_a_tokens["refresh_token"]},
            headers={"Authorization": f"Bearer {user_b_jwt}"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "wrong credentials"}

    async def test_refresh_401_deleted_user(
        self, client: AsyncClient, user_a: User, user_a_tokens: dict
    ):
        deleted = await client.request(
            "DELETE",
            f"/api/v1/users/{user_a.id}",
            json={"password": WENDY["password"]},
            headers={"Authorization": f"Bearer {user_a_tokens['access_token']}"},
        )
        assert deleted.status_code == 204

        response = await client.post(
            "/api/v1/auth/refresh-token",
            json={"refresh_token": user_a_tokens["refresh_token"]},
        )
        assert response.status_code == 401


@pytest.mark.integration
class TestServiceEndpoints:

    async def test_root(self, client: AsyncClient):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    async def test_health_503_before_startup(self, client: AsyncClient):
        """The app's own database was never connected in tests."""
        response = await client.get("/health")
        assert response.status_code == 503
        assert response.json() == {"error": "database is not ready"}

    async def test_unknown_path_404(self, client: AsyncClient):
        response = await client.get("/api/v1/nope")
        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    async def test_unsupported_method_405(self, client: AsyncClient):
        response = await client.put("/api/v1/users", json={})
        assert response.status_code == 405
        assert response.json() == {"error": "Method Not Allowed"}
