# tests/integration/test_auth.py
"""Integration tests for registration, login and the user profile."""

import pytest
from httpx import AsyncClient

from tests.factories import TEST_PASSWORD


@pytest.mark.integration
class TestRegistration:

    async def test_register_returns_token(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": "  New.Founder@Example.com ", "password": "long-enough", "full_name": "Ada"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["expires_in"] > 0
        assert body["user"]["email"] == "new.founder@example.com"
        assert body["user"]["onboarding_completed"] is False
        assert body["user"]["subscription_tier"] == "free"
        assert "hashed_password" not in body["user"]

        me = await async_client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}
        )
        assert me.status_code == 200
        assert me.json()["full_name"] == "Ada"

    async def test_duplicate_email(self, async_client: AsyncClient, user):
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": user.email.upper(), "password": "long-enough"},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_RESOURCE"

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "not-an-email", "password": "long-enough"},
            {"email": "short@example.com", "password": "short"},
            {"password": "long-enough"},
        ],
    )
    async def test_invalid_payload(self, async_client: AsyncClient, payload):
        response = await async_client.post("/api/v1/auth/register", json=payload)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.integration
class TestLogin:

    async def test_login(self, async_client: AsyncClient, user):
        response = await async_client.post(
            "/api/v1/auth/login", json={"email": user.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["user"]["id"] == str(user.id)

    async def test_wrong_password(self, async_client: AsyncClient, user):
        response = await async_client.post(
            "/api/v1/auth/login", json={"email": user.email, "password": "not-the-password"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_unknown_email(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/auth/login", json={"email": "ghost@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 401


@pytest.mark.integration
class TestProfile:

    async def test_get_profile(self, async_client: AsyncClient, user, auth_headers):
        response = await async_client.get("/api/v1/users/me/profile", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["email"] == user.email
        assert response.json()["timezone"] == "America/New_York"

    async def test_update_profile(self, async_client: AsyncClient, auth_headers):
        response = await async_client.patch(
            "/api/v1/users/me/profile",
            headers=auth_headers,
            json={
                "company_name": "Northwind",
                "industry": "Technology",
                "notification_preferences": {"email": False, "push": True, "marketing": False},
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["company_name"] == "Northwind"
        assert body["notification_preferences"]["email"] is False

        again = await async_client.get("/api/v1/users/me/profile", headers=auth_headers)
        assert again.json()["industry"] == "Technology"

    async def test_unset_fields_untouched(self, async_client: AsyncClient, auth_headers):
        await async_client.patch("/api/v1/users/me/profile", headers=auth_headers, json={"bio": "Solo"})

        response = await async_client.patch(
            "/api/v1/users/me/profile", headers=auth_headers, json={"phone": "555-0100"}
        )

        assert response.json()["bio"] == "Solo"
        assert response.json()["phone"] == "555-0100"
