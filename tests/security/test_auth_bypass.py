"""
Authentication bypass and tenant isolation tests.

Every business route requires a valid bearer token, and a valid token
never reaches another user's rows.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from solosuccess.auth.security import create_access_token
from tests.factories import GoalFactory


PROTECTED_ROUTES = [
    ("GET", "/api/v1/auth/me"),
    ("GET", "/api/v1/users/me/profile"),
    ("GET", "/api/v1/dashboard"),
    ("GET", "/api/v1/goals"),
    ("GET", "/api/v1/tasks"),
    ("GET", "/api/v1/briefcase/folders"),
    ("GET", "/api/v1/chat/agents"),
    ("GET", "/api/v1/competitors"),
    ("GET", "/api/v1/alerts"),
    ("GET", "/api/v1/opportunities"),
    ("POST", "/api/v1/onboarding/complete"),
]


class TestAuthenticationRequired:

    @pytest.mark.parametrize("method,path", PROTECTED_ROUTES)
    async def test_missing_token_rejected(self, async_client: AsyncClient, method: str, path: str):
        response = await async_client.request(method, path, json={})

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_tampered_token_rejected(self, async_client: AsyncClient, auth_headers):
        token = auth_headers["Authorization"] + "x"

        response = await async_client.get("/api/v1/auth/me", headers={"Authorization": token})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_INVALID"

    async def test_expired_token_rejected(self, async_client: AsyncClient, user):
        token, _ = create_access_token(user.id, user.email, expires_delta=timedelta(seconds=-10))

        response = await async_client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    async def test_deactivated_user_rejected(self, async_client: AsyncClient, db_session, user, auth_headers):
        user.is_active = False
        db_session.add(user)
        await db_session.commit()

        response = await async_client.get("/api/v1/auth/me", headers=auth_headers)

        assert response.status_code == 401


class TestTenantIsolation:

    async def test_other_users_goal_is_not_found(
        self, async_client: AsyncClient, db_session, other_user, auth_headers
    ):
        goal = await GoalFactory.create_async(session=db_session, user_id=other_user.id)

        response = await async_client.get(f"/api/v1/goals/{goal.id}", headers=auth_headers)

        assert response.status_code == 404

    async def test_other_users_goals_not_listed(
        self, async_client: AsyncClient, db_session, other_user, auth_headers
    ):
        await GoalFactory.create_async(session=db_session, user_id=other_user.id)

        response = await async_client.get("/api/v1/goals", headers=auth_headers)

        assert response.json()["pagination"]["total"] == 0
