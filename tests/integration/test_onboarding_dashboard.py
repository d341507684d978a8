# tests/integration/test_onboarding_dashboard.py
"""Integration tests for onboarding and the dashboard overview."""

import pytest
from httpx import AsyncClient

from tests.factories import AlertFactory, TaskFactory


@pytest.mark.integration
class TestOnboarding:

    async def test_first_completion(self, async_client: AsyncClient, user, auth_headers, queued_emails):
        response = await async_client.post(
            "/api/v1/onboarding/complete",
            headers=auth_headers,
            json={"business_type": "Consulting", "industry": "Technology"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["goals_created"] == 3
        assert body["tasks_created"] == 4
        assert body["briefcase_created"] is True
        assert body["already_completed"] is False
        assert "Welcome email queued" in body["steps"]
        assert queued_emails == [user.id]

        me = (await async_client.get("/api/v1/auth/me", headers=auth_headers)).json()
        assert me["onboarding_completed"] is True
        assert me["total_points"] == 100
        assert me["industry"] == "Technology"

    async def test_second_completion_is_idempotent(
        self, async_client: AsyncClient, user, auth_headers, queued_emails
    ):
        await async_client.post("/api/v1/onboarding/complete", headers=auth_headers, json={})

        response = await async_client.post("/api/v1/onboarding/complete", headers=auth_headers, json={})

        body = response.json()
        assert body["goals_created"] == 0
        assert body["tasks_created"] == 0
        assert body["briefcase_created"] is False
        assert body["already_completed"] is True
        assert queued_emails == [user.id]

        me = (await async_client.get("/api/v1/auth/me", headers=auth_headers)).json()
        assert me["total_points"] == 100
        goals = await async_client.get("/api/v1/goals", headers=auth_headers)
        assert goals.json()["pagination"]["total"] == 3

    async def test_custom_goals_replace_defaults(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/api/v1/onboarding/complete",
            headers=auth_headers,
            json={"goals": ["Hit $10k MRR", "hit $10k mrr ", "Hire a VA"]},
        )

        assert response.json()["goals_created"] == 2
        goals = await async_client.get("/api/v1/goals", headers=auth_headers)
        assert {g["title"] for g in goals.json()["items"]} == {"Hit $10k MRR", "Hire a VA"}


@pytest.mark.integration
class TestDashboard:

    async def test_new_user_gets_welcome_insights(self, async_client: AsyncClient, user, auth_headers):
        response = await async_client.get("/api/v1/dashboard", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["id"] == str(user.id)
        assert body["todays_tasks"] == []
        assert body["unread_alerts"] == 0
        assert [i["type"] for i in body["insights"]] == ["welcome", "tip"]

    async def test_overview_counts(
        self, async_client: AsyncClient, db_session, user, auth_headers, competitor
    ):
        await TaskFactory.create_async(session=db_session, user_id=user.id, title="Open task")
        await AlertFactory.create_async(session=db_session, user_id=user.id, competitor_id=competitor.id)
        await AlertFactory.create_async(
            session=db_session, user_id=user.id, competitor_id=competitor.id, is_read=True
        )
        await async_client.post("/api/v1/goals", headers=auth_headers, json={"title": "Grow"})

        response = await async_client.get("/api/v1/dashboard", headers=auth_headers)

        body = response.json()
        assert [t["title"] for t in body["todays_tasks"]] == ["Open task"]
        assert [g["title"] for g in body["active_goals"]] == ["Grow"]
        assert body["today_stats"]["active_goals"] == 1
        assert body["unread_alerts"] == 1
        assert body["insights"] == []
