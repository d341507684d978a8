# tests/integration/test_alerts.py
"""Integration tests for competitor alerts."""

import pytest
from httpx import AsyncClient

from tests.factories import AlertFactory, CompetitorFactory


@pytest.mark.integration
class TestAlerts:

    async def test_create(self, async_client: AsyncClient, auth_headers, competitor):
        response = await async_client.post(
            "/api/v1/alerts",
            headers=auth_headers,
            json={
                "competitor_id": str(competitor.id),
                "alert_type": "pricing_change",
                "severity": "warning",
                "title": "Acme cut prices",
                "recommended_actions": [{"action": "Review our pricing"}],
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["is_read"] is False
        assert body["acknowledged_at"] is None
        assert body["recommended_actions"] == [
            {"action": "Review our pricing", "priority": "medium", "estimated_effort": "1-2 hours"}
        ]

    async def test_create_for_foreign_competitor(
        self, async_client: AsyncClient, db_session, other_user, auth_headers
    ):
        theirs = await CompetitorFactory.create_async(session=db_session, user_id=other_user.id)

        response = await async_client.post(
            "/api/v1/alerts",
            headers=auth_headers,
            json={"competitor_id": str(theirs.id), "alert_type": "pricing_change", "title": "Nope"},
        )

        assert response.status_code == 404

    async def test_list_with_summary(self, async_client: AsyncClient, db_session, user, auth_headers, competitor):
        common = {"session": db_session, "user_id": user.id, "competitor_id": competitor.id}
        await AlertFactory.create_async(**common, severity="critical", alert_type="product_launch")
        await AlertFactory.create_async(**common, severity="info", is_read=True)
        await AlertFactory.create_async(**common, severity="warning", is_archived=True)

        response = await async_client.get(
            "/api/v1/alerts", headers=auth_headers, params={"is_archived": False, "sort_by": "severity"}
        )

        body = response.json()
        assert [a["severity"] for a in body["items"]] == ["critical", "info"]
        assert body["summary"] == {
            "total": 3,
            "unread": 2,
            "archived": 1,
            "by_severity": {"critical": 1, "info": 1, "warning": 1},
            "by_type": {"product_launch": 1, "pricing_change": 2},
        }

    async def test_filter_by_severity(self, async_client: AsyncClient, db_session, user, auth_headers, competitor):
        common = {"session": db_session, "user_id": user.id, "competitor_id": competitor.id}
        await AlertFactory.create_async(**common, severity="urgent")
        await AlertFactory.create_async(**common, severity="critical")
        await AlertFactory.create_async(**common, severity="info")

        response = await async_client.get(
            "/api/v1/alerts",
            headers=auth_headers,
            params=[("severity", "urgent"), ("severity", "critical")],
        )

        assert response.json()["pagination"]["total"] == 2

    async def test_mark_read_stamps_acknowledged(
        self, async_client: AsyncClient, db_session, user, auth_headers, competitor
    ):
        alert = await AlertFactory.create_async(session=db_session, user_id=user.id, competitor_id=competitor.id)

        response = await async_client.patch(
            f"/api/v1/alerts/{alert.id}", headers=auth_headers, json={"is_read": True}
        )

        assert response.json()["is_read"] is True
        assert response.json()["acknowledged_at"] is not None

    async def test_delete_archives(self, async_client: AsyncClient, db_session, user, auth_headers, competitor):
        alert = await AlertFactory.create_async(session=db_session, user_id=user.id, competitor_id=competitor.id)

        response = await async_client.delete(f"/api/v1/alerts/{alert.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["is_archived"] is True
        still_there = await async_client.get(f"/api/v1/alerts/{alert.id}", headers=auth_headers)
        assert still_there.status_code == 200

    async def test_other_users_alert_hidden(
        self, async_client: AsyncClient, db_session, user, competitor, other_auth_headers
    ):
        alert = await AlertFactory.create_async(session=db_session, user_id=user.id, competitor_id=competitor.id)

        response = await async_client.get(f"/api/v1/alerts/{alert.id}", headers=other_auth_headers)

        assert response.status_code == 404
