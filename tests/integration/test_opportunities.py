# tests/integration/test_opportunities.py
"""Integration tests for opportunities, their actions, metrics and ROI."""

import pytest
from httpx import AsyncClient

from tests.factories import CompetitorFactory, OpportunityFactory


async def create(client: AsyncClient, headers, **payload) -> dict:
    body = {
        "title": "Undercut enterprise tier",
        "opportunity_type": "pricing_opportunity",
        "impact": "high",
        "effort": "low",
        "timing": "immediate",
        "confidence": 0.8,
        **payload,
    }
    response = await client.post("/api/v1/opportunities", headers=headers, json=body)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.integration
class TestOpportunities:

    async def test_create_scores_and_tags(self, async_client: AsyncClient, auth_headers):
        opportunity = await create(
            async_client,
            auth_headers,
            evidence=[{"type": "pricing_data", "description": "Their plans went up 20%"}],
            tags=["q3"],
        )

        assert opportunity["priority_score"] == pytest.approx(2.98)
        assert opportunity["estimated_roi"] == 160
        assert opportunity["status"] == "identified"
        assert opportunity["tags"] == ["pricing_opportunity", "high", "immediate", "pricing_related", "q3"]
        assert "pricing_optimization" in opportunity["success_metrics"]

    async def test_detail_has_initial_metrics(self, async_client: AsyncClient, auth_headers):
        opportunity = await create(async_client, auth_headers)

        response = await async_client.get(f"/api/v1/opportunities/{opportunity['id']}", headers=auth_headers)

        detail = response.json()
        assert detail["actions"] == []
        metrics = {m["metric_name"]: m for m in detail["metrics"]}
        assert metrics["Revenue Impact"]["target_value"] == 16000
        assert metrics["Implementation Progress"]["unit"] == "percentage"

    async def test_unknown_competitor(self, async_client: AsyncClient, auth_headers, other_user, db_session):
        theirs = await CompetitorFactory.create_async(session=db_session, user_id=other_user.id)

        response = await async_client.post(
            "/api/v1/opportunities",
            headers=auth_headers,
            json={"title": "X", "opportunity_type": "market_gap", "competitor_id": str(theirs.id)},
        )

        assert response.status_code == 404

    async def test_list_filters_and_sorting(self, async_client: AsyncClient, db_session, user, auth_headers):
        common = {"session": db_session, "user_id": user.id}
        await OpportunityFactory.create_async(**common, title="Low", impact="low")
        await OpportunityFactory.create_async(**common, title="Critical", impact="critical")
        await OpportunityFactory.create_async(**common, title="High", impact="high", opportunity_type="product_gap")
        await OpportunityFactory.create_async(**common, title="Archived", impact="critical", is_archived=True)

        by_impact = await async_client.get(
            "/api/v1/opportunities", headers=auth_headers, params={"sort_by": "impact"}
        )
        by_type = await async_client.get(
            "/api/v1/opportunities", headers=auth_headers, params={"type": "product_gap"}
        )
        scored = await async_client.get(
            "/api/v1/opportunities", headers=auth_headers, params={"min_priority_score": 2.5}
        )

        assert [o["title"] for o in by_impact.json()["items"]] == ["Critical", "High", "Low"]
        assert [o["title"] for o in by_type.json()["items"]] == ["High"]
        assert all(o["priority_score"] >= 2.5 for o in scored.json()["items"])

    async def test_update_rescores_and_appends_notes(self, async_client: AsyncClient, auth_headers):
        opportunity = await create(async_client, auth_headers)
        url = f"/api/v1/opportunities/{opportunity['id']}"

        started = await async_client.patch(
            url, headers=auth_headers, json={"status": "in_progress", "notes": "Kicked off"}
        )
        rescored = await async_client.patch(
            url, headers=auth_headers, json={"effort": "high", "notes": "Scope grew"}
        )
        completed = await async_client.patch(url, headers=auth_headers, json={"status": "completed"})

        assert started.json()["started_at"] is not None
        notes = rescored.json()["implementation_notes"].splitlines()
        assert len(notes) == 2
        assert notes[0].endswith("] Kicked off")
        assert notes[1].startswith("[")
        # 3*0.4 + 1*0.3 + 4*0.2 + 0.8*0.1
        assert rescored.json()["priority_score"] == pytest.approx(2.38)
        assert rescored.json()["estimated_roi"] == 40
        assert completed.json()["progress"] == 100
        assert completed.json()["completed_at"] is not None

    async def test_delete_archives(self, async_client: AsyncClient, auth_headers):
        opportunity = await create(async_client, auth_headers)

        response = await async_client.delete(f"/api/v1/opportunities/{opportunity['id']}", headers=auth_headers)

        assert response.json()["is_archived"] is True
        active = await async_client.get("/api/v1/opportunities", headers=auth_headers)
        archived = await async_client.get(
            "/api/v1/opportunities", headers=auth_headers, params={"is_archived": True}
        )
        assert active.json()["pagination"]["total"] == 0
        assert archived.json()["pagination"]["total"] == 1

    async def test_record_roi(self, async_client: AsyncClient, auth_headers):
        opportunity = await create(async_client, auth_headers)

        response = await async_client.post(
            f"/api/v1/opportunities/{opportunity['id']}/roi",
            headers=auth_headers,
            json={"revenue": 12000, "costs": 4500},
        )

        assert response.json()["actual_roi"] == 7500
        detail = (await async_client.get(f"/api/v1/opportunities/{opportunity['id']}", headers=auth_headers)).json()
        metrics = {m["metric_name"]: m for m in detail["metrics"]}
        assert metrics["Revenue"]["current_value"] == 12000
        assert metrics["Costs"]["metric_type"] == "cost_savings"

    async def test_other_users_opportunity_hidden(self, async_client: AsyncClient, auth_headers, other_auth_headers):
        opportunity = await create(async_client, auth_headers)

        response = await async_client.get(
            f"/api/v1/opportunities/{opportunity['id']}", headers=other_auth_headers
        )

        assert response.status_code == 404


@pytest.mark.integration
class TestActionsAndMetrics:

    async def test_action_lifecycle(self, async_client: AsyncClient, auth_headers):
        opportunity = await create(async_client, auth_headers)
        base = f"/api/v1/opportunities/{opportunity['id']}/actions"

        created = await async_client.post(
            base, headers=auth_headers, json={"title": "Draft new pricing page", "estimated_cost": 200}
        )
        action_id = created.json()["id"]
        completed = await async_client.patch(
            f"{base}/{action_id}", headers=auth_headers, json={"status": "completed", "actual_cost": 150}
        )
        reopened = await async_client.patch(
            f"{base}/{action_id}", headers=auth_headers, json={"status": "in_progress"}
        )
        deleted = await async_client.delete(f"{base}/{action_id}", headers=auth_headers)

        assert created.status_code == 201
        assert created.json()["status"] == "pending"
        assert completed.json()["completed_at"] is not None
        assert completed.json()["actual_cost"] == 150
        assert reopened.json()["completed_at"] is None
        assert deleted.status_code == 204

    async def test_action_under_wrong_opportunity(self, async_client: AsyncClient, auth_headers):
        first = await create(async_client, auth_headers)
        second = await create(async_client, auth_headers)
        action = await async_client.post(
            f"/api/v1/opportunities/{first['id']}/actions", headers=auth_headers, json={"title": "Call"}
        )

        response = await async_client.patch(
            f"/api/v1/opportunities/{second['id']}/actions/{action.json()['id']}",
            headers=auth_headers,
            json={"status": "completed"},
        )

        assert response.status_code == 404

    async def test_metric_upsert(self, async_client: AsyncClient, auth_headers):
        opportunity = await create(async_client, auth_headers)
        url = f"/api/v1/opportunities/{opportunity['id']}/metrics"

        created = await async_client.put(
            url, headers=auth_headers, json={"metric_name": "Signups", "current_value": 10}
        )
        updated = await async_client.put(
            url, headers=auth_headers, json={"metric_name": "Signups", "current_value": 25}
        )

        assert created.json()["metric_type"] == "custom"
        assert updated.json()["id"] == created.json()["id"]
        assert updated.json()["current_value"] == 25
        detail = (await async_client.get(f"/api/v1/opportunities/{opportunity['id']}", headers=auth_headers)).json()
        assert len(detail["metrics"]) == 3


@pytest.mark.integration
class TestInsights:

    async def test_analytics(self, async_client: AsyncClient, auth_headers):
        first = await create(async_client, auth_headers)
        await create(async_client, auth_headers, opportunity_type="market_gap", impact="medium")
        await async_client.post(
            f"/api/v1/opportunities/{first['id']}/roi", headers=auth_headers, json={"revenue": 500, "costs": 100}
        )

        response = await async_client.get(
            "/api/v1/opportunities/analytics", headers=auth_headers, params={"timeframe": "week"}
        )

        body = response.json()
        assert body["total"] == 2
        assert body["by_type"] == {"pricing_opportunity": 1, "market_gap": 1}
        assert body["total_actual_roi"] == 400
        assert [o["id"] for o in body["top_performers"]] == [first["id"]]

    async def test_unknown_timeframe(self, async_client: AsyncClient, auth_headers):
        response = await async_client.get(
            "/api/v1/opportunities/analytics", headers=auth_headers, params={"timeframe": "decade"}
        )

        assert response.status_code == 400

    async def test_recommendations(self, async_client: AsyncClient, auth_headers):
        opportunity = await create(async_client, auth_headers)

        response = await async_client.get(
            f"/api/v1/opportunities/recommendations/{opportunity['id']}", headers=auth_headers
        )

        body = response.json()
        assert body["opportunity_id"] == opportunity["id"]
        assert 0 < body["scoring"]["overall_score"] <= 10
        assert body["recommendations"]
        assert all(0 <= r["confidence"] <= 1 for r in body["recommendations"])
