# tests/integration/test_goals_tasks.py
"""Integration tests for goals and tasks."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from tests.factories import GoalFactory, TaskFactory


@pytest.mark.integration
class TestGoals:

    async def test_create_and_get(self, async_client: AsyncClient, auth_headers):
        created = await async_client.post(
            "/api/v1/goals",
            headers=auth_headers,
            json={"title": "Launch v2", "priority": "high", "deadline": "2030-06-01T00:00:00Z"},
        )

        assert created.status_code == 201
        goal = created.json()
        assert goal["status"] == "pending"
        assert goal["progress"] == 0
        assert goal["completed_at"] is None

        fetched = await async_client.get(f"/api/v1/goals/{goal['id']}", headers=auth_headers)
        assert fetched.json()["title"] == "Launch v2"

    async def test_invalid_status_rejected(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/api/v1/goals", headers=auth_headers, json={"title": "X", "status": "in_progress"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_completing_sets_progress_and_timestamp(self, async_client: AsyncClient, auth_headers):
        goal = (await async_client.post("/api/v1/goals", headers=auth_headers, json={"title": "Ship"})).json()

        response = await async_client.patch(
            f"/api/v1/goals/{goal['id']}", headers=auth_headers, json={"status": "completed"}
        )

        assert response.json()["progress"] == 100
        assert response.json()["completed_at"] is not None

        reopened = await async_client.patch(
            f"/api/v1/goals/{goal['id']}", headers=auth_headers, json={"status": "in-progress"}
        )
        assert reopened.json()["completed_at"] is None

    @pytest.mark.parametrize(
        "deadline", ["2030-06-01T00:00:00", "2030-06-01T02:00:00+02:00", "2030-06-01T00:00:00Z"]
    )
    async def test_deadline_stored_as_utc(self, async_client: AsyncClient, auth_headers, deadline):
        created = await async_client.post(
            "/api/v1/goals", headers=auth_headers, json={"title": "Launch", "deadline": deadline}
        )

        assert created.status_code == 201, created.text
        assert created.json()["deadline"] == "2030-06-01T00:00:00Z"

        fetched = await async_client.get(f"/api/v1/goals/{created.json()['id']}", headers=auth_headers)
        assert fetched.json()["deadline"] == "2030-06-01T00:00:00Z"

    async def test_list_filters_and_pagination(
        self, async_client: AsyncClient, db_session, user, auth_headers
    ):
        await GoalFactory.create_batch_async(session=db_session, size=3, user_id=user.id, priority="high")
        await GoalFactory.create_async(session=db_session, user_id=user.id, priority="low")

        response = await async_client.get(
            "/api/v1/goals", headers=auth_headers, params={"priority": "high", "page_size": 2}
        )

        body = response.json()
        assert len(body["items"]) == 2
        assert body["pagination"]["total"] == 3
        assert body["pagination"]["has_next"] is True

    async def test_delete(self, async_client: AsyncClient, db_session, user, auth_headers):
        goal = await GoalFactory.create_async(session=db_session, user_id=user.id)

        response = await async_client.delete(f"/api/v1/goals/{goal.id}", headers=auth_headers)

        assert response.status_code == 204
        missing = await async_client.get(f"/api/v1/goals/{goal.id}", headers=auth_headers)
        assert missing.status_code == 404


@pytest.mark.integration
class TestTasks:

    async def test_create_under_goal(self, async_client: AsyncClient, db_session, user, auth_headers):
        goal = await GoalFactory.create_async(session=db_session, user_id=user.id)

        response = await async_client.post(
            "/api/v1/tasks",
            headers=auth_headers,
            json={"title": "Write copy", "goal_id": str(goal.id), "estimated_minutes": 45},
        )

        assert response.status_code == 201
        assert response.json()["goal_id"] == str(goal.id)

        listed = await async_client.get(
            "/api/v1/tasks", headers=auth_headers, params={"goal_id": str(goal.id)}
        )
        assert listed.json()["pagination"]["total"] == 1

    async def test_goal_must_belong_to_user(
        self, async_client: AsyncClient, db_session, other_user, auth_headers
    ):
        goal = await GoalFactory.create_async(session=db_session, user_id=other_user.id)

        response = await async_client.post(
            "/api/v1/tasks", headers=auth_headers, json={"title": "Sneaky", "goal_id": str(goal.id)}
        )

        assert response.status_code == 404

    async def test_complete_task(self, async_client: AsyncClient, db_session, user, auth_headers):
        task = await TaskFactory.create_async(session=db_session, user_id=user.id)

        response = await async_client.patch(
            f"/api/v1/tasks/{task.id}", headers=auth_headers, json={"status": "completed"}
        )

        assert response.status_code == 200
        assert response.json()["completed_at"] is not None

    async def test_bulk_update(
        self, async_client: AsyncClient, db_session, user, other_user, auth_headers
    ):
        mine = await TaskFactory.create_batch_async(session=db_session, size=2, user_id=user.id)
        theirs = await TaskFactory.create_async(session=db_session, user_id=other_user.id)
        unknown = uuid4()

        response = await async_client.patch(
            "/api/v1/tasks/bulk",
            headers=auth_headers,
            json={
                "task_ids": [str(t.id) for t in mine] + [str(theirs.id), str(unknown)],
                "status": "completed",
                "priority": "high",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["updated"] == 2
        assert set(body["not_found"]) == {str(theirs.id), str(unknown)}

        completed = await async_client.get(
            "/api/v1/tasks", headers=auth_headers, params={"status": "completed"}
        )
        assert completed.json()["pagination"]["total"] == 2

        await db_session.refresh(theirs)
        assert theirs.status == "pending"

    async def test_bulk_requires_a_change(self, async_client: AsyncClient, auth_headers):
        response = await async_client.patch(
            "/api/v1/tasks/bulk", headers=auth_headers, json={"task_ids": [str(uuid4())]}
        )

        assert response.status_code == 400

    async def test_delete_goal_keeps_tasks(self, async_client: AsyncClient, db_session, user, auth_headers):
        goal = await GoalFactory.create_async(session=db_session, user_id=user.id)
        task = await TaskFactory.create_async(session=db_session, user_id=user.id, goal_id=goal.id)

        await async_client.delete(f"/api/v1/goals/{goal.id}", headers=auth_headers)

        response = await async_client.get(f"/api/v1/tasks/{task.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["goal_id"] is None

    async def test_unknown_priority_rejected(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/api/v1/tasks", headers=auth_headers, json={"title": "Call bank", "priority": "urgent"}
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert [d["field"] for d in error["details"]] == ["body.priority"]
        assert error["details"][0]["value"] == "urgent"

    async def test_bulk_rejects_unknown_status(self, async_client: AsyncClient, auth_headers):
        response = await async_client.patch(
            "/api/v1/tasks/bulk",
            headers=auth_headers,
            json={"task_ids": [str(uuid4())], "status": "done"},
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == "body.status"

    async def test_reopening_clears_completed_at(self, async_client: AsyncClient, db_session, user, auth_headers):
        task = await TaskFactory.create_async(session=db_session, user_id=user.id)
        await async_client.patch(f"/api/v1/tasks/{task.id}", headers=auth_headers, json={"status": "completed"})

        response = await async_client.patch(
            f"/api/v1/tasks/{task.id}", headers=auth_headers, json={"status": "in-progress"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "in-progress"
        assert response.json()["completed_at"] is None

    async def test_bulk_reopen_clears_completed_at(
        self, async_client: AsyncClient, db_session, user, auth_headers
    ):
        task = await TaskFactory.create_async(session=db_session, user_id=user.id)
        await async_client.patch(f"/api/v1/tasks/{task.id}", headers=auth_headers, json={"status": "completed"})

        await async_client.patch(
            "/api/v1/tasks/bulk", headers=auth_headers, json={"task_ids": [str(task.id)], "status": "pending"}
        )

        response = await async_client.get(f"/api/v1/tasks/{task.id}", headers=auth_headers)
        assert response.json()["completed_at"] is None

    @pytest.mark.parametrize(
        "order,expected", [("desc", ["high", "medium", "low"]), ("asc", ["low", "medium", "high"])]
    )
    async def test_sort_by_priority_uses_rank(
        self, async_client: AsyncClient, db_session, user, auth_headers, order, expected
    ):
        for priority in ("low", "high", "medium"):
            await TaskFactory.create_async(session=db_session, user_id=user.id, priority=priority)

        response = await async_client.get(
            "/api/v1/tasks", headers=auth_headers, params={"sort_by": "priority", "order": order}
        )

        assert response.status_code == 200
        assert [t["priority"] for t in response.json()["items"]] == expected

    async def test_missing_task_is_not_found(self, async_client: AsyncClient, auth_headers):
        response = await async_client.get(f"/api/v1/tasks/{uuid4()}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_update_missing_task_is_not_found(self, async_client: AsyncClient, auth_headers):
        response = await async_client.patch(
            f"/api/v1/tasks/{uuid4()}", headers=auth_headers, json={"title": "Gone"}
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"
