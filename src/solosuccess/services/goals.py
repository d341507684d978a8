"""Goals and tasks."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.api.schemas.goals import (
    GoalCreate,
    GoalUpdate,
    TaskBulkUpdate,
    TaskCreate,
    TaskUpdate,
)
from solosuccess.domain.exceptions import NotFound
from solosuccess.infrastructure.database.base_model import as_utc, utcnow
from solosuccess.infrastructure.database.models.goal import Goal, Task, WorkStatus
from solosuccess.infrastructure.database.repositories import (
    GoalRepository,
    PaginatedResult,
    TaskRepository,
)
from solosuccess.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

# Columns that may be cleared by sending null
NULLABLE_FIELDS = {"description", "category", "deadline", "due_date", "estimated_minutes", "goal_id"}


def _changes(data: Any) -> dict[str, Any]:
    return {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }


def completion_changes(current_status: str, new_status: Optional[str], completed_at) -> dict[str, Any]:
    """completed_at follows the status: set on completion, cleared when leaving it."""
    if new_status is None or new_status == current_status:
        return {}
    if new_status == WorkStatus.COMPLETED:
        return {"completed_at": completed_at or utcnow()}
    if current_status == WorkStatus.COMPLETED:
        return {"completed_at": None}
    return {}


class GoalService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.goals = GoalRepository(session)
        self.tasks = TaskRepository(session)

    async def get(self, user_id: UUID, goal_id: UUID) -> Goal:
        goal = await self.goals.get_owned(goal_id, user_id)
        if goal is None:
            raise NotFound("Goal not found", details={"goal_id": str(goal_id)})
        return goal

    async def create(self, user_id: UUID, data: GoalCreate) -> Goal:
        values = data.model_dump()
        values["deadline"] = as_utc(values["deadline"])
        if data.status == WorkStatus.COMPLETED:
            values.update(progress=100, completed_at=utcnow())
        return await self.goals.create(Goal(user_id=user_id, **values))

    async def search(
        self,
        user_id: UUID,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResult:
        query = self.goals.apply_filters(
            self.goals.for_user(user_id), {"status": status, "priority": priority}
        )
        query = self.goals.apply_sorting(query, "created_at", "desc")
        return await self.goals.paginate(query, page, page_size)

    async def update(self, user_id: UUID, goal_id: UUID, data: GoalUpdate) -> Goal:
        """Completing a goal stamps completed_at and forces progress to 100."""
        goal = await self.get(user_id, goal_id)
        changes = _changes(data)
        if "deadline" in changes:
            changes["deadline"] = as_utc(changes["deadline"])

        changes.update(completion_changes(goal.status, data.status, goal.completed_at))
        if data.status == WorkStatus.COMPLETED:
            changes["progress"] = 100

        return await self.goals.apply_update(goal, **changes)

    async def delete(self, user_id: UUID, goal_id: UUID) -> None:
        """Delete a goal; its tasks are kept and detached."""
        goal = await self.get(user_id, goal_id)
        detached = await self.tasks.detach_goal(goal.id)
        await self.goals.delete_entity(goal)
        logger.info("Goal deleted", goal_id=str(goal_id), detached_tasks=detached)


class TaskService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.tasks = TaskRepository(session)
        self.goals = GoalRepository(session)

    async def _check_goal(self, user_id: UUID, goal_id: Optional[UUID]) -> None:
        if goal_id is not None and await self.goals.get_owned(goal_id, user_id) is None:
            raise NotFound("Goal not found", details={"goal_id": str(goal_id)})

    async def get(self, user_id: UUID, task_id: UUID) -> Task:
        task = await self.tasks.get_owned(task_id, user_id)
        if task is None:
            raise NotFound("Task not found", details={"task_id": str(task_id)})
        return task

    async def create(self, user_id: UUID, data: TaskCreate) -> Task:
        await self._check_goal(user_id, data.goal_id)
        values = data.model_dump()
        values["due_date"] = as_utc(values["due_date"])
        if data.status == WorkStatus.COMPLETED:
            values["completed_at"] = utcnow()
        return await self.tasks.create(Task(user_id=user_id, **values))

    async def search(
        self,
        user_id: UUID,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        goal_id: Optional[UUID] = None,
        category: Optional[str] = None,
        sort_by: str = "created_at",
        order: str = "desc",
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResult:
        query = self.tasks.apply_filters(
            self.tasks.for_user(user_id),
            {"status": status, "priority": priority, "goal_id": goal_id, "category": category},
        )
        query = self.tasks.apply_sorting(query, sort_by, order)
        return await self.tasks.paginate(query, page, page_size)

    async def update(self, user_id: UUID, task_id: UUID, data: TaskUpdate) -> Task:
        task = await self.get(user_id, task_id)
        changes = _changes(data)
        if changes.get("goal_id") is not None:
            await self._check_goal(user_id, changes["goal_id"])
        if "due_date" in changes:
            changes["due_date"] = as_utc(changes["due_date"])

        changes.update(completion_changes(task.status, data.status, task.completed_at))
        return await self.tasks.apply_update(task, **changes)

    async def delete(self, user_id: UUID, task_id: UUID) -> None:
        task = await self.get(user_id, task_id)
        await self.tasks.delete_entity(task)

    async def bulk_update(self, user_id: UUID, data: TaskBulkUpdate) -> dict[str, Any]:
        """
        Update status and/or priority of many tasks.

        Ids that do not exist or belong to another user are reported in
        `not_found` instead of failing the request.
        """
        requested = list(dict.fromkeys(data.task_ids))
        tasks = await self.tasks.get_many_owned(requested, user_id)
        found = {task.id for task in tasks}

        for task in tasks:
            changes: dict[str, Any] = {}
            if data.priority is not None:
                changes["priority"] = data.priority
            if data.status is not None:
                changes["status"] = data.status
                changes.update(completion_changes(task.status, data.status, task.completed_at))
            for key, value in changes.items():
                setattr(task, key, value)
            task.updated_at = utcnow()

        await self.session.flush()
        not_found = [task_id for task_id in requested if task_id not in found]
        logger.info("Tasks bulk updated", updated=len(tasks), not_found=len(not_found))
        return {"updated": len(tasks), "not_found": not_found}
