from datetime import datetime
from typing import Literal, Sequence
from uuid import UUID

from sqlalchemy import Select, asc, case, desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.infrastructure.database.models.goal import Goal, Task, WorkStatus
from solosuccess.infrastructure.database.repositories.base import OwnedRepository


OPEN_STATUSES = [WorkStatus.PENDING.value, WorkStatus.IN_PROGRESS.value]

PRIORITY_RANK = {"low": 1, "medium": 2, "high": 3}


class GoalRepository(OwnedRepository[Goal]):
    def __init__(self, session: AsyncSession):
        super().__init__(Goal, session)

    async def titles_for_user(self, user_id: UUID) -> set[str]:
        result = await self.session.execute(
            select(Goal.title).where(Goal.user_id == user_id)
        )
        return {title.strip().lower() for title in result.scalars().all()}

    async def active_for_user(self, user_id: UUID, limit: int) -> Sequence[Goal]:
        return await self.list_owned(
            user_id,
            sort_by="deadline",
            order="asc",
            limit=limit,
            status__in=OPEN_STATUSES,
        )


class TaskRepository(OwnedRepository[Task]):
    def __init__(self, session: AsyncSession):
        super().__init__(Task, session)

    def apply_sorting(
        self,
        query: Select,
        sort_by: str = "created_at",
        order: Literal["asc", "desc"] = "desc"
    ) -> Select:
        """Priority sorts by rank (low < medium < high), not alphabetically."""
        if sort_by != "priority":
            return super().apply_sorting(query, sort_by, order)

        priority_rank = case(PRIORITY_RANK, value=Task.priority, else_=0)
        if order == "asc":
            return query.order_by(asc(priority_rank), asc(Task.id))
        return query.order_by(desc(priority_rank), desc(Task.id))

    async def titles_for_user(self, user_id: UUID) -> set[str]:
        result = await self.session.execute(
            select(Task.title).where(Task.user_id == user_id)
        )
        return {title.strip().lower() for title in result.scalars().all()}

    async def open_for_user(self, user_id: UUID, limit: int) -> Sequence[Task]:
        """Open tasks, soonest due first; tasks without a due date go last."""
        query = (
            self.for_user(user_id)
            .where(Task.status.in_(OPEN_STATUSES))
            .order_by(Task.due_date.is_(None), asc(Task.due_date), asc(Task.created_at))
            .limit(limit)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def updated_since(self, user_id: UUID, since: datetime) -> Sequence[Task]:
        query = self.for_user(user_id).where(
            or_(Task.updated_at >= since, Task.completed_at >= since)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def detach_goal(self, goal_id: UUID) -> int:
        return await self.update_many({"goal_id": goal_id}, {"goal_id": None})
