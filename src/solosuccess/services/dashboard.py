"""Dashboard aggregation for the signed-in user."""

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.infrastructure.database.base_model import utcnow
from solosuccess.infrastructure.database.models.goal import WorkStatus
from solosuccess.infrastructure.database.models.user import User
from solosuccess.infrastructure.database.repositories import (
    AlertRepository,
    ConversationRepository,
    GoalRepository,
    TaskRepository,
)
from solosuccess.infrastructure.database.repositories.goal import OPEN_STATUSES

TODAYS_TASKS_LIMIT = 10
ACTIVE_GOALS_LIMIT = 6
RECENT_CONVERSATIONS_LIMIT = 6

WELCOME_INSIGHTS = [
    {
        "type": "welcome",
        "title": "Welcome to SoloSuccess AI!",
        "description": "Start by creating your first goal or task to get organized.",
        "action": "Create Goal",
    },
    {
        "type": "tip",
        "title": "Meet your AI team",
        "description": "Ask an agent for help with strategy, marketing or product decisions.",
        "action": "Start Chat",
    },
]


class DashboardService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.tasks = TaskRepository(session)
        self.goals = GoalRepository(session)
        self.conversations = ConversationRepository(session)
        self.alerts = AlertRepository(session)

    async def today_stats(self, user: User, now: datetime) -> dict[str, Any]:
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        touched = await self.tasks.updated_since(user.id, start_of_day)
        completed = [
            task for task in touched
            if task.status == WorkStatus.COMPLETED
            and task.completed_at is not None
            and task.completed_at >= start_of_day
        ]
        active_goals = await self.goals.count_owned(user.id, status__in=OPEN_STATUSES)
        return {
            "tasks_completed": len(completed),
            "tasks_updated": len(touched),
            "active_goals": active_goals,
            "date": start_of_day,
        }

    async def overview(self, user: User) -> dict[str, Any]:
        now = utcnow()
        todays_tasks = await self.tasks.open_for_user(user.id, TODAYS_TASKS_LIMIT)
        total_tasks = await self.tasks.count_owned(user.id)

        return {
            "user": user,
            "today_stats": await self.today_stats(user, now),
            "todays_tasks": todays_tasks,
            "active_goals": await self.goals.active_for_user(user.id, ACTIVE_GOALS_LIMIT),
            "recent_conversations": await self.conversations.recent(
                user.id, limit=RECENT_CONVERSATIONS_LIMIT
            ),
            "unread_alerts": await self.alerts.count_owned(
                user.id, is_read=False, is_archived=False
            ),
            "insights": WELCOME_INSIGHTS if total_tasks == 0 else [],
        }
