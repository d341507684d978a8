"""
Onboarding workflow.

Every step checks for existing rows before inserting, so completing
onboarding twice never duplicates the briefcase, goals or tasks.
"""

from datetime import timedelta
from typing import Any
from uuid import UUID

from kombu.exceptions import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.api.schemas.onboarding import OnboardingRequest
from solosuccess.infrastructure.database.base_model import utcnow
from solosuccess.infrastructure.database.models.goal import Goal, Priority, Task
from solosuccess.infrastructure.database.models.user import User
from solosuccess.infrastructure.database.repositories import (
    GoalRepository,
    TaskRepository,
    UserRepository,
)
from solosuccess.infrastructure.observability.logging import get_logger
from solosuccess.services.briefcase import BriefcaseService

logger = get_logger(__name__)

DEFAULT_GOALS = [
    ("Launch your first offer", "Define, price and ship the first product or service you sell", Priority.HIGH.value),
    ("Build your audience", "Grow a community of people who need what you offer", Priority.MEDIUM.value),
    ("Systemize your operations", "Document and automate the work you repeat every week", Priority.MEDIUM.value),
]

ONBOARDING_TASKS = [
    ("Complete your profile", "Add your business details so your AI team can tailor its advice", Priority.HIGH.value, 10),
    ("Have your first chat with an AI agent", "Ask Blaze or Echo about your next growth move", Priority.MEDIUM.value, 15),
    ("Upload a document to your briefcase", "Keep plans, contracts and notes in one place", Priority.LOW.value, 5),
    ("Add your first competitor", "Start monitoring a competitor's moves and pricing", Priority.MEDIUM.value, 10),
]

WELCOME_POINTS = 100


def enqueue_welcome_email(user_id: UUID) -> bool:
    """Queue the welcome email on the notifications queue. False if the broker is unreachable."""
    from solosuccess.workers.tasks.notifications import send_welcome_email

    try:
        send_welcome_email.delay(str(user_id))
    except OperationalError as e:
        logger.error("Failed to queue welcome email", user_id=str(user_id), error=str(e))
        return False
    return True


class OnboardingService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.goals = GoalRepository(session)
        self.tasks = TaskRepository(session)

    async def _create_goals(self, user: User, titles: list[str]) -> list[Goal]:
        existing = await self.goals.titles_for_user(user.id)
        if titles:
            planned = [(title, None, Priority.MEDIUM.value) for title in titles]
        else:
            planned = DEFAULT_GOALS

        deadline = utcnow() + timedelta(days=90)
        created = []
        for title, description, priority in planned:
            key = title.strip().lower()
            if not key or key in existing:
                continue
            existing.add(key)
            created.append(
                await self.goals.create(
                    Goal(
                        user_id=user.id,
                        title=title.strip(),
                        description=description,
                        priority=priority,
                        category="onboarding",
                        deadline=deadline,
                    )
                )
            )
        return created

    async def _create_tasks(self, user: User) -> list[Task]:
        existing = await self.tasks.titles_for_user(user.id)
        due_date = utcnow() + timedelta(days=7)
        created = []
        for title, description, priority, minutes in ONBOARDING_TASKS:
            if title.lower() in existing:
                continue
            created.append(
                await self.tasks.create(
                    Task(
                        user_id=user.id,
                        title=title,
                        description=description,
                        priority=priority,
                        category="onboarding",
                        due_date=due_date,
                        estimated_minutes=minutes,
                    )
                )
            )
        return created

    async def complete(self, user: User, data: OnboardingRequest) -> dict[str, Any]:
        """
        Run the onboarding steps for a user.

        Welcome points and the welcome email are granted on the first
        completion only.
        """
        steps: list[str] = []
        already_completed = user.onboarding_completed

        _, briefcase_created = await BriefcaseService(self.session).ensure_default_folder(user.id)
        steps.append("Briefcase created" if briefcase_created else "Briefcase already exists")

        goals = await self._create_goals(user, data.goals)
        steps.append(f"Created {len(goals)} initial goals")

        tasks = await self._create_tasks(user)
        steps.append(f"Created {len(tasks)} onboarding tasks")

        changes: dict[str, Any] = {}
        if data.business_type:
            changes["business_type"] = data.business_type
        if data.industry:
            changes["industry"] = data.industry
        if not already_completed:
            changes.update(
                onboarding_completed=True,
                onboarding_completed_at=utcnow(),
                level=max(user.level, 1),
                total_points=user.total_points + WELCOME_POINTS,
            )
        if changes:
            user = await self.users.apply_update(user, **changes)
        steps.append("User profile updated")

        if not already_completed:
            # The row must be committed before a worker can load it
            await self.session.commit()
            if enqueue_welcome_email(user.id):
                steps.append("Welcome email queued")

        logger.info(
            "Onboarding completed",
            user_id=str(user.id),
            goals_created=len(goals),
            tasks_created=len(tasks),
            already_completed=already_completed,
        )
        return {
            "success": True,
            "steps": steps,
            "goals_created": len(goals),
            "tasks_created": len(tasks),
            "briefcase_created": briefcase_created,
            "already_completed": already_completed,
        }
