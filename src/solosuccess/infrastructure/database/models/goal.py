"""Goal and task models (the "SlayList")."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy import Index
from sqlmodel import Field

from solosuccess.infrastructure.database.base_model import BaseModel


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WorkStatus(str, Enum):
    """Status values shared by goals and tasks."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Goal(BaseModel, table=True):
    __tablename__ = "goals"

    user_id: UUID = Field(foreign_key="users.id", index=True, nullable=False)
    title: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None)
    category: Optional[str] = Field(default=None, max_length=100)
    priority: str = Field(default=Priority.MEDIUM.value, max_length=16)
    status: str = Field(default=WorkStatus.PENDING.value, max_length=16, index=True)
    progress: int = Field(default=0, nullable=False)
    deadline: Optional[datetime] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)

    __table_args__ = (
        Index('ix_goals_user_status', 'user_id', 'status'),
    )


class Task(BaseModel, table=True):
    __tablename__ = "tasks"

    user_id: UUID = Field(foreign_key="users.id", index=True, nullable=False)
    goal_id: Optional[UUID] = Field(
        default=None,
        foreign_key="goals.id",
        ondelete="SET NULL",
        index=True,
    )
    title: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None)
    category: Optional[str] = Field(default=None, max_length=100)
    priority: str = Field(default=Priority.MEDIUM.value, max_length=16)
    status: str = Field(default=WorkStatus.PENDING.value, max_length=16, index=True)
    due_date: Optional[datetime] = Field(default=None)
    estimated_minutes: Optional[int] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)

    __table_args__ = (
        Index('ix_tasks_user_status', 'user_id', 'status'),
        Index('ix_tasks_user_due_date', 'user_id', 'due_date'),
    )
