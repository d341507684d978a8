"""Goal and task schemas."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

PriorityLiteral = Literal["low", "medium", "high"]
StatusLiteral = Literal["pending", "in-progress", "completed", "cancelled"]


class GoalCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    priority: PriorityLiteral = "medium"
    status: StatusLiteral = "pending"
    progress: int = Field(default=0, ge=0, le=100)
    deadline: Optional[datetime] = None


class GoalUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    priority: Optional[PriorityLiteral] = None
    status: Optional[StatusLiteral] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    deadline: Optional[datetime] = None


class GoalRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    priority: str
    status: str
    progress: int
    deadline: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TaskCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    goal_id: Optional[UUID] = None
    category: Optional[str] = Field(default=None, max_length=100)
    priority: PriorityLiteral = "medium"
    status: StatusLiteral = "pending"
    due_date: Optional[datetime] = None
    estimated_minutes: Optional[int] = Field(default=None, ge=1, le=10080)


class TaskUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    goal_id: Optional[UUID] = None
    category: Optional[str] = Field(default=None, max_length=100)
    priority: Optional[PriorityLiteral] = None
    status: Optional[StatusLiteral] = None
    due_date: Optional[datetime] = None
    estimated_minutes: Optional[int] = Field(default=None, ge=1, le=10080)


class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    goal_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    priority: str
    status: str
    due_date: Optional[datetime] = None
    estimated_minutes: Optional[int] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TaskBulkUpdate(BaseModel):
    task_ids: list[UUID] = Field(..., min_length=1, max_length=100)
    status: Optional[StatusLiteral] = None
    priority: Optional[PriorityLiteral] = None

    @model_validator(mode="after")
    def require_change(self) -> "TaskBulkUpdate":
        if self.status is None and self.priority is None:
            raise ValueError("At least one of status or priority is required")
        return self


class TaskBulkResult(BaseModel):
    updated: int
    not_found: list[UUID]
