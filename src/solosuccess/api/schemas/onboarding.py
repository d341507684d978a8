"""Onboarding and dashboard schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from solosuccess.api.schemas.auth import UserRead
from solosuccess.api.schemas.chat import ConversationSummary
from solosuccess.api.schemas.goals import GoalRead, TaskRead


class OnboardingRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    business_type: Optional[str] = Field(default=None, max_length=100)
    industry: Optional[str] = Field(default=None, max_length=100)
    goals: list[str] = Field(default_factory=list, max_length=10)


class OnboardingResult(BaseModel):
    success: bool
    steps: list[str]
    goals_created: int
    tasks_created: int
    briefcase_created: bool
    already_completed: bool


class TodayStats(BaseModel):
    tasks_completed: int
    tasks_updated: int
    active_goals: int
    date: datetime


class DashboardInsight(BaseModel):
    type: str
    title: str
    description: str
    action: Optional[str] = None


class DashboardResponse(BaseModel):
    user: UserRead
    today_stats: TodayStats
    todays_tasks: list[TaskRead]
    active_goals: list[GoalRead]
    recent_conversations: list[ConversationSummary]
    unread_alerts: int
    insights: list[DashboardInsight]
