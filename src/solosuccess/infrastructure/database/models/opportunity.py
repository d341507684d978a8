"""Competitive opportunity models with their action plans and success metrics."""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from sqlalchemy import Column, JSON, Index, UniqueConstraint
from sqlmodel import Field

from solosuccess.infrastructure.database.base_model import BaseModel, utcnow


class OpportunityStatus(str, Enum):
    IDENTIFIED = "identified"
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class Opportunity(BaseModel, table=True):
    __tablename__ = "opportunities"

    user_id: UUID = Field(foreign_key="users.id", index=True, nullable=False)
    competitor_id: Optional[UUID] = Field(
        default=None,
        foreign_key="competitors.id",
        ondelete="SET NULL",
        index=True,
    )
    title: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None)
    opportunity_type: str = Field(max_length=64, nullable=False, index=True)
    impact: str = Field(default="medium", max_length=16)
    effort: str = Field(default="medium", max_length=16)
    timing: str = Field(default="short-term", max_length=16)
    confidence: float = Field(default=0.5, nullable=False)
    evidence: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    priority_score: float = Field(default=0.0, nullable=False, index=True)
    status: str = Field(default=OpportunityStatus.IDENTIFIED.value, max_length=16, index=True)
    progress: int = Field(default=0, nullable=False)
    implementation_notes: Optional[str] = Field(default=None)
    estimated_roi: Optional[float] = Field(default=None)
    actual_roi: Optional[float] = Field(default=None)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    success_metrics: dict = Field(default_factory=dict, sa_column=Column(JSON))
    is_archived: bool = Field(default=False, nullable=False)
    detected_at: datetime = Field(default_factory=utcnow, nullable=False)
    started_at: Optional[datetime] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)

    __table_args__ = (
        Index('ix_opportunities_user_archived', 'user_id', 'is_archived'),
    )


class OpportunityAction(BaseModel, table=True):
    __tablename__ = "opportunity_actions"

    opportunity_id: UUID = Field(foreign_key="opportunities.id", ondelete="CASCADE", index=True, nullable=False)
    user_id: UUID = Field(foreign_key="users.id", index=True, nullable=False)
    title: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None)
    action_type: str = Field(default="general", max_length=64)
    priority: str = Field(default="medium", max_length=16)
    status: str = Field(default="pending", max_length=16)
    estimated_effort_hours: Optional[float] = Field(default=None)
    actual_effort_hours: Optional[float] = Field(default=None)
    estimated_cost: Optional[float] = Field(default=None)
    actual_cost: Optional[float] = Field(default=None)
    expected_outcome: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    due_date: Optional[datetime] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)


class OpportunityMetric(BaseModel, table=True):
    __tablename__ = "opportunity_metrics"

    opportunity_id: UUID = Field(foreign_key="opportunities.id", ondelete="CASCADE", index=True, nullable=False)
    user_id: UUID = Field(foreign_key="users.id", index=True, nullable=False)
    metric_name: str = Field(max_length=255, nullable=False)
    metric_type: str = Field(default="custom", max_length=32)
    baseline_value: Optional[float] = Field(default=None)
    current_value: Optional[float] = Field(default=None)
    target_value: Optional[float] = Field(default=None)
    unit: str = Field(default="units", max_length=32)
    measured_at: datetime = Field(default_factory=utcnow, nullable=False)
    notes: Optional[str] = Field(default=None)

    __table_args__ = (
        UniqueConstraint('opportunity_id', 'metric_name', name='uq_opportunity_metric_name'),
    )
