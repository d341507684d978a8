"""Scheduled website scraping jobs and their run history."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy import Column, JSON, Index
from sqlmodel import Field

from solosuccess.infrastructure.database.base_model import BaseModel, utcnow


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    PAUSED = "paused"
    CANCELLED = "cancelled"


def default_scraping_config() -> dict:
    return {
        "enable_change_detection": True,
        "change_threshold": 0.1,
        "notify_on_change": True,
        "store_history": True,
        "custom_selectors": {},
        "exclude_patterns": [],
    }


class ScrapingJob(BaseModel, table=True):
    """
    A recurring fetch of one competitor URL.

    `frequency` is ``{"type": "interval" | "cron" | "manual", "value": ...}``
    where value is minutes for interval and a cron expression for cron.
    """

    __tablename__ = "scraping_jobs"

    user_id: UUID = Field(foreign_key="users.id", index=True, nullable=False)
    competitor_id: UUID = Field(foreign_key="competitors.id", ondelete="CASCADE", index=True, nullable=False)
    job_type: str = Field(max_length=16, nullable=False)
    url: str = Field(max_length=2048, nullable=False)
    priority: str = Field(default="medium", max_length=16)
    frequency: dict = Field(default_factory=dict, sa_column=Column(JSON))
    config: dict = Field(default_factory=default_scraping_config, sa_column=Column(JSON))
    status: str = Field(default=JobStatus.PENDING.value, max_length=16, index=True)
    retry_count: int = Field(default=0, nullable=False)
    max_retries: int = Field(default=3, nullable=False)
    next_run_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
    last_run_at: Optional[datetime] = Field(default=None)
    last_error: Optional[str] = Field(default=None)

    __table_args__ = (
        Index('ix_scraping_jobs_status_next_run', 'status', 'next_run_at'),
    )


class ScrapingResult(BaseModel, table=True):
    __tablename__ = "scraping_results"

    job_id: UUID = Field(foreign_key="scraping_jobs.id", ondelete="CASCADE", index=True, nullable=False)
    success: bool = Field(default=True, nullable=False)
    status_code: Optional[int] = Field(default=None)
    content_hash: Optional[str] = Field(default=None, max_length=64)
    content_text: Optional[str] = Field(default=None)
    has_changes: bool = Field(default=False, nullable=False)
    change_score: float = Field(default=0.0, nullable=False)
    error: Optional[str] = Field(default=None)
    duration_ms: Optional[float] = Field(default=None)
    executed_at: datetime = Field(default_factory=utcnow, nullable=False)
