"""
Competitive intelligence models.

Competitor profiles, the alerts raised about them, the social-media posts
observed for them and the analyses computed from those posts.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from sqlalchemy import Column, JSON, Index, UniqueConstraint
from sqlmodel import Field

from solosuccess.infrastructure.database.base_model import BaseModel, utcnow


class ThreatLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class MonitoringStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    ARCHIVED = "archived"


class Competitor(BaseModel, table=True):
    __tablename__ = "competitors"

    user_id: UUID = Field(foreign_key="users.id", index=True, nullable=False)
    name: str = Field(max_length=255, nullable=False)
    domain: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None)
    industry: Optional[str] = Field(default=None, max_length=100)
    threat_level: str = Field(default=ThreatLevel.MEDIUM.value, max_length=16)
    monitoring_status: str = Field(default=MonitoringStatus.ACTIVE.value, max_length=16, index=True)
    social_media_handles: dict = Field(default_factory=dict, sa_column=Column(JSON))
    key_products: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    last_analyzed: Optional[datetime] = Field(default=None)


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    URGENT = "urgent"
    CRITICAL = "critical"


class CompetitorAlert(BaseModel, table=True):
    __tablename__ = "competitor_alerts"

    user_id: UUID = Field(foreign_key="users.id", index=True, nullable=False)
    competitor_id: UUID = Field(foreign_key="competitors.id", ondelete="CASCADE", index=True, nullable=False)
    alert_type: str = Field(max_length=100, nullable=False, index=True)
    severity: str = Field(default=AlertSeverity.INFO.value, max_length=16)
    title: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None)
    source_data: dict = Field(default_factory=dict, sa_column=Column(JSON))
    action_items: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    recommended_actions: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    is_read: bool = Field(default=False, nullable=False)
    is_archived: bool = Field(default=False, nullable=False)
    acknowledged_at: Optional[datetime] = Field(default=None)

    __table_args__ = (
        Index('ix_competitor_alerts_user_created', 'user_id', 'created_at'),
    )


class SocialMediaPost(BaseModel, table=True):
    """A single observed post; `followers` is the account size at post time."""

    __tablename__ = "social_media_posts"

    competitor_id: UUID = Field(foreign_key="competitors.id", ondelete="CASCADE", index=True, nullable=False)
    platform: str = Field(max_length=32, nullable=False)
    external_id: str = Field(max_length=255, nullable=False)
    content: Optional[str] = Field(default=None)
    url: Optional[str] = Field(default=None, max_length=1024)
    posted_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
    likes: int = Field(default=0, nullable=False)
    comments: int = Field(default=0, nullable=False)
    shares: int = Field(default=0, nullable=False)
    followers: Optional[int] = Field(default=None)

    __table_args__ = (
        UniqueConstraint('competitor_id', 'platform', 'external_id', name='uq_social_posts_external'),
    )

    @property
    def engagement(self) -> int:
        return self.likes + self.comments + self.shares


class SocialMediaAnalysis(BaseModel, table=True):
    __tablename__ = "social_media_analyses"

    competitor_id: UUID = Field(foreign_key="competitors.id", ondelete="CASCADE", index=True, nullable=False)
    platform: str = Field(max_length=32, nullable=False)
    analysis_type: str = Field(max_length=32, nullable=False)
    results: dict = Field(default_factory=dict, sa_column=Column(JSON))
    insights: dict = Field(default_factory=dict, sa_column=Column(JSON))
    analyzed_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
