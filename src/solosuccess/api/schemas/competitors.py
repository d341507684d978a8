"""Competitor, alert, social-media and scraping schemas."""

from datetime import datetime
from typing import Any, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from solosuccess.api.schemas.pagination import PaginationMeta
from solosuccess.infrastructure.database.base_model import as_utc

ThreatLevelLiteral = Literal["low", "medium", "high", "critical"]
MonitoringStatusLiteral = Literal["active", "paused", "archived"]
SeverityLiteral = Literal["info", "warning", "urgent", "critical"]
PlatformLiteral = Literal["linkedin", "twitter", "facebook", "instagram", "youtube"]
JobTypeLiteral = Literal["website", "pricing", "products", "jobs", "social"]


# ============================================================================
# Competitors
# ============================================================================


class CompetitorCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    domain: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    industry: Optional[str] = Field(default=None, max_length=100)
    threat_level: ThreatLevelLiteral = "medium"
    monitoring_status: MonitoringStatusLiteral = "active"
    social_media_handles: dict[PlatformLiteral, str] = Field(default_factory=dict)
    key_products: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class CompetitorUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    domain: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    industry: Optional[str] = Field(default=None, max_length=100)
    threat_level: Optional[ThreatLevelLiteral] = None
    monitoring_status: Optional[MonitoringStatusLiteral] = None
    social_media_handles: Optional[dict[PlatformLiteral, str]] = None
    key_products: Optional[list[str]] = None
    tags: Optional[list[str]] = None


class CompetitorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    domain: Optional[str] = None
    description: Optional[str] = None
    industry: Optional[str] = None
    threat_level: str
    monitoring_status: str
    social_media_handles: dict[str, str]
    key_products: list[str]
    tags: list[str]
    last_analyzed: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Alerts
# ============================================================================


class RecommendedAction(BaseModel):
    action: str
    priority: str = "medium"
    estimated_effort: str = "1-2 hours"


class AlertCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    competitor_id: UUID
    alert_type: str = Field(..., min_length=1, max_length=100)
    severity: SeverityLiteral = "info"
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    source_data: dict[str, Any] = Field(default_factory=dict)
    action_items: list[str] = Field(default_factory=list)
    recommended_actions: list[RecommendedAction] = Field(default_factory=list)


class AlertUpdate(BaseModel):
    is_read: Optional[bool] = None
    is_archived: Optional[bool] = None


class AlertRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    competitor_id: UUID
    alert_type: str
    severity: str
    title: str
    description: Optional[str] = None
    source_data: dict[str, Any]
    action_items: list[str]
    recommended_actions: list[dict[str, Any]]
    is_read: bool
    is_archived: bool
    acknowledged_at: Optional[datetime] = None
    created_at: datetime


class AlertSummary(BaseModel):
    total: int
    unread: int
    archived: int
    by_severity: dict[str, int]
    by_type: dict[str, int]


class AlertListResponse(BaseModel):
    items: list[AlertRead]
    pagination: PaginationMeta
    summary: AlertSummary


# ============================================================================
# Social media
# ============================================================================


class SocialPostIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    platform: PlatformLiteral
    external_id: str = Field(..., min_length=1, max_length=255)
    content: Optional[str] = None
    url: Optional[str] = Field(default=None, max_length=1024)
    posted_at: datetime
    likes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)
    followers: Optional[int] = Field(default=None, ge=0)

    @field_validator("posted_at")
    @classmethod
    def normalise_timezone(cls, v: datetime) -> datetime:
        return as_utc(v)


class SocialPostsIngest(BaseModel):
    posts: list[SocialPostIn] = Field(..., min_length=1, max_length=500)


class SocialIngestResult(BaseModel):
    created: int
    updated: int


class SocialAnalysisRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    platform: str
    analysis_type: str
    results: dict[str, Any]
    insights: dict[str, Any]
    analyzed_at: datetime


class SocialAnalysisResponse(BaseModel):
    competitor_id: UUID
    last_analyzed: Optional[datetime] = None
    analyses: list[SocialAnalysisRead]


class ProcessorAction(BaseModel):
    action: Literal["start", "stop", "process_now", "analyze_competitor"]
    competitor_id: Optional[UUID] = None
    interval_minutes: Optional[int] = Field(default=None, ge=5, le=1440)


class ProcessorStatus(BaseModel):
    is_running: bool
    is_processing: bool
    interval_minutes: int
    last_processed: Optional[datetime] = None


class MonitoringStats(BaseModel):
    active_competitors: int
    analyses_last_24h: int
    alerts_last_24h: int


class ProcessorStatusResponse(BaseModel):
    status: ProcessorStatus
    stats: MonitoringStats


class ProcessorActionResponse(BaseModel):
    success: bool
    message: str
    status: ProcessorStatus
    result: Optional[dict[str, Any]] = None


# ============================================================================
# Scraping
# ============================================================================


class ScrapingFrequency(BaseModel):
    """`value` is minutes for interval and a cron expression for cron."""

    type: Literal["interval", "cron", "manual"]
    value: Optional[Union[int, str]] = None

    @model_validator(mode="after")
    def check_value(self) -> "ScrapingFrequency":
        if self.type == "interval":
            if not isinstance(self.value, int) or self.value < 1:
                raise ValueError("interval frequency needs a positive number of minutes")
        elif self.type == "cron":
            if not isinstance(self.value, str) or not self.value.strip():
                raise ValueError("cron frequency needs a cron expression")
        return self


class ScrapingConfig(BaseModel):
    enable_change_detection: bool = True
    change_threshold: float = Field(default=0.1, ge=0.0, le=1.0)
    notify_on_change: bool = True
    store_history: bool = True
    custom_selectors: dict[str, str] = Field(default_factory=dict)
    exclude_patterns: list[str] = Field(default_factory=list)


class ScrapingJobCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    job_type: JobTypeLiteral
    url: Optional[str] = Field(default=None, max_length=2048)
    frequency: Optional[ScrapingFrequency] = None
    config: Optional[ScrapingConfig] = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        return v


class ScrapingJobUpdate(BaseModel):
    action: Optional[Literal["pause", "resume", "cancel", "execute"]] = None
    frequency: Optional[ScrapingFrequency] = None
    config: Optional[ScrapingConfig] = None


class ScrapingJobRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    competitor_id: UUID
    job_type: str
    url: str
    priority: str
    frequency: dict[str, Any]
    config: dict[str, Any]
    status: str
    retry_count: int
    max_retries: int
    next_run_at: datetime
    last_run_at: Optional[datetime] = None
    last_error: Optional[str] = None
    created_at: datetime


class ScrapingResultRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    success: bool
    status_code: Optional[int] = None
    content_hash: Optional[str] = None
    has_changes: bool
    change_score: float
    error: Optional[str] = None
    duration_ms: Optional[float] = None
    executed_at: datetime


class ScrapingJobDetail(BaseModel):
    job: ScrapingJobRead
    results: list[ScrapingResultRead]
