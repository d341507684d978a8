"""Opportunity, action and metric schemas."""

from datetime import datetime
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

ImpactLiteral = Literal["low", "medium", "high", "critical"]
EffortLiteral = Literal["low", "medium", "high"]
TimingLiteral = Literal["immediate", "short-term", "medium-term", "long-term"]
OpportunityTypeLiteral = Literal[
    "competitor_weakness",
    "market_gap",
    "pricing_opportunity",
    "talent_acquisition",
    "partnership_opportunity",
    "product_gap",
    "other",
]
OpportunityStatusLiteral = Literal[
    "identified", "planned", "in_progress", "completed", "paused", "cancelled"
]
ActionStatusLiteral = Literal["pending", "in_progress", "completed", "cancelled"]
MetricTypeLiteral = Literal[
    "revenue",
    "cost_savings",
    "market_share",
    "customer_acquisition",
    "efficiency",
    "brand",
    "custom",
]


class Evidence(BaseModel):
    type: str = Field(..., max_length=64, examples=["social_media", "pricing_data"])
    description: str = Field(..., max_length=2000)
    source: Optional[str] = Field(default=None, max_length=1024)


class OpportunityCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    competitor_id: Optional[UUID] = None
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    opportunity_type: OpportunityTypeLiteral
    impact: ImpactLiteral = "medium"
    effort: EffortLiteral = "medium"
    timing: TimingLiteral = "short-term"
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    evidence: list[Evidence] = Field(default_factory=list, max_length=50)
    tags: list[str] = Field(default_factory=list)


class OpportunityUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    impact: Optional[ImpactLiteral] = None
    effort: Optional[EffortLiteral] = None
    timing: Optional[TimingLiteral] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    status: Optional[OpportunityStatusLiteral] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = Field(default=None, max_length=5000)
    tags: Optional[list[str]] = None
    is_archived: Optional[bool] = None


class OpportunityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    competitor_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    opportunity_type: str
    impact: str
    effort: str
    timing: str
    confidence: float
    evidence: list[dict[str, Any]]
    priority_score: float
    status: str
    progress: int
    implementation_notes: Optional[str] = None
    estimated_roi: Optional[float] = None
    actual_roi: Optional[float] = None
    tags: list[str]
    success_metrics: dict[str, Any]
    is_archived: bool
    detected_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ActionCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    action_type: str = Field(default="general", max_length=64)
    priority: Literal["low", "medium", "high"] = "medium"
    estimated_effort_hours: Optional[float] = Field(default=None, ge=0)
    estimated_cost: Optional[float] = Field(default=None, ge=0)
    expected_outcome: Optional[str] = None
    due_date: Optional[datetime] = None


class ActionUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Optional[Literal["low", "medium", "high"]] = None
    status: Optional[ActionStatusLiteral] = None
    actual_effort_hours: Optional[float] = Field(default=None, ge=0)
    actual_cost: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None
    due_date: Optional[datetime] = None


class ActionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    opportunity_id: UUID
    title: str
    description: Optional[str] = None
    action_type: str
    priority: str
    status: str
    estimated_effort_hours: Optional[float] = None
    actual_effort_hours: Optional[float] = None
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    expected_outcome: Optional[str] = None
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime


class MetricUpsert(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    metric_name: str = Field(..., min_length=1, max_length=255)
    metric_type: Optional[MetricTypeLiteral] = None
    baseline_value: Optional[float] = None
    current_value: Optional[float] = None
    target_value: Optional[float] = None
    unit: Optional[str] = Field(default=None, max_length=32)
    notes: Optional[str] = None


class MetricRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    opportunity_id: UUID
    metric_name: str
    metric_type: str
    baseline_value: Optional[float] = None
    current_value: Optional[float] = None
    target_value: Optional[float] = None
    unit: str
    measured_at: datetime
    notes: Optional[str] = None


class RoiUpdate(BaseModel):
    revenue: float = Field(..., ge=0)
    costs: float = Field(..., ge=0)


class OpportunityDetail(BaseModel):
    opportunity: OpportunityRead
    actions: list[ActionRead]
    metrics: list[MetricRead]


class ScoringBreakdown(BaseModel):
    impact_score: float
    effort_score: float
    timing_score: float
    confidence_score: float
    risk_score: float
    resource_score: float
    strategic_alignment_score: float
    competitive_advantage_score: float
    market_timing_score: float
    overall_score: float


class Recommendation(BaseModel):
    title: str
    description: str
    category: str
    priority: str
    estimated_effort_hours: float
    estimated_cost: float
    expected_roi: float
    timeline: str
    confidence: float
    prerequisites: list[str]
    risks: list[str]
    success_metrics: list[str]
    resources: list[str]


class RecommendationsResponse(BaseModel):
    opportunity_id: UUID
    scoring: ScoringBreakdown
    recommendations: list[Recommendation]


class OpportunityAnalytics(BaseModel):
    timeframe: str
    total: int
    by_status: dict[str, int]
    by_type: dict[str, int]
    average_priority_score: float
    total_estimated_roi: float
    total_actual_roi: float
    top_performers: list[OpportunityRead]
