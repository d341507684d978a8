"""Opportunities with their action plans, metrics and ROI."""
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from solosuccess.api.dependencies import DbSession, Pagination
from solosuccess.api.schemas.opportunities import (
    ActionCreate,
    ActionRead,
    ActionUpdate,
    ImpactLiteral,
    MetricRead,
    MetricUpsert,
    OpportunityAnalytics,
    OpportunityCreate,
    OpportunityDetail,
    OpportunityRead,
    OpportunityStatusLiteral,
    OpportunityTypeLiteral,
    OpportunityUpdate,
    RecommendationsResponse,
    RoiUpdate,
)
from solosuccess.api.schemas.pagination import PaginatedResponse
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.services.opportunities import OpportunityService

router = APIRouter()

OpportunitySortField = Literal["priority_score", "detected_at", "impact", "confidence"]


@router.get("", response_model=PaginatedResponse[OpportunityRead])
async def list_opportunities(
    user: CurrentUser,
    session: DbSession,
    pagination: Pagination,
    status_filter: Optional[list[OpportunityStatusLiteral]] = Query(default=None, alias="status"),
    opportunity_type: Optional[list[OpportunityTypeLiteral]] = Query(default=None, alias="type"),
    impact: Optional[list[ImpactLiteral]] = Query(default=None),
    competitor_id: Optional[UUID] = None,
    min_priority_score: Optional[float] = Query(default=None, ge=0),
    is_archived: bool = False,
    sort_by: OpportunitySortField = "priority_score",
    order: Literal["asc", "desc"] = "desc",
):
    result = await OpportunityService(session).search(
        user.id,
        statuses=status_filter,
        types=opportunity_type,
        impacts=impact,
        competitor_id=competitor_id,
        min_priority_score=min_priority_score,
        is_archived=is_archived,
        sort_by=sort_by,
        order=order,
        page=pagination.page,
        page_size=pagination.page_size,
    )
    return PaginatedResponse.build(result, OpportunityRead)


@router.post("", response_model=OpportunityRead, status_code=status.HTTP_201_CREATED)
async def create_opportunity(data: OpportunityCreate, user: CurrentUser, session: DbSession):
    """Create an opportunity. The priority score and ROI estimate are computed."""
    return await OpportunityService(session).create(user.id, data)


@router.get("/analytics", response_model=OpportunityAnalytics)
async def opportunity_analytics(
    user: CurrentUser,
    session: DbSession,
    timeframe: Literal["week", "month", "quarter", "year"] = "month",
):
    return await OpportunityService(session).analytics(user.id, timeframe)


@router.get("/recommendations/{opportunity_id}", response_model=RecommendationsResponse)
async def opportunity_recommendations(opportunity_id: UUID, user: CurrentUser, session: DbSession):
    return await OpportunityService(session).recommendations(user.id, opportunity_id)


@router.get("/{opportunity_id}", response_model=OpportunityDetail)
async def get_opportunity(opportunity_id: UUID, user: CurrentUser, session: DbSession):
    opportunity, actions, metrics = await OpportunityService(session).detail(user.id, opportunity_id)
    return {"opportunity": opportunity, "actions": actions, "metrics": metrics}


@router.patch("/{opportunity_id}", response_model=OpportunityRead)
async def update_opportunity(
    opportunity_id: UUID, data: OpportunityUpdate, user: CurrentUser, session: DbSession
):
    return await OpportunityService(session).update(user.id, opportunity_id, data)


@router.delete("/{opportunity_id}", response_model=OpportunityRead)
async def archive_opportunity(opportunity_id: UUID, user: CurrentUser, session: DbSession):
    return await OpportunityService(session).archive(user.id, opportunity_id)


@router.post("/{opportunity_id}/roi", response_model=OpportunityRead)
async def record_roi(opportunity_id: UUID, data: RoiUpdate, user: CurrentUser, session: DbSession):
    """Set actual ROI to revenue minus costs."""
    return await OpportunityService(session).record_roi(
        user.id, opportunity_id, revenue=data.revenue, costs=data.costs
    )


# ============================================================================
# Actions
# ============================================================================


@router.post(
    "/{opportunity_id}/actions",
    response_model=ActionRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_action(
    opportunity_id: UUID, data: ActionCreate, user: CurrentUser, session: DbSession
):
    return await OpportunityService(session).add_action(user.id, opportunity_id, data)


@router.patch("/{opportunity_id}/actions/{action_id}", response_model=ActionRead)
async def update_action(
    opportunity_id: UUID,
    action_id: UUID,
    data: ActionUpdate,
    user: CurrentUser,
    session: DbSession,
):
    return await OpportunityService(session).update_action(user.id, opportunity_id, action_id, data)


@router.delete(
    "/{opportunity_id}/actions/{action_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_action(
    opportunity_id: UUID, action_id: UUID, user: CurrentUser, session: DbSession
):
    await OpportunityService(session).delete_action(user.id, opportunity_id, action_id)


# ============================================================================
# Metrics
# ============================================================================


@router.put("/{opportunity_id}/metrics", response_model=MetricRead)
async def upsert_metric(
    opportunity_id: UUID, data: MetricUpsert, user: CurrentUser, session: DbSession
):
    """Create a metric, or update the one with the same name."""
    return await OpportunityService(session).upsert_metric(user.id, opportunity_id, data)
