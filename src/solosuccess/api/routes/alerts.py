"""Competitor alerts."""
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Query, Request, Response, status

from solosuccess.api.dependencies import DbSession, Pagination
from solosuccess.api.middleware.rate_limit import limiter
from solosuccess.api.schemas.competitors import (
    AlertCreate,
    AlertListResponse,
    AlertRead,
    AlertUpdate,
    SeverityLiteral,
)
from solosuccess.api.schemas.pagination import PaginationMeta
from solosuccess.auth.dependencies import CurrentUser
from solosuccess.config.settings import get_settings
from solosuccess.infrastructure.database.base_model import as_utc
from solosuccess.services.competitors import AlertService

router = APIRouter()

AlertSortField = Literal["created_at", "severity", "alert_type", "acknowledged_at"]


@router.get("", response_model=AlertListResponse)
async def list_alerts(
    user: CurrentUser,
    session: DbSession,
    pagination: Pagination,
    competitor_id: Optional[list[UUID]] = Query(default=None),
    alert_type: Optional[list[str]] = Query(default=None),
    severity: Optional[list[SeverityLiteral]] = Query(default=None),
    is_read: Optional[bool] = None,
    is_archived: Optional[bool] = None,
    created_from: Optional[datetime] = None,
    created_to: Optional[datetime] = None,
    sort_by: AlertSortField = "created_at",
    order: Literal["asc", "desc"] = "desc",
):
    """
    List alerts with filters. The summary always covers all of the
    caller's alerts.
    """
    service = AlertService(session)
    result = await service.search(
        user.id,
        competitor_ids=competitor_id,
        alert_types=alert_type,
        severities=severity,
        is_read=is_read,
        is_archived=is_archived,
        created_from=as_utc(created_from),
        created_to=as_utc(created_to),
        sort_by=sort_by,
        order=order,
        page=pagination.page,
        page_size=pagination.page_size,
    )
    return AlertListResponse(
        items=[AlertRead.model_validate(alert) for alert in result.items],
        pagination=PaginationMeta.from_result(result),
        summary=await service.summary(user.id),
    )


@router.post("", response_model=AlertRead, status_code=status.HTTP_201_CREATED)
@limiter.limit(lambda: get_settings().rate_limit_alert_create)
async def create_alert(
    request: Request,
    response: Response,
    data: AlertCreate,
    user: CurrentUser,
    session: DbSession,
):
    return await AlertService(session).create(user.id, data)


@router.get("/{alert_id}", response_model=AlertRead)
async def get_alert(alert_id: UUID, user: CurrentUser, session: DbSession):
    return await AlertService(session).get(user.id, alert_id)


@router.patch("/{alert_id}", response_model=AlertRead)
async def update_alert(alert_id: UUID, data: AlertUpdate, user: CurrentUser, session: DbSession):
    return await AlertService(session).update(
        user.id, alert_id, is_read=data.is_read, is_archived=data.is_archived
    )


@router.delete("/{alert_id}", response_model=AlertRead)
async def archive_alert(alert_id: UUID, user: CurrentUser, session: DbSession):
    """Alerts are archived, not deleted."""
    return await AlertService(session).archive(user.id, alert_id)
