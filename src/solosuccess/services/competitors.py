"""Competitor profiles and the alerts raised about them."""

from collections import Counter
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import asc, case, desc
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.api.schemas.competitors import AlertCreate, CompetitorCreate, CompetitorUpdate
from solosuccess.domain.exceptions import InvalidParameter, NotFound
from solosuccess.infrastructure.database.base_model import utcnow
from solosuccess.infrastructure.database.models.competitor import Competitor, CompetitorAlert
from solosuccess.infrastructure.database.repositories import (
    AlertRepository,
    CompetitorRepository,
    PaginatedResult,
)
from solosuccess.infrastructure.observability.logging import get_logger
from solosuccess.infrastructure.observability.metrics import ALERTS_CREATED

logger = get_logger(__name__)

SEVERITY_RANK = {"info": 1, "warning": 2, "urgent": 3, "critical": 4}
ALERT_SORT_FIELDS = {"created_at", "severity", "alert_type", "acknowledged_at"}


class CompetitorService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.competitors = CompetitorRepository(session)

    async def get(self, user_id: UUID, competitor_id: UUID) -> Competitor:
        competitor = await self.competitors.get_owned(competitor_id, user_id)
        if competitor is None:
            raise NotFound("Competitor not found", details={"competitor_id": str(competitor_id)})
        return competitor

    async def create(self, user_id: UUID, data: CompetitorCreate) -> Competitor:
        competitor = await self.competitors.create(Competitor(user_id=user_id, **data.model_dump()))
        logger.info("Competitor created", competitor_id=str(competitor.id), threat_level=competitor.threat_level)
        return competitor

    async def search(
        self,
        user_id: UUID,
        threat_level: Optional[str] = None,
        monitoring_status: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResult:
        query = self.competitors.apply_filters(
            self.competitors.for_user(user_id),
            {"threat_level": threat_level, "monitoring_status": monitoring_status},
        )
        query = self.competitors.apply_sorting(query, "created_at", "desc")
        return await self.competitors.paginate(query, page, page_size)

    async def update(self, user_id: UUID, competitor_id: UUID, data: CompetitorUpdate) -> Competitor:
        competitor = await self.get(user_id, competitor_id)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in ("domain", "description", "industry")
        }
        return await self.competitors.apply_update(competitor, **changes)

    async def delete(self, user_id: UUID, competitor_id: UUID) -> None:
        competitor = await self.get(user_id, competitor_id)
        await self.competitors.delete_entity(competitor)
        logger.info("Competitor deleted", competitor_id=str(competitor_id))


class AlertService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.alerts = AlertRepository(session)
        self.competitors = CompetitorRepository(session)

    async def create(self, user_id: UUID, data: AlertCreate, source: str = "api") -> CompetitorAlert:
        """
        Raise an alert about one of the caller's competitors.

        Raises:
            NotFound: If the competitor does not exist or belongs to someone else
        """
        competitor = await self.competitors.get_owned(data.competitor_id, user_id)
        if competitor is None:
            raise NotFound("Competitor not found", details={"competitor_id": str(data.competitor_id)})

        return await self.raise_alert(
            competitor,
            alert_type=data.alert_type,
            severity=data.severity,
            title=data.title,
            description=data.description,
            source_data=data.source_data,
            action_items=data.action_items,
            recommended_actions=[a.model_dump() for a in data.recommended_actions],
            source=source,
        )

    async def raise_alert(
        self,
        competitor: Competitor,
        alert_type: str,
        severity: str,
        title: str,
        description: Optional[str] = None,
        source_data: Optional[dict] = None,
        action_items: Optional[list[str]] = None,
        recommended_actions: Optional[list[dict]] = None,
        source: str = "system",
    ) -> CompetitorAlert:
        """Create an alert for a competitor that is already known to the caller."""
        alert = await self.alerts.create(
            CompetitorAlert(
                user_id=competitor.user_id,
                competitor_id=competitor.id,
                alert_type=alert_type,
                severity=severity,
                title=title,
                description=description,
                source_data=source_data or {},
                action_items=action_items or [],
                recommended_actions=recommended_actions or [],
            )
        )
        ALERTS_CREATED.labels(alert_type=alert_type, source=source).inc()
        logger.info(
            "Alert created",
            alert_id=str(alert.id),
            competitor_id=str(competitor.id),
            alert_type=alert_type,
            severity=severity,
        )
        return alert

    async def search(
        self,
        user_id: UUID,
        competitor_ids: Optional[list[UUID]] = None,
        alert_types: Optional[list[str]] = None,
        severities: Optional[list[str]] = None,
        is_read: Optional[bool] = None,
        is_archived: Optional[bool] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        sort_by: str = "created_at",
        order: str = "desc",
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResult:
        if sort_by not in ALERT_SORT_FIELDS:
            raise InvalidParameter(
                f"Cannot sort alerts by '{sort_by}'",
                details={"allowed": sorted(ALERT_SORT_FIELDS)},
            )

        query = self.alerts.apply_filters(
            self.alerts.for_user(user_id),
            {
                "competitor_id__in": competitor_ids or None,
                "alert_type__in": alert_types or None,
                "severity__in": severities or None,
                "is_read": is_read,
                "is_archived": is_archived,
                "created_at__gte": created_from,
                "created_at__lte": created_to,
            },
        )

        if sort_by == "severity":
            severity_rank = case(SEVERITY_RANK, value=CompetitorAlert.severity, else_=0)
            direction = asc if order == "asc" else desc
            query = query.order_by(
                direction(severity_rank),
                direction(CompetitorAlert.created_at),
                direction(CompetitorAlert.id),
            )
        else:
            query = self.alerts.apply_sorting(query, sort_by, order)

        return await self.alerts.paginate(query, page, page_size)

    async def summary(self, user_id: UUID) -> dict[str, Any]:
        """Counts over all of the caller's alerts, ignoring list filters."""
        rows = await self.alerts.summary_rows(user_id)
        return {
            "total": len(rows),
            "unread": sum(1 for row in rows if not row.is_read),
            "archived": sum(1 for row in rows if row.is_archived),
            "by_severity": dict(Counter(row.severity for row in rows)),
            "by_type": dict(Counter(row.alert_type for row in rows)),
        }

    async def get(self, user_id: UUID, alert_id: UUID) -> CompetitorAlert:
        alert = await self.alerts.get_owned(alert_id, user_id)
        if alert is None:
            raise NotFound("Alert not found", details={"alert_id": str(alert_id)})
        return alert

    async def update(
        self,
        user_id: UUID,
        alert_id: UUID,
        is_read: Optional[bool] = None,
        is_archived: Optional[bool] = None,
    ) -> CompetitorAlert:
        """Mark read/archived. The first read stamps acknowledged_at."""
        alert = await self.get(user_id, alert_id)
        changes: dict[str, Any] = {}

        if is_read is not None:
            changes["is_read"] = is_read
            if is_read and alert.acknowledged_at is None:
                changes["acknowledged_at"] = utcnow()
        if is_archived is not None:
            changes["is_archived"] = is_archived

        if not changes:
            return alert
        return await self.alerts.apply_update(alert, **changes)

    async def archive(self, user_id: UUID, alert_id: UUID) -> CompetitorAlert:
        return await self.update(user_id, alert_id, is_archived=True)

    async def unread_count(self, user_id: UUID) -> int:
        return await self.alerts.count_owned(user_id, is_read=False, is_archived=False)
