"""
Opportunity lifecycle: creation with scoring, status transitions, action
plans, success metrics and ROI tracking.
"""

from collections import Counter
from datetime import timedelta
from typing import Any, Optional, Sequence
from uuid import UUID

from sqlalchemy import asc, case, desc
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.api.schemas.opportunities import (
    ActionCreate,
    ActionUpdate,
    MetricUpsert,
    OpportunityCreate,
    OpportunityUpdate,
)
from solosuccess.domain.exceptions import InvalidParameter, NotFound
from solosuccess.infrastructure.database.base_model import as_utc, utcnow
from solosuccess.infrastructure.database.models.opportunity import (
    Opportunity,
    OpportunityAction,
    OpportunityMetric,
    OpportunityStatus,
)
from solosuccess.infrastructure.database.repositories import (
    CompetitorRepository,
    OpportunityActionRepository,
    OpportunityMetricRepository,
    OpportunityRepository,
    PaginatedResult,
)
from solosuccess.infrastructure.observability.logging import get_logger
from solosuccess.services import opportunity_scoring as scoring

logger = get_logger(__name__)

TIMEFRAME_DAYS = {"week": 7, "month": 30, "quarter": 90, "year": 365}
SORTABLE_FIELDS = {"priority_score", "detected_at", "impact", "confidence", "created_at"}


class OpportunityService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.opportunities = OpportunityRepository(session)
        self.actions = OpportunityActionRepository(session)
        self.metrics = OpportunityMetricRepository(session)

    async def get(self, user_id: UUID, opportunity_id: UUID) -> Opportunity:
        opportunity = await self.opportunities.get_owned(opportunity_id, user_id)
        if opportunity is None:
            raise NotFound("Opportunity not found", details={"opportunity_id": str(opportunity_id)})
        return opportunity

    async def create(self, user_id: UUID, data: OpportunityCreate) -> Opportunity:
        """
        Create an opportunity with its priority score, tags, ROI estimate
        and the two standard tracking metrics.
        """
        if data.competitor_id is not None:
            competitor = await CompetitorRepository(self.session).get_owned(data.competitor_id, user_id)
            if competitor is None:
                raise NotFound("Competitor not found", details={"competitor_id": str(data.competitor_id)})

        evidence = [item.model_dump() for item in data.evidence]
        tags = scoring.generate_tags(data.opportunity_type, data.impact, data.timing, evidence)
        tags.extend(tag for tag in data.tags if tag not in tags)

        opportunity = await self.opportunities.create(
            Opportunity(
                user_id=user_id,
                competitor_id=data.competitor_id,
                title=data.title,
                description=data.description,
                opportunity_type=data.opportunity_type,
                impact=data.impact,
                effort=data.effort,
                timing=data.timing,
                confidence=data.confidence,
                evidence=evidence,
                priority_score=scoring.simple_priority_score(
                    data.impact, data.effort, data.timing, data.confidence
                ),
                estimated_roi=float(scoring.estimate_roi(data.impact, data.effort, data.confidence)),
                tags=tags,
                success_metrics=scoring.generate_success_metrics(data.opportunity_type),
            )
        )

        await self.metrics.create_many([
            {**metric, "opportunity_id": opportunity.id, "user_id": user_id}
            for metric in scoring.initial_metrics(data.impact, data.effort, data.confidence)
        ])

        logger.info(
            "Opportunity created",
            opportunity_id=str(opportunity.id),
            opportunity_type=opportunity.opportunity_type,
            priority_score=opportunity.priority_score,
        )
        return opportunity

    async def search(
        self,
        user_id: UUID,
        statuses: Optional[list[str]] = None,
        types: Optional[list[str]] = None,
        impacts: Optional[list[str]] = None,
        competitor_id: Optional[UUID] = None,
        min_priority_score: Optional[float] = None,
        is_archived: bool = False,
        sort_by: str = "priority_score",
        order: str = "desc",
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResult:
        if sort_by not in SORTABLE_FIELDS:
            raise InvalidParameter(
                f"Cannot sort by '{sort_by}'",
                details={"allowed": sorted(SORTABLE_FIELDS)},
            )

        query = self.opportunities.apply_filters(
            self.opportunities.for_user(user_id),
            {
                "status__in": statuses or None,
                "opportunity_type__in": types or None,
                "impact__in": impacts or None,
                "competitor_id": competitor_id,
                "priority_score__gte": min_priority_score,
                "is_archived": is_archived,
            },
        )

        if sort_by == "impact":
            # Impact is stored as a word, so order by its rank
            impact_rank = case(scoring.PRIORITY_RANK, value=Opportunity.impact, else_=0)
            direction = asc if order == "asc" else desc
            query = query.order_by(direction(impact_rank), direction(Opportunity.id))
        else:
            query = self.opportunities.apply_sorting(query, sort_by, order)

        return await self.opportunities.paginate(query, page, page_size)

    async def update(self, user_id: UUID, opportunity_id: UUID, data: OpportunityUpdate) -> Opportunity:
        """
        Apply field changes and status side effects.

        Moving to in_progress stamps started_at unless a progress value was
        sent, completing stamps completed_at and forces progress to 100, and
        notes are appended to the implementation notes.
        """
        opportunity = await self.get(user_id, opportunity_id)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True, exclude={"notes"}).items()
            if value is not None or key == "description"
        }
        now = utcnow()

        if data.status == OpportunityStatus.IN_PROGRESS and data.progress is None:
            if opportunity.started_at is None:
                changes["started_at"] = now
        elif data.status == OpportunityStatus.COMPLETED:
            changes["completed_at"] = now
            changes["progress"] = 100

        if data.notes:
            stamp = now.strftime("%Y-%m-%d %H:%M")
            entry = f"[{stamp}] {data.notes}"
            existing = opportunity.implementation_notes
            changes["implementation_notes"] = f"{existing}\n{entry}" if existing else entry

        if {"impact", "effort", "timing", "confidence"} & changes.keys():
            impact = changes.get("impact", opportunity.impact)
            effort = changes.get("effort", opportunity.effort)
            timing = changes.get("timing", opportunity.timing)
            confidence = changes.get("confidence", opportunity.confidence)
            changes["priority_score"] = scoring.simple_priority_score(impact, effort, timing, confidence)
            changes["estimated_roi"] = float(scoring.estimate_roi(impact, effort, confidence))

        opportunity = await self.opportunities.apply_update(opportunity, **changes)
        logger.info("Opportunity updated", opportunity_id=str(opportunity.id), status=opportunity.status)
        return opportunity

    async def archive(self, user_id: UUID, opportunity_id: UUID) -> Opportunity:
        opportunity = await self.get(user_id, opportunity_id)
        return await self.opportunities.apply_update(opportunity, is_archived=True)

    async def detail(
        self, user_id: UUID, opportunity_id: UUID
    ) -> tuple[Opportunity, Sequence[OpportunityAction], Sequence[OpportunityMetric]]:
        opportunity = await self.get(user_id, opportunity_id)
        actions = await self.actions.for_opportunity(opportunity.id)
        metrics = await self.metrics.for_opportunity(opportunity.id)
        return opportunity, actions, metrics

    async def recommendations(self, user_id: UUID, opportunity_id: UUID) -> dict[str, Any]:
        opportunity = await self.get(user_id, opportunity_id)
        return {
            "opportunity_id": opportunity.id,
            "scoring": scoring.detailed_scores(opportunity),
            "recommendations": scoring.generate_recommendations(
                opportunity.opportunity_type, opportunity.confidence
            ),
        }

    async def analytics(self, user_id: UUID, timeframe: str = "month") -> dict[str, Any]:
        days = TIMEFRAME_DAYS.get(timeframe)
        if days is None:
            raise InvalidParameter(
                f"Unknown timeframe '{timeframe}'",
                details={"allowed": list(TIMEFRAME_DAYS)},
            )

        items = await self.opportunities.detected_since(user_id, utcnow() - timedelta(days=days))
        total = len(items)

        top_performers = sorted(
            (o for o in items if o.actual_roi is not None),
            key=lambda o: o.actual_roi,
            reverse=True,
        )[:5]

        return {
            "timeframe": timeframe,
            "total": total,
            "by_status": dict(Counter(o.status for o in items)),
            "by_type": dict(Counter(o.opportunity_type for o in items)),
            "average_priority_score": (
                round(sum(o.priority_score for o in items) / total, 2) if total else 0.0
            ),
            "total_estimated_roi": sum(o.estimated_roi or 0.0 for o in items),
            "total_actual_roi": sum(o.actual_roi or 0.0 for o in items),
            "top_performers": top_performers,
        }

    # Actions

    async def add_action(self, user_id: UUID, opportunity_id: UUID, data: ActionCreate) -> OpportunityAction:
        opportunity = await self.get(user_id, opportunity_id)
        values = data.model_dump()
        values["due_date"] = as_utc(values["due_date"])
        return await self.actions.create(
            OpportunityAction(opportunity_id=opportunity.id, user_id=user_id, **values)
        )

    async def _get_action(self, user_id: UUID, opportunity_id: UUID, action_id: UUID) -> OpportunityAction:
        action = await self.actions.get_owned(action_id, user_id)
        if action is None or action.opportunity_id != opportunity_id:
            raise NotFound("Action not found", details={"action_id": str(action_id)})
        return action

    async def update_action(
        self, user_id: UUID, opportunity_id: UUID, action_id: UUID, data: ActionUpdate
    ) -> OpportunityAction:
        action = await self._get_action(user_id, opportunity_id, action_id)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key not in ("title", "priority", "status")
        }
        if "due_date" in changes:
            changes["due_date"] = as_utc(changes["due_date"])

        if "status" in changes:
            if changes["status"] == "completed":
                changes["completed_at"] = action.completed_at or utcnow()
            else:
                changes["completed_at"] = None

        return await self.actions.apply_update(action, **changes)

    async def delete_action(self, user_id: UUID, opportunity_id: UUID, action_id: UUID) -> None:
        action = await self._get_action(user_id, opportunity_id, action_id)
        await self.actions.delete_entity(action)

    # Metrics

    async def upsert_metric(self, user_id: UUID, opportunity_id: UUID, data: MetricUpsert) -> OpportunityMetric:
        """Create the metric or update the existing one with the same name."""
        opportunity = await self.get(user_id, opportunity_id)
        values = data.model_dump(exclude_unset=True, exclude={"metric_name"})
        values = {k: v for k, v in values.items() if v is not None}

        metric = await self.metrics.get_by_name(opportunity.id, data.metric_name)
        if metric is not None:
            return await self.metrics.apply_update(metric, measured_at=utcnow(), **values)

        values.setdefault("metric_type", "custom")
        values.setdefault("unit", "units")
        return await self.metrics.create(
            OpportunityMetric(
                opportunity_id=opportunity.id,
                user_id=user_id,
                metric_name=data.metric_name,
                **values,
            )
        )

    async def record_roi(self, user_id: UUID, opportunity_id: UUID, revenue: float, costs: float) -> Opportunity:
        """Set actual ROI to revenue minus costs and record both as metrics."""
        opportunity = await self.get(user_id, opportunity_id)

        await self.upsert_metric(
            user_id,
            opportunity.id,
            MetricUpsert(metric_name="Revenue", metric_type="revenue", current_value=revenue, unit="USD"),
        )
        await self.upsert_metric(
            user_id,
            opportunity.id,
            MetricUpsert(metric_name="Costs", metric_type="cost_savings", current_value=costs, unit="USD"),
        )

        opportunity = await self.opportunities.apply_update(opportunity, actual_roi=revenue - costs)
        logger.info("Opportunity ROI recorded", opportunity_id=str(opportunity.id), actual_roi=opportunity.actual_roi)
        return opportunity
