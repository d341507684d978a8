from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.infrastructure.database.models.opportunity import (
    Opportunity,
    OpportunityAction,
    OpportunityMetric,
)
from solosuccess.infrastructure.database.repositories.base import OwnedRepository


class OpportunityRepository(OwnedRepository[Opportunity]):
    def __init__(self, session: AsyncSession):
        super().__init__(Opportunity, session)

    async def detected_since(self, user_id: UUID, since: datetime) -> Sequence[Opportunity]:
        query = self.for_user(user_id).where(Opportunity.detected_at >= since)
        result = await self.session.execute(query)
        return result.scalars().all()


class OpportunityActionRepository(OwnedRepository[OpportunityAction]):
    def __init__(self, session: AsyncSession):
        super().__init__(OpportunityAction, session)

    async def for_opportunity(self, opportunity_id: UUID) -> Sequence[OpportunityAction]:
        result = await self.session.execute(
            select(OpportunityAction)
            .where(OpportunityAction.opportunity_id == opportunity_id)
            .order_by(OpportunityAction.created_at)
        )
        return result.scalars().all()


class OpportunityMetricRepository(OwnedRepository[OpportunityMetric]):
    def __init__(self, session: AsyncSession):
        super().__init__(OpportunityMetric, session)

    async def for_opportunity(self, opportunity_id: UUID) -> Sequence[OpportunityMetric]:
        result = await self.session.execute(
            select(OpportunityMetric)
            .where(OpportunityMetric.opportunity_id == opportunity_id)
            .order_by(OpportunityMetric.created_at)
        )
        return result.scalars().all()

    async def get_by_name(self, opportunity_id: UUID, metric_name: str) -> OpportunityMetric | None:
        result = await self.session.execute(
            select(OpportunityMetric).where(
                OpportunityMetric.opportunity_id == opportunity_id,
                OpportunityMetric.metric_name == metric_name,
            )
        )
        return result.scalars().first()
