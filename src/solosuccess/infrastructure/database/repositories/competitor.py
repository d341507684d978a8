from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select, func, or_, delete as sql_delete, desc
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.infrastructure.database.models.competitor import (
    Competitor,
    CompetitorAlert,
    MonitoringStatus,
    SocialMediaAnalysis,
    SocialMediaPost,
)
from solosuccess.infrastructure.database.repositories.base import BaseRepository, OwnedRepository


class CompetitorRepository(OwnedRepository[Competitor]):
    def __init__(self, session: AsyncSession):
        super().__init__(Competitor, session)

    async def due_for_analysis(self, analyzed_before: datetime) -> Sequence[Competitor]:
        """Actively monitored competitors never analysed or analysed before the cutoff."""
        query = select(Competitor).where(
            Competitor.monitoring_status == MonitoringStatus.ACTIVE.value,
            or_(Competitor.last_analyzed.is_(None), Competitor.last_analyzed < analyzed_before),
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_active(self) -> int:
        return await self.count(monitoring_status=MonitoringStatus.ACTIVE.value)


class AlertRepository(OwnedRepository[CompetitorAlert]):
    def __init__(self, session: AsyncSession):
        super().__init__(CompetitorAlert, session)

    async def summary_rows(self, user_id: UUID) -> Sequence[tuple]:
        result = await self.session.execute(
            select(
                CompetitorAlert.severity,
                CompetitorAlert.alert_type,
                CompetitorAlert.is_read,
                CompetitorAlert.is_archived,
            ).where(CompetitorAlert.user_id == user_id)
        )
        return result.all()

    async def count_since(self, since: datetime) -> int:
        return await self.count(created_at__gte=since)


class SocialMediaPostRepository(BaseRepository[SocialMediaPost]):
    def __init__(self, session: AsyncSession):
        super().__init__(SocialMediaPost, session)

    async def get_by_external_id(
        self, competitor_id: UUID, platform: str, external_id: str
    ) -> SocialMediaPost | None:
        result = await self.session.execute(
            select(SocialMediaPost).where(
                SocialMediaPost.competitor_id == competitor_id,
                SocialMediaPost.platform == platform,
                SocialMediaPost.external_id == external_id,
            )
        )
        return result.scalars().first()

    async def recent_for_competitor(
        self, competitor_id: UUID, since: datetime
    ) -> Sequence[SocialMediaPost]:
        result = await self.session.execute(
            select(SocialMediaPost)
            .where(
                SocialMediaPost.competitor_id == competitor_id,
                SocialMediaPost.posted_at >= since,
            )
            .order_by(SocialMediaPost.posted_at)
        )
        return result.scalars().all()


class SocialMediaAnalysisRepository(BaseRepository[SocialMediaAnalysis]):
    def __init__(self, session: AsyncSession):
        super().__init__(SocialMediaAnalysis, session)

    async def latest_for_competitor(
        self, competitor_id: UUID, platform: Optional[str] = None
    ) -> Sequence[SocialMediaAnalysis]:
        """Most recent analysis of each (platform, analysis_type) pair."""
        query = select(SocialMediaAnalysis).where(
            SocialMediaAnalysis.competitor_id == competitor_id
        )
        if platform:
            query = query.where(SocialMediaAnalysis.platform == platform)
        result = await self.session.execute(
            query.order_by(desc(SocialMediaAnalysis.analyzed_at))
        )

        latest: dict[tuple[str, str], SocialMediaAnalysis] = {}
        for analysis in result.scalars().all():
            latest.setdefault((analysis.platform, analysis.analysis_type), analysis)
        return list(latest.values())

    async def delete_older_than(self, cutoff: datetime) -> int:
        result = await self.session.execute(
            sql_delete(SocialMediaAnalysis).where(SocialMediaAnalysis.analyzed_at < cutoff)
        )
        await self.session.flush()
        return result.rowcount or 0

    async def count_since(self, since: datetime) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(SocialMediaAnalysis)
            .where(SocialMediaAnalysis.analyzed_at >= since)
        )
        return result.scalar_one()
