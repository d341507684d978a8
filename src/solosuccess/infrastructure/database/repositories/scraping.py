from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import select, desc, case
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.infrastructure.database.models.scraping import JobStatus, ScrapingJob, ScrapingResult
from solosuccess.infrastructure.database.repositories.base import BaseRepository, OwnedRepository


PRIORITY_RANK = {"critical": 4, "high": 3, "medium": 2, "low": 1}

# Jobs in these states run again once next_run_at has passed
SCHEDULABLE_STATUSES = [JobStatus.PENDING.value, JobStatus.COMPLETED.value, JobStatus.FAILED.value]


class ScrapingJobRepository(OwnedRepository[ScrapingJob]):
    def __init__(self, session: AsyncSession):
        super().__init__(ScrapingJob, session)

    async def due_jobs(self, now: datetime, limit: int = 50) -> Sequence[ScrapingJob]:
        """Schedulable jobs whose next run has passed, highest priority then oldest first."""
        priority_rank = case(PRIORITY_RANK, value=ScrapingJob.priority, else_=0)
        result = await self.session.execute(
            select(ScrapingJob)
            .where(ScrapingJob.status.in_(SCHEDULABLE_STATUSES), ScrapingJob.next_run_at <= now)
            .order_by(desc(priority_rank), ScrapingJob.next_run_at)
            .limit(limit)
        )
        return result.scalars().all()


class ScrapingResultRepository(BaseRepository[ScrapingResult]):
    def __init__(self, session: AsyncSession):
        super().__init__(ScrapingResult, session)

    async def history(self, job_id: UUID, limit: int = 10) -> Sequence[ScrapingResult]:
        result = await self.session.execute(
            select(ScrapingResult)
            .where(ScrapingResult.job_id == job_id)
            .order_by(desc(ScrapingResult.executed_at), desc(ScrapingResult.created_at))
            .limit(limit)
        )
        return result.scalars().all()

    async def last_successful(self, job_id: UUID) -> ScrapingResult | None:
        result = await self.session.execute(
            select(ScrapingResult)
            .where(ScrapingResult.job_id == job_id, ScrapingResult.success.is_(True))
            .order_by(desc(ScrapingResult.executed_at), desc(ScrapingResult.created_at))
            .limit(1)
        )
        return result.scalars().first()
