"""
In-process scheduler for social-media analysis.

`social_media_processor` is a process-wide singleton. The API can start
and stop its interval loop or run one cycle on demand; Celery beat runs
the same cycle for deployments with several API processes.
"""

import asyncio
from datetime import timedelta
from typing import Any, Optional
from uuid import UUID

from solosuccess.config.settings import get_settings
from solosuccess.domain.exceptions import NotFound
from solosuccess.infrastructure.database import db, utcnow
from solosuccess.infrastructure.database.repositories import CompetitorRepository
from solosuccess.infrastructure.observability.error_tracking import capture_exception
from solosuccess.infrastructure.observability.logging import get_logger
from solosuccess.infrastructure.observability.metrics import COMPETITORS_ANALYZED, PROCESSOR_CYCLES
from solosuccess.services.social_media import SocialMediaService

logger = get_logger(__name__)


class SocialMediaJobProcessor:
    """
    Runs analysis cycles over actively monitored competitors.

    Only one cycle runs at a time; a cycle requested while another is in
    progress returns immediately.
    """

    def __init__(self):
        self.is_processing = False
        self.interval_minutes = get_settings().social_processor_interval_minutes
        self.last_processed = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, interval_minutes: Optional[int] = None) -> bool:
        """
        Start the interval loop. The first cycle runs immediately.

        Returns:
            False if the loop was already running
        """
        if self.is_running:
            logger.info("Social media processor already running")
            return False

        if interval_minutes:
            self.interval_minutes = interval_minutes

        self._task = asyncio.create_task(self._run_loop(), name="social-media-processor")
        logger.info("Social media processor started", interval_minutes=self.interval_minutes)
        return True

    def stop(self) -> bool:
        if not self.is_running:
            return False

        self._task.cancel()
        self._task = None
        logger.info("Social media processor stopped")
        return True

    async def _run_loop(self) -> None:
        while True:
            await self.process_jobs()
            await asyncio.sleep(self.interval_minutes * 60)

    async def process_jobs(self) -> dict[str, Any]:
        """
        Run one cycle: analyse due competitors, then delete expired analyses.

        Errors are logged and reported, never raised; the in-progress flag is
        always cleared.
        """
        if self.is_processing:
            logger.info("Social media processing already in progress, skipping")
            return {"skipped": True}

        self.is_processing = True
        summary: dict[str, Any] = {"skipped": False, "analyzed": 0, "failed": 0, "deleted": 0}
        try:
            logger.info("Social media processing cycle started")
            now = utcnow()

            async with db.session() as session:
                due = await CompetitorRepository(session).due_for_analysis(
                    now - timedelta(minutes=self.interval_minutes)
                )
                competitor_ids = [c.id for c in due]

            for competitor_id in competitor_ids:
                try:
                    await self._analyze(competitor_id)
                    summary["analyzed"] += 1
                except Exception as e:
                    summary["failed"] += 1
                    logger.error(
                        "Competitor analysis failed",
                        competitor_id=str(competitor_id),
                        error=str(e),
                        exc_info=True,
                    )
                    capture_exception(e, extra={"competitor_id": str(competitor_id)})

            async with db.session() as session:
                summary["deleted"] = await SocialMediaService(session).cleanup(
                    get_settings().social_analysis_retention_days, now
                )

            self.last_processed = utcnow()
            PROCESSOR_CYCLES.labels(status="success").inc()
            logger.info("Social media processing cycle completed", **summary)
        except Exception as e:
            PROCESSOR_CYCLES.labels(status="error").inc()
            logger.error("Social media processing cycle failed", error=str(e), exc_info=True)
            capture_exception(e)
            summary["error"] = str(e)
        finally:
            self.is_processing = False

        return summary

    async def _analyze(self, competitor_id: UUID) -> dict[str, Any]:
        async with db.session() as session:
            competitor = await CompetitorRepository(session).get(competitor_id)
            if competitor is None:
                raise NotFound("Competitor not found", details={"competitor_id": str(competitor_id)})
            result = await SocialMediaService(session).analyze_competitor(competitor)
        COMPETITORS_ANALYZED.inc()
        return result

    async def process_jobs_manually(self) -> dict[str, Any]:
        return await self.process_jobs()

    async def analyze_competitor_manually(self, competitor_id: UUID) -> dict[str, Any]:
        """
        Analyse one competitor now, regardless of when it was last analysed.

        Raises:
            NotFound: If the competitor does not exist
        """
        return await self._analyze(competitor_id)

    def get_status(self) -> dict[str, Any]:
        return {
            "is_running": self.is_running,
            "is_processing": self.is_processing,
            "interval_minutes": self.interval_minutes,
            "last_processed": self.last_processed,
        }


social_media_processor = SocialMediaJobProcessor()
