"""
Competitor monitoring tasks.

Beat runs these on the monitoring queue: a social-media analysis cycle
every 15 minutes and due scraping jobs every 5 minutes.
"""

from typing import Any, Dict

from celery import Task

from solosuccess.infrastructure.database import db
from solosuccess.infrastructure.observability.logging import get_logger
from solosuccess.services.processor import social_media_processor
from solosuccess.services.scraping import execute_due_jobs
from solosuccess.workers.celery_app import celery_app, run_async, task_payload

logger = get_logger(__name__)


async def process_social_media_cycle() -> Dict[str, Any]:
    return await social_media_processor.process_jobs()


async def execute_due_scraping_cycle(limit: int = 50) -> Dict[str, int]:
    return await execute_due_jobs(db.session, limit=limit)


@celery_app.task(
    bind=True,
    name="solosuccess.workers.tasks.monitoring.process_social_media",
    autoretry_for=(),
    time_limit=900,
    soft_time_limit=840,
)
def process_social_media(self: Task) -> Dict[str, Any]:
    """
    Run one social-media analysis cycle.

    The processor reports errors in its summary instead of raising, so this
    task is never retried; the next beat tick is the retry.
    """
    summary = run_async(process_social_media_cycle)
    logger.info("Social media task finished", task_id=self.request.id, **summary)
    return task_payload(summary)


@celery_app.task(
    bind=True,
    name="solosuccess.workers.tasks.monitoring.execute_due_scraping_jobs",
    max_retries=1,
    default_retry_delay=60,
)
def execute_due_scraping_jobs(self: Task, limit: int = 50) -> Dict[str, int]:
    """Execute scraping jobs whose next run has passed, highest priority first."""
    return run_async(lambda: execute_due_scraping_cycle(limit))
