"""Maintenance tasks."""

from typing import Any, Dict, Optional

from celery import Task

from solosuccess.config.settings import get_settings
from solosuccess.infrastructure.database import db, utcnow
from solosuccess.services.social_media import SocialMediaService
from solosuccess.workers.celery_app import celery_app, run_async


async def delete_old_analyses(retention_days: Optional[int] = None) -> Dict[str, Any]:
    retention_days = retention_days or get_settings().social_analysis_retention_days
    async with db.session() as session:
        deleted = await SocialMediaService(session).cleanup(retention_days, utcnow())
    return {"deleted_count": deleted, "retention_days": retention_days}


@celery_app.task(
    bind=True,
    name="solosuccess.workers.tasks.cleanup.cleanup_old_analyses",
    max_retries=3,
    default_retry_delay=300,
)
def cleanup_old_analyses(self: Task, retention_days: Optional[int] = None) -> Dict[str, Any]:
    """Delete social-media analyses older than the retention window. Runs daily."""
    return run_async(lambda: delete_old_analyses(retention_days))
