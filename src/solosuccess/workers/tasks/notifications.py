"""Notification tasks (notifications queue)."""

from typing import Any, Dict
from uuid import UUID

from celery import Task

from solosuccess.domain.exceptions import ExternalError
from solosuccess.infrastructure.database import db, utcnow
from solosuccess.infrastructure.database.repositories import UserRepository
from solosuccess.infrastructure.observability.logging import get_logger
from solosuccess.services.email import send_email, welcome_email
from solosuccess.workers.celery_app import celery_app, run_async

logger = get_logger(__name__)


async def deliver_welcome_email(user_id: UUID) -> Dict[str, Any]:
    """
    Send the welcome email once and stamp welcome_email_sent_at.

    Returns a status of sent, skipped (already sent, unknown user or email
    disabled).

    Raises:
        ExternalError: If the email provider fails
    """
    async with db.session() as session:
        users = UserRepository(session)
        user = await users.get(user_id)
        if user is None:
            logger.warning("Welcome email skipped, user not found", user_id=str(user_id))
            return {"status": "skipped", "reason": "user_not_found"}
        if user.welcome_email_sent_at is not None:
            return {"status": "skipped", "reason": "already_sent"}

        subject, html = welcome_email(user.full_name)
        response = await send_email(user.email, subject, html)
        if response is None:
            return {"status": "skipped", "reason": "email_disabled"}

        await users.apply_update(user, welcome_email_sent_at=utcnow())

    logger.info("Welcome email sent", user_id=str(user_id))
    return {"status": "sent", "provider_id": response.get("id")}


@celery_app.task(
    bind=True,
    name="solosuccess.workers.tasks.notifications.send_welcome_email",
    autoretry_for=(ExternalError,),
    max_retries=5,
    default_retry_delay=60,
)
def send_welcome_email(self: Task, user_id: str) -> Dict[str, Any]:
    """Deliver the welcome email queued by onboarding."""
    return run_async(lambda: deliver_welcome_email(UUID(user_id)))
