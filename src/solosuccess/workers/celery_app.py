"""
Celery application configuration for background task processing.

This module configures Celery with:
- Redis broker and result backend
- Named queues (default, monitoring, notifications)
- Retry configuration
- Periodic schedules for competitor monitoring and cleanup

Configuration is loaded from application settings.
"""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from celery import Celery, Task
from celery.schedules import crontab
from celery.signals import task_failure, task_postrun, task_prerun, task_retry
from kombu import Queue

from solosuccess.config.settings import get_settings
from solosuccess.infrastructure.database import db
from solosuccess.infrastructure.observability.error_tracking import capture_exception
from solosuccess.infrastructure.observability.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)

T = TypeVar("T")


# ============================================================================
# Celery Application Configuration
# ============================================================================

celery_app = Celery(
    "solosuccess",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "solosuccess.workers.tasks.monitoring",
        "solosuccess.workers.tasks.notifications",
        "solosuccess.workers.tasks.cleanup",
    ],
)

celery_app.conf.update(
    # Task Configuration
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task Execution
    task_default_queue=settings.celery_task_default_queue,
    task_default_retry_delay=settings.celery_task_default_retry_delay,
    task_time_limit=settings.celery_task_time_limit,
    task_soft_time_limit=settings.celery_task_soft_time_limit,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_always_eager=settings.celery_task_always_eager,

    # Worker Configuration
    worker_prefetch_multiplier=settings.celery_worker_prefetch_multiplier,
    worker_max_tasks_per_child=settings.celery_worker_max_tasks_per_child,

    # Result Backend Configuration
    result_expires=3600,
    result_extended=True,

    # Queue Configuration
    task_queues=(
        Queue(
            settings.celery_task_default_queue,
            routing_key=f"{settings.celery_task_default_queue}.#",
        ),
        Queue("monitoring", routing_key="monitoring.#"),
        Queue("notifications", routing_key="notifications.#"),
    ),

    # Task Routing
    task_routes={
        "solosuccess.workers.tasks.monitoring.*": {
            "queue": "monitoring",
            "routing_key": "monitoring.run",
        },
        "solosuccess.workers.tasks.notifications.*": {
            "queue": "notifications",
            "routing_key": "notifications.email",
        },
        "solosuccess.workers.tasks.cleanup.*": {
            "queue": settings.celery_task_default_queue,
            "routing_key": f"{settings.celery_task_default_queue}.maintenance",
        },
    },

    task_track_started=True,

    # Periodic Tasks (Beat Schedule)
    beat_schedule={
        "process-social-media": {
            "task": "solosuccess.workers.tasks.monitoring.process_social_media",
            "schedule": crontab(minute="*/15"),
            "options": {"queue": "monitoring"},
        },
        "execute-due-scraping-jobs": {
            "task": "solosuccess.workers.tasks.monitoring.execute_due_scraping_jobs",
            "schedule": crontab(minute="*/5"),
            "options": {"queue": "monitoring"},
        },
        "cleanup-old-analyses": {
            "task": "solosuccess.workers.tasks.cleanup.cleanup_old_analyses",
            "schedule": crontab(hour=3, minute=0),
        },
    },
)


def run_async(func: Callable[[], Awaitable[T]]) -> T:
    """
    Run a coroutine function from a synchronous task.

    Each call gets a fresh event loop, so the database engine is created
    and disposed inside it.
    """

    async def runner() -> T:
        connected_here = False
        if not db.is_connected and settings.database_url is not None:
            await db.connect(
                url=settings.database_url.get_secret_value(),
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
                pool_recycle=settings.db_pool_recycle,
            )
            connected_here = True
        try:
            return await func()
        finally:
            if connected_here:
                await db.disconnect()

    return asyncio.run(runner())


# ============================================================================
# Custom Task Base Class
# ============================================================================

class BaseTask(Task):
    """
    Base task with retry backoff, logging and error tracking.

    Tasks that must not be retried on every exception override
    `autoretry_for`.
    """

    autoretry_for = (Exception,)
    max_retries = settings.celery_task_max_retries
    retry_backoff = True
    retry_backoff_max = 600
    retry_jitter = True

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error("Task failed", task_name=self.name, task_id=task_id, error=str(exc))
        capture_exception(exc, extra={"task_name": self.name, "task_id": task_id})

    def on_retry(self, exc, task_id, args, kwargs, einfo):
        logger.warning(
            "Task retrying",
            task_name=self.name,
            task_id=task_id,
            retries=self.request.retries,
            max_retries=self.max_retries,
            error=str(exc),
        )

    def on_success(self, retval, task_id, args, kwargs):
        logger.info("Task succeeded", task_name=self.name, task_id=task_id)


celery_app.Task = BaseTask


# ============================================================================
# Celery Signal Handlers
# ============================================================================

@task_prerun.connect
def task_prerun_handler(task_id, task, args, kwargs, **extra_kwargs):
    logger.debug("Task started", task_name=task.name, task_id=task_id)


@task_postrun.connect
def task_postrun_handler(task_id, task, args, kwargs, retval, **extra_kwargs):
    logger.debug("Task finished", task_name=task.name, task_id=task_id)


@task_failure.connect
def task_failure_handler(task_id, exception, args, kwargs, traceback, einfo, **extra_kwargs):
    logger.debug("Task failure signal", task_id=task_id, error=str(exception))


@task_retry.connect
def task_retry_handler(request, reason, einfo, **extra_kwargs):
    logger.debug("Task retry signal", task_id=request.id, reason=str(reason))


def task_payload(result: dict[str, Any]) -> dict[str, Any]:
    """Make a result JSON-serialisable for the result backend."""
    return {
        key: value.isoformat() if hasattr(value, "isoformat") else value
        for key, value in result.items()
    }
