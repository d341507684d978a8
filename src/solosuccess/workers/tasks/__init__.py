"""
Background tasks module.

- monitoring: social-media analysis cycles and due scraping jobs
- notifications: transactional email
- cleanup: retention of stored analyses
"""

# Import tasks to register them with Celery
from solosuccess.workers.tasks.monitoring import (
    process_social_media,
    execute_due_scraping_jobs,
)
from solosuccess.workers.tasks.notifications import send_welcome_email
from solosuccess.workers.tasks.cleanup import cleanup_old_analyses

__all__ = [
    "process_social_media",
    "execute_due_scraping_jobs",
    "send_welcome_email",
    "cleanup_old_analyses",
]
