"""
Background workers for asynchronous task processing.

Start a worker with:
    celery -A solosuccess.workers.celery_app worker -Q default,monitoring,notifications --loglevel=info

Start the beat scheduler for periodic tasks:
    celery -A solosuccess.workers.celery_app beat --loglevel=info
"""

from solosuccess.workers.celery_app import celery_app

__all__ = ["celery_app"]
