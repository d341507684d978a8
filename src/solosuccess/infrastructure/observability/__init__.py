"""
Observability for the SoloSuccess API.

This package provides:
- Structured logging with structlog
- Prometheus metrics
- Error tracking with Sentry
"""

from solosuccess.infrastructure.observability.logging import configure_logging, get_logger
from solosuccess.infrastructure.observability.error_tracking import (
    init_sentry,
    set_user_context,
    set_request_context,
    capture_exception,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "init_sentry",
    "set_user_context",
    "set_request_context",
    "capture_exception",
]
