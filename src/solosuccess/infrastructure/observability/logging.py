"""
Structured logging configuration.

Use `get_logger(__name__)` from this module instead of print().
"""
from typing import Optional, Any
import re
import structlog
from solosuccess.config.settings import get_settings
from solosuccess.api.middleware.request_id import add_request_id_to_log


EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
PHONE_PATTERN = re.compile(r'\b(?:\+?1[-.]?)?\(?([0-9]{3})\)?[-.]?([0-9]{3})[-.]?([0-9]{4})\b')

SENSITIVE_KEYS = {
    "password",
    "secret",
    "token",
    "access_token",
    "api_key",
    "apikey",
    "authorization",
    "secret_key",
    "jwt",
}


def mask_pii_value(value: str) -> str:
    """
    Mask email addresses and phone numbers in a string.

    Example:
        >>> mask_pii_value("Contact john@example.com")
        'Contact ***@***'
    """
    if not isinstance(value, str):
        return value
    value = EMAIL_PATTERN.sub('***@***', value)
    value = PHONE_PATTERN.sub('***-***-****', value)
    return value


def mask_secrets_processor(logger_obj: Any, method_name: str, event_dict: dict) -> dict:
    """Structlog processor replacing values of sensitive keys with ``****``."""
    for key in list(event_dict.keys()):
        if key.lower() in SENSITIVE_KEYS and event_dict[key]:
            event_dict[key] = "****"
    return event_dict


def pii_masking_processor(logger_obj: Any, method_name: str, event_dict: dict) -> dict:
    """Structlog processor masking PII in string values when enabled."""
    if not get_settings().log_pii_masking_enabled:
        return event_dict
    return {
        key: mask_pii_value(value) if isinstance(value, str) and key != "event" else value
        for key, value in event_dict.items()
    }


def configure_logging() -> None:
    """
    Configure structured logging.

    Sets up context variable merging, request ID injection, secret and PII
    masking, and JSON (production) or colored console (development) output.
    """
    settings = get_settings()

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event=25,
            exception_formatter=structlog.dev.plain_traceback,
        )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_request_id_to_log,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_secrets_processor,
        pii_masking_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a logger instance with structured logging support.

    Usage:
        >>> logger = get_logger(__name__)
        >>> logger.info("Task created", task_id="123", user_id="456")
    """
    return structlog.get_logger(name)
