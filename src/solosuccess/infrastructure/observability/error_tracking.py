"""
Sentry error tracking integration.

Usage:
    from solosuccess.infrastructure.observability.error_tracking import (
        init_sentry,
        capture_exception,
    )

    init_sentry(dsn=settings.sentry_dsn, environment="prod", release="0.1.0")
"""

import logging
from typing import Any, Optional

import sentry_sdk
from fastapi import Request
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.celery import CeleryIntegration

from solosuccess.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "x-api-key",
}

SENSITIVE_PARAMS = {
    "password",
    "token",
    "access_token",
    "api_key",
    "secret",
}

IGNORED_EXCEPTIONS = ("RateLimitExceeded", "ValidationError", "RequestValidationError")


def _should_ignore_error(event: dict, hint: dict) -> Optional[dict]:
    """
    Drop expected client errors.

    4xx errors other than 401/403 are user mistakes, not incidents.
    """
    if "exc_info" in hint:
        exc_type, exc_value, _ = hint["exc_info"]

        status_code = getattr(exc_value, "status_code", None)
        if status_code and 400 <= status_code < 500 and status_code not in (401, 403):
            return None

        if exc_type.__name__ in IGNORED_EXCEPTIONS:
            return None

    return event


def _filter_sensitive_data(event: dict, hint: dict) -> dict:
    """Scrub credentials from request headers, query strings and breadcrumbs."""
    request_data = event.get("request", {})

    if "headers" in request_data:
        request_data["headers"] = {
            key: "[Filtered]" if key.lower() in SENSITIVE_HEADERS else value
            for key, value in request_data["headers"].items()
        }

    query_string = request_data.get("query_string")
    if isinstance(query_string, str) and query_string:
        filtered_params = []
        for param in query_string.split("&"):
            key, sep, _ = param.partition("=")
            if sep and key.lower() in SENSITIVE_PARAMS:
                filtered_params.append(f"{key}=[Filtered]")
            else:
                filtered_params.append(param)
        request_data["query_string"] = "&".join(filtered_params)

    for breadcrumb in event.get("breadcrumbs", {}).get("values", []):
        data = breadcrumb.get("data") or {}
        for key in list(data.keys()):
            if key.lower() in SENSITIVE_PARAMS or key.lower() in SENSITIVE_HEADERS:
                data[key] = "[Filtered]"

    return event


def _before_send(event: dict, hint: dict) -> Optional[dict]:
    event = _should_ignore_error(event, hint)
    if event is None:
        return None
    return _filter_sensitive_data(event, hint)


def init_sentry(
    dsn: Optional[str] = None,
    environment: Optional[str] = None,
    release: Optional[str] = None,
    sample_rate: float = 1.0,
    traces_sample_rate: float = 0.1,
) -> bool:
    """
    Initialize the Sentry SDK.

    Args:
        dsn: Sentry DSN. If None, Sentry is disabled.
        environment: Environment name (e.g., "prod", "staging")
        release: Release version
        sample_rate: Error sampling rate (0.0 to 1.0)
        traces_sample_rate: Performance tracing sample rate (0.0 to 1.0)

    Returns:
        True if Sentry was initialized, False otherwise
    """
    if not dsn:
        logger.info("Sentry DSN not provided, error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            SqlalchemyIntegration(),
            CeleryIntegration(),
        ],
        sample_rate=sample_rate,
        traces_sample_rate=traces_sample_rate,
        before_send=_before_send,
        attach_stacktrace=True,
        send_default_pii=False,
        max_breadcrumbs=50,
    )

    logger.info(
        "Sentry initialized",
        environment=environment,
        release=release,
        sample_rate=sample_rate,
        traces_sample_rate=traces_sample_rate,
    )
    return True


def set_user_context(user_id: Optional[str] = None, email: Optional[str] = None) -> None:
    user_data: dict[str, Any] = {}
    if user_id:
        user_data["id"] = user_id
    if email:
        user_data["email"] = email
    if user_data:
        sentry_sdk.set_user(user_data)


def set_request_context(request: Request) -> None:
    sentry_sdk.set_context("request", {
        "method": request.method,
        "path": request.url.path,
    })
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        sentry_sdk.set_tag("request_id", request_id)


def capture_exception(
    error: BaseException,
    extra: Optional[dict[str, Any]] = None,
) -> Optional[str]:
    """
    Capture an exception with optional extra context.

    Returns:
        Sentry event ID, or None when Sentry is not initialized
    """
    with sentry_sdk.new_scope() as scope:
        for key, value in (extra or {}).items():
            scope.set_extra(key, value)
        return sentry_sdk.capture_exception(error)


def flush(timeout: float = 2.0) -> bool:
    """
    Flush pending Sentry events before shutdown.

    Returns:
        True if Sentry is initialized and the queue drained within timeout
    """
    client = sentry_sdk.get_client()
    if not client.is_active():
        return False
    client.flush(timeout=timeout)
    return True
