"""
Error handling for FastAPI.

Every error leaves the API in the same envelope:

    {"error": {"code": ..., "message": ..., "details": [...], "context": {...}},
     "request_id": "...", "suggested_action": "..."}

5xx errors are logged with traceback and sent to Sentry; 401/403 are logged
as warnings for security monitoring; other client errors are logged at info.

Usage:
    from solosuccess.api.middleware.errors import register_error_handlers

    app = FastAPI()
    register_error_handlers(app)
"""

import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from solosuccess.api.schemas.errors import ErrorCode, ErrorDetail, FieldError
from solosuccess.config.settings import get_settings
from solosuccess.domain.exceptions import AppError
from solosuccess.infrastructure.observability.error_tracking import (
    capture_exception,
    set_request_context,
    set_user_context,
)
from solosuccess.infrastructure.observability.logging import get_logger


logger = get_logger(__name__)

# Friendlier messages for the most common pydantic error types
VALIDATION_MESSAGES = {
    "missing": "This field is required",
    "string_type": "Must be a valid string",
    "int_type": "Must be a valid integer",
    "int_parsing": "Must be a valid integer",
    "float_type": "Must be a valid number",
    "bool_type": "Must be true or false",
    "uuid_parsing": "Must be a valid UUID",
}

HTTP_STATUS_CODES = {
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.INVALID_REQUEST,
    409: ErrorCode.CONFLICT,
    413: ErrorCode.PAYLOAD_TOO_LARGE,
    429: ErrorCode.RATE_LIMITED,
}


def _get_request_id(request: Request) -> str:
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id") or str(uuid.uuid4())


def _get_user_info(request: Request) -> Optional[dict[str, Any]]:
    """User id and email stored by the auth dependency, if any."""
    return getattr(request.state, "user_info", None)


def _create_error_response(
    error_code: ErrorCode,
    message: str,
    request_id: str,
    status_code: int,
    details: Optional[list[FieldError]] = None,
    context: Optional[dict[str, Any]] = None,
    suggested_action: Optional[str] = None,
    is_production: bool = False,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    if is_production and status_code >= 500:
        message = "An internal error occurred. Please try again later."
        context = None

    error_detail = ErrorDetail(
        code=error_code,
        message=message,
        details=details,
        context=context,
    )

    content: dict[str, Any] = {
        "error": error_detail.model_dump(mode="json", exclude_none=True),
        "request_id": request_id,
    }
    if suggested_action:
        content["suggested_action"] = suggested_action

    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _log_error(
    request: Request,
    error: Exception,
    status_code: int,
    user_info: Optional[dict[str, Any]] = None,
) -> None:
    log_context = {
        "path": request.url.path,
        "method": request.method,
        "status_code": status_code,
        "error_type": type(error).__name__,
        **(user_info or {}),
    }

    if status_code >= 500:
        logger.error("Server error", error=str(error), exc_info=error, **log_context)
    elif status_code in (401, 403):
        logger.warning("Authentication/Authorization error", error=str(error), **log_context)
    else:
        logger.info("Client error", error=str(error), **log_context)


def _send_to_sentry(
    request: Request,
    error: Exception,
    user_info: Optional[dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> None:
    if user_info:
        set_user_context(user_id=user_info.get("user_id"), email=user_info.get("email"))
    set_request_context(request)
    capture_exception(
        error,
        extra={
            "path": request.url.path,
            "method": request.method,
            "request_id": request_id,
        },
    )


def _field_errors(errors: list[dict[str, Any]] | tuple[dict[str, Any], ...]) -> list[FieldError]:
    field_errors = []
    for error in errors:
        error_type = error.get("type", "")
        value = error.get("input")
        if not isinstance(value, (str, int, float, bool, type(None))):
            value = None
        field_errors.append(
            FieldError(
                field=".".join(str(loc) for loc in error.get("loc", [])),
                message=VALIDATION_MESSAGES.get(error_type, error.get("msg", "Validation error")),
                code=error_type.upper().replace(".", "_"),
                value=value,
            )
        )
    return field_errors


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the application."""
    settings = get_settings()

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        request_id = _get_request_id(request)
        user_info = _get_user_info(request)

        _log_error(request, exc, exc.status_code, user_info)
        if exc.status_code >= 500:
            _send_to_sentry(request, exc, user_info, request_id)

        headers = None
        if exc.status_code == 401:
            headers = {"WWW-Authenticate": "Bearer"}

        return _create_error_response(
            error_code=exc.error_code,
            message=exc.message,
            request_id=request_id,
            status_code=exc.status_code,
            context=exc.details or None,
            suggested_action=exc.suggested_action,
            is_production=settings.is_production,
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        field_errors = _field_errors(exc.errors())

        logger.info(
            "Request validation failed",
            path=request.url.path,
            method=request.method,
            field_count=len(field_errors),
        )

        return _create_error_response(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="Request validation failed",
            request_id=_get_request_id(request),
            status_code=status.HTTP_400_BAD_REQUEST,
            details=field_errors,
            suggested_action="Please check your input and ensure all required fields are provided correctly",
            is_production=settings.is_production,
        )

    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_error_handler(
        request: Request,
        exc: PydanticValidationError,
    ) -> JSONResponse:
        """Validation errors raised inside handlers and services."""
        error_detail = ErrorDetail.from_validation_error(exc.errors())

        logger.info(
            "Model validation failed",
            path=request.url.path,
            method=request.method,
            error_count=exc.error_count(),
        )

        return _create_error_response(
            error_code=error_detail.code,
            message=error_detail.message,
            request_id=_get_request_id(request),
            status_code=status.HTTP_400_BAD_REQUEST,
            details=error_detail.details,
            suggested_action="Please check your input and try again",
            is_production=settings.is_production,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Framework-level errors (unknown routes, wrong methods)."""
        code = HTTP_STATUS_CODES.get(
            exc.status_code,
            ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.INVALID_REQUEST,
        )
        return _create_error_response(
            error_code=code,
            message=str(exc.detail),
            request_id=_get_request_id(request),
            status_code=exc.status_code,
            is_production=settings.is_production,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        request_id = _get_request_id(request)
        user_info = _get_user_info(request)

        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            exc_info=exc,
            **(user_info or {}),
        )
        _send_to_sentry(request, exc, user_info, request_id)

        context = None
        message = "An unexpected error occurred"
        if not settings.is_production:
            message = f"An unexpected error occurred: {exc}"
            context = {"exception_type": type(exc).__name__}

        return _create_error_response(
            error_code=ErrorCode.INTERNAL_ERROR,
            message=message,
            request_id=request_id,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            context=context,
            suggested_action="Please try again later. If the problem persists, contact support",
            is_production=settings.is_production,
        )
