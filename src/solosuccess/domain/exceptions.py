"""
Exception hierarchy for the SoloSuccess service.

Every exception maps to an HTTP status code and a machine-readable
`ErrorCode`. Route handlers and services raise these; the error handlers in
`solosuccess.api.middleware.errors` render them as JSON.

Usage:
    from solosuccess.domain.exceptions import NotFound, ValidationError

    raise NotFound("Task not found", details={"task_id": str(task_id)})
"""

from typing import Any, Optional
from solosuccess.api.schemas.errors import ErrorCode


class AppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        error_code: Machine-readable error code (from ErrorCode enum)
        status_code: HTTP status code (default: 500)
        message: Human-readable error message
        details: Optional dictionary with additional error context
        suggested_action: Optional user-friendly suggestion for resolution
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    default_message: str = "An unexpected error occurred"
    default_suggested_action: Optional[str] = None

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        suggested_action: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.details = details or {}
        self.suggested_action = suggested_action or self.default_suggested_action
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"error_code={self.error_code.value}, "
            f"status_code={self.status_code}, "
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = {
            "error_code": self.error_code.value,
            "message": self.message,
        }

        if self.details:
            result["details"] = self.details

        if self.suggested_action:
            result["suggested_action"] = self.suggested_action

        return result


# ========================================
# Authentication Errors (401)
# ========================================


class AuthError(AppError):
    """Base class for authentication errors."""

    status_code = 401
    error_code = ErrorCode.UNAUTHORIZED
    default_message = "Authentication required"
    default_suggested_action = "Please sign in and try again"


class InvalidCredentials(AuthError):
    error_code = ErrorCode.INVALID_CREDENTIALS
    default_message = "Invalid email or password"
    default_suggested_action = "Please check your email and password and try again"


class TokenExpired(AuthError):
    error_code = ErrorCode.TOKEN_EXPIRED
    default_message = "Authentication token has expired"
    default_suggested_action = "Please sign in again"


class TokenInvalid(AuthError):
    error_code = ErrorCode.TOKEN_INVALID
    default_message = "Authentication token is invalid"
    default_suggested_action = "Please sign in again to obtain a valid token"


# ========================================
# Authorization Errors (403)
# ========================================


class InsufficientPermissions(AppError):
    status_code = 403
    error_code = ErrorCode.FORBIDDEN
    default_message = "You do not have permission to perform this action"


class ResourceAccessDenied(AppError):
    """Access to a resource owned by another user."""

    status_code = 403
    error_code = ErrorCode.RESOURCE_ACCESS_DENIED
    default_message = "Access to this resource is denied"
    default_suggested_action = "You can only access resources that belong to your account"


# ========================================
# Validation Errors (400)
# ========================================


class ValidationError(AppError):
    """Request validation failed."""

    status_code = 400
    error_code = ErrorCode.VALIDATION_ERROR
    default_message = "Request validation failed"
    default_suggested_action = "Please check your input and try again"


class InvalidParameter(AppError):
    status_code = 400
    error_code = ErrorCode.INVALID_PARAMETER
    default_message = "Invalid parameter provided"
    default_suggested_action = "Please check the parameter values and try again"


class PayloadTooLarge(AppError):
    status_code = 413
    error_code = ErrorCode.PAYLOAD_TOO_LARGE
    default_message = "Uploaded file is too large"


# ========================================
# Resource Errors (404, 409)
# ========================================


class NotFound(AppError):
    """Resource not found (or not owned by the caller)."""

    status_code = 404
    error_code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"
    default_suggested_action = "Please check the resource ID and try again"


class AlreadyExists(AppError):
    status_code = 409
    error_code = ErrorCode.DUPLICATE_RESOURCE
    default_message = "Resource already exists"


class Conflict(AppError):
    """The resource is not in a state that allows the requested change."""

    status_code = 409
    error_code = ErrorCode.CONFLICT
    default_message = "The request conflicts with the current state of the resource"


# ========================================
# Rate Limiting Errors (429)
# ========================================


class RateLimitError(AppError):
    status_code = 429
    error_code = ErrorCode.RATE_LIMITED
    default_message = "Too many requests"
    default_suggested_action = "You have made too many requests. Please wait before trying again"


# ========================================
# External Service Errors (5xx)
# ========================================


class ExternalError(AppError):
    """Base class for external service errors."""

    status_code = 502
    error_code = ErrorCode.EXTERNAL_SERVICE_ERROR
    default_message = "An external service error occurred"
    default_suggested_action = "An external service is currently unavailable. Please try again later"


class LLMError(ExternalError):
    """Language model call failed."""

    error_code = ErrorCode.LLM_ERROR
    default_message = "AI service error"
    default_suggested_action = "The AI service is currently unavailable. Please try again in a few moments"


class LLMUnavailable(LLMError):
    """No language model provider is configured."""

    status_code = 503
    error_code = ErrorCode.SERVICE_UNAVAILABLE
    default_message = "AI service is not configured"


class DatabaseError(AppError):
    status_code = 500
    error_code = ErrorCode.DATABASE_ERROR
    default_message = "Database operation failed"
    default_suggested_action = "Please try again later"
