"""Error response schemas and error codes."""

from enum import Enum
from typing import Any
from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """
    Standard error codes for API responses.

    The client uses these to branch on failures without parsing messages.
    """

    # ===== Validation Errors (400) =====
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_PARAMETER = "INVALID_PARAMETER"

    # ===== Authentication Errors (401) =====
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"

    # ===== Authorization Errors (403) =====
    FORBIDDEN = "FORBIDDEN"
    RESOURCE_ACCESS_DENIED = "RESOURCE_ACCESS_DENIED"

    # ===== Not Found Errors (404) =====
    NOT_FOUND = "NOT_FOUND"

    # ===== Conflict Errors (409) =====
    CONFLICT = "CONFLICT"
    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"

    # ===== Payload Errors (413) =====
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # ===== Rate Limiting (429) =====
    RATE_LIMITED = "RATE_LIMITED"

    # ===== Server Errors (5xx) =====
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    LLM_ERROR = "LLM_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class FieldError(BaseModel):
    """Error information for a single request field."""

    field: str = Field(
        ...,
        description="Field name or path (e.g., 'status', 'body.task_ids.0')",
        examples=["status", "priority"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message for this field",
        examples=["Input should be 'low', 'medium' or 'high'"],
    )
    code: str | None = Field(
        default=None,
        description="Machine-readable error code for this field",
        examples=["ENUM", "MISSING"],
    )
    value: Any | None = Field(
        default=None,
        description="The invalid value that was provided",
    )


class ErrorDetail(BaseModel):
    """
    Structured error body.

    Example:
        ```python
        ErrorDetail(
            code=ErrorCode.VALIDATION_ERROR,
            message="Request validation failed",
            details=[FieldError(field="priority", message="Invalid value")],
        )
        ```
    """

    code: ErrorCode = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[FieldError] | None = Field(
        default=None,
        description="Field-level error details (primarily for validation errors)",
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Additional error context (e.g., resource IDs, retry info)",
    )

    @classmethod
    def from_validation_error(
        cls,
        validation_errors: list[dict[str, Any]] | tuple[dict[str, Any], ...],
    ) -> "ErrorDetail":
        """Create an ErrorDetail from pydantic `errors()` output."""
        field_errors = []

        for err in validation_errors:
            field_path = ".".join(str(loc) for loc in err.get("loc", []))
            value = err.get("input")
            if not isinstance(value, (str, int, float, bool, type(None))):
                value = None

            field_errors.append(
                FieldError(
                    field=field_path,
                    message=err.get("msg", "Validation error"),
                    code=str(err.get("type", "VALIDATION_ERROR")).upper(),
                    value=value,
                )
            )

        return cls(
            code=ErrorCode.VALIDATION_ERROR,
            message="Request validation failed",
            details=field_errors,
        )


class ErrorResponse(BaseModel):
    """Envelope returned for every non-2xx response."""

    error: ErrorDetail
    request_id: str | None = None
    suggested_action: str | None = None
