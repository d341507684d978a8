"""
Request ID tracking middleware.

Every request gets a UUID4 identifier that is echoed in the `X-Request-ID`
response header and attached to every log line emitted while the request
is being served.
"""
import uuid
from contextvars import ContextVar
from typing import Any, Optional
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

logger = structlog.get_logger(__name__)


def is_valid_uuid(value: str) -> bool:
    """Return True when ``value`` is a canonical UUID4 string."""
    try:
        uuid_obj = uuid.UUID(value, version=4)
        return str(uuid_obj) == value and uuid_obj.version == 4
    except (ValueError, AttributeError):
        return False


def get_request_id() -> Optional[str]:
    return request_id_var.get(None)


def set_request_id(request_id: Optional[str]) -> None:
    """Set request ID in context (used by background jobs to correlate logs)."""
    request_id_var.set(request_id)


def add_request_id_to_log(
    logger: Any, method_name: str, event_dict: dict
) -> dict:
    """Structlog processor adding the current request ID to log entries."""
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assign a request ID to each request.

    An incoming `X-Request-ID` is honoured only when it is a valid UUID4,
    which keeps arbitrary client strings out of the logs.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID")

        if request_id and not is_valid_uuid(request_id):
            logger.warning(
                "Invalid X-Request-ID received, generating new one",
                invalid_id=request_id[:64],
            )
            request_id = None

        request_id = request_id or str(uuid.uuid4())

        request.state.request_id = request_id
        set_request_id(request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
