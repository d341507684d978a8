"""
Request logging middleware with structured logging.

Logs method, path, status code and duration for every request except
health probes.
"""
import time
from typing import Set
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from solosuccess.infrastructure.observability.logging import get_logger


logger = get_logger(__name__)


# Health check paths to skip logging (reduce noise)
HEALTH_CHECK_PATHS: Set[str] = {
    "/health",
    "/health/live",
    "/health/ready",
    "/metrics",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Structured request/response logging."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in HEALTH_CHECK_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        log_context = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
        }

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed with exception",
                **log_context,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

        if response.status_code >= 500:
            logger.error(
                "Request completed with error",
                **log_context,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
        else:
            logger.info(
                "Request completed",
                **log_context,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

        response.headers["X-Process-Time-Ms"] = str(duration_ms)
        return response
