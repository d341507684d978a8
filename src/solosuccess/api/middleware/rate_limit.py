"""
Rate limiting using slowapi.

Every route gets the default limit (100 requests per minute per client IP)
through `SlowAPIMiddleware`. Sensitive routes add a stricter limit with
`@limiter.limit(...)`; health probes are exempt.

Storage is Redis when `REDIS_URL` is configured, otherwise in-process memory.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from solosuccess.api.schemas.errors import ErrorCode, ErrorDetail
from solosuccess.config.settings import get_settings
from solosuccess.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


def get_client_ip(request: Request) -> str:
    """First address of `X-Forwarded-For`, falling back to the peer address."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return get_remote_address(request) or "unknown"


def get_ip_key(request: Request) -> str:
    return f"ip:{get_client_ip(request)}"


def create_rate_limiter() -> Limiter:
    settings = get_settings()

    return Limiter(
        key_func=get_ip_key,
        default_limits=[settings.rate_limit_default],
        storage_uri=settings.redis_url.get_secret_value() if settings.redis_url else "memory://",
        strategy="fixed-window",
        headers_enabled=True,
        enabled=settings.rate_limit_enabled,
    )


# Global limiter instance, used by route decorators
limiter = create_rate_limiter()


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return the standard error envelope with a `Retry-After` header."""
    retry_after = 60
    limit = getattr(exc, "limit", None)
    if limit is not None:
        retry_after = limit.limit.get_expiry()

    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        client_ip=get_client_ip(request),
        limit=str(exc.detail),
    )

    detail = ErrorDetail(
        code=ErrorCode.RATE_LIMITED,
        message="Too many requests",
        context={"limit": str(exc.detail), "retry_after": retry_after},
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": detail.model_dump(mode="json", exclude_none=True),
            "request_id": getattr(request.state, "request_id", None),
            "suggested_action": "You have made too many requests. Please wait before trying again",
        },
        headers={"Retry-After": str(retry_after)},
    )


def setup_rate_limiting(app: FastAPI) -> None:
    """Attach the limiter, its middleware and the 429 handler to the app."""
    settings = get_settings()

    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    if settings.rate_limit_enabled:
        logger.info("Rate limiting enabled", default_limit=settings.rate_limit_default)
    else:
        logger.info("Rate limiting is disabled")
