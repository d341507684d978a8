from urllib.parse import urlparse

from solosuccess.config.settings import Settings
from solosuccess.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]


def get_cors_middleware_config(settings: Settings) -> dict:
    """
    Build CORSMiddleware kwargs for the current environment.

    Local and dev environments fall back to the front-end dev servers when
    no origins are configured.

    Raises:
        ValueError: If an origin is not a scheme://host URL
    """
    allowed_origins = list(settings.cors_origins)

    if settings.environment in ["local", "dev"] and not allowed_origins:
        allowed_origins = list(DEV_ORIGINS)

    for origin in allowed_origins:
        if origin == "*":
            if settings.is_production:
                logger.warning("CORS wildcard origin configured in production")
            continue
        parsed = urlparse(origin)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(
                f"Invalid origin URL format: {origin}. "
                "Origins must include scheme and domain (e.g., 'http://localhost:3000')"
            )

    if settings.environment in ["staging", "prod"] and not allowed_origins:
        logger.warning(
            "No CORS origins configured, cross-origin requests will be blocked",
            environment=settings.environment,
        )

    return {
        "allow_origins": allowed_origins,
        "allow_credentials": settings.cors_allow_credentials,
        "allow_methods": settings.cors_allow_methods,
        "allow_headers": settings.cors_allow_headers,
        "max_age": settings.cors_max_age,
    }
