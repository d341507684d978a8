"""Security headers middleware."""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from solosuccess.config.settings import get_settings


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    HSTS is only sent in production; everything else is always on.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        settings = get_settings()

        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = settings.security_frame_options

        if settings.security_hsts_enabled and settings.is_production:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={settings.security_hsts_max_age}; includeSubDomains"
            )

        # Interactive docs load their assets from a CDN
        if not request.url.path.startswith(("/docs", "/redoc")):
            response.headers["Content-Security-Policy"] = settings.security_csp_policy

        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"

        if "Server" in response.headers:
            del response.headers["Server"]

        return response
