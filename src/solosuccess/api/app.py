# src/solosuccess/api/app.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from solosuccess.config.settings import get_settings
from solosuccess.api.middleware.cors import get_cors_middleware_config
from solosuccess.api.middleware.request_id import RequestIDMiddleware
from solosuccess.api.middleware.logging import RequestLoggingMiddleware
from solosuccess.api.middleware.metrics import MetricsMiddleware
from solosuccess.api.middleware.security import SecurityHeadersMiddleware
from solosuccess.api.middleware.errors import register_error_handlers
from solosuccess.api.middleware.rate_limit import setup_rate_limiting
from solosuccess.api.routes import health
from solosuccess.api.v1.router import router as v1_router
from solosuccess.infrastructure.cache.redis import get_redis_manager, close_redis
from solosuccess.infrastructure.database import db
from solosuccess.infrastructure.observability.logging import configure_logging, get_logger
from solosuccess.infrastructure.observability.error_tracking import (
    init_sentry,
    flush as flush_sentry,
)
from solosuccess.services.processor import social_media_processor

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    settings = get_settings()
    configure_logging()

    init_sentry(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment or settings.environment,
        release=settings.app_version,
        sample_rate=settings.sentry_sample_rate,
        traces_sample_rate=settings.sentry_traces_sample_rate,
    )

    # Tests bind their own engine before the app starts
    if settings.database_url and not db.is_connected:
        await db.connect(
            url=settings.database_url.get_secret_value(),
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
            echo_sql=settings.db_echo_sql,
        )
    elif not db.is_connected:
        logger.warning("Database not configured - API routes will fail until DATABASE_URL is set")

    redis_manager = await get_redis_manager()
    if redis_manager.is_available:
        if await redis_manager.health_check():
            logger.info("Redis connection established")
        else:
            logger.warning("Redis connection established but health check failed")
    else:
        logger.info("Redis is not available - rate limiting will use in-memory storage")

    if settings.social_processor_autostart:
        social_media_processor.start(settings.social_processor_interval_minutes)

    yield

    # Shutdown
    social_media_processor.stop()
    await close_redis()

    if db.is_connected:
        await db.disconnect()
        logger.info("Database connection closed")

    flush_sentry(timeout=5.0)


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
# SoloSuccess AI API

Backend for a productivity platform for solo founders.

## Features

- **Goals & Tasks**: Plan work, bulk-update tasks and track completion
- **Briefcase**: Folders and documents with search, tags and bulk operations
- **AI Team**: Chat with agent personas, with full replies or Server-Sent Events
- **Brand**: Generate brand usage guidelines
- **Competitive Intelligence**:
  - Competitor profiles and alerts
  - Social-media analysis and scheduled monitoring
  - Website scraping jobs with change detection
  - Opportunity scoring, action plans and ROI tracking

## Authentication

All `/api/v1` routes except register and login need a bearer token:

```
Authorization: Bearer <access_token>
```
        """,
        docs_url="/docs" if settings.debug else None,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Health", "description": "Liveness, readiness and Prometheus metrics."},
            {"name": "Authentication", "description": "Registration, login and the current user."},
            {"name": "Users", "description": "Profile of the signed-in user."},
            {"name": "Dashboard", "description": "Overview of today's work."},
            {"name": "Onboarding", "description": "First-run setup of goals, tasks and briefcase."},
            {"name": "Goals", "description": "Goal CRUD."},
            {"name": "Tasks", "description": "Task CRUD and bulk updates."},
            {"name": "Briefcase", "description": "Document storage."},
            {"name": "Chat", "description": "Conversations with AI agent personas."},
            {"name": "Brand", "description": "Brand guideline generation."},
            {"name": "Competitors", "description": "Competitor profiles, social-media monitoring and scraping jobs."},
            {"name": "Alerts", "description": "Alerts raised about competitors."},
            {"name": "Opportunities", "description": "Scored opportunities with actions, metrics and ROI."},
        ],
    )

    # Middleware (order matters - added in reverse order of execution)
    # Request ID should be first so it's available to all other middleware
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    cors_config = get_cors_middleware_config(settings)
    app.add_middleware(CORSMiddleware, **cors_config)

    register_error_handlers(app)
    setup_rate_limiting(app)

    # ============================================================================
    # Routes
    # ============================================================================

    # Health and metrics stay at the root level
    app.include_router(health.router, tags=["Health"])

    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()
