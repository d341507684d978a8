"""Health check endpoints for Kubernetes probes, and the Prometheus scrape endpoint."""
import asyncio
import time
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field
from sqlalchemy import text

from solosuccess.api.middleware.rate_limit import limiter
from solosuccess.config.settings import get_settings
from solosuccess.infrastructure.cache.redis import get_redis_manager
from solosuccess.infrastructure.database import db, utcnow
from solosuccess.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

# Application startup time for uptime calculation
_startup_time = time.time()

router = APIRouter()


# ===== Schemas =====


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""
    name: str = Field(..., description="Component name")
    status: HealthStatus = Field(..., description="Component health status")
    latency_ms: Optional[float] = Field(None, description="Response latency in milliseconds")
    details: Optional[Dict] = Field(None, description="Additional component details")
    error: Optional[str] = Field(None, description="Error message if unhealthy")


class LivenessResponse(BaseModel):
    status: str = Field("alive", description="Liveness status")
    version: str
    uptime_seconds: float
    timestamp: datetime = Field(default_factory=utcnow)


class ReadinessResponse(BaseModel):
    status: str = Field(..., description="ready or not_ready")
    timestamp: datetime = Field(default_factory=utcnow)
    components: List[ComponentHealth] = Field(default_factory=list)


# ===== Health Check Helpers =====


async def check_database_health(timeout: float = 3.0) -> ComponentHealth:
    """Run `SELECT 1` and report latency and pool stats."""
    start_time = time.time()

    if not db.is_connected:
        return ComponentHealth(
            name="database",
            status=HealthStatus.UNHEALTHY,
            error="Database not configured",
        )

    try:
        async with asyncio.timeout(timeout):
            async with db.session() as session:
                await session.execute(text("SELECT 1"))

        return ComponentHealth(
            name="database",
            status=HealthStatus.HEALTHY,
            latency_ms=round((time.time() - start_time) * 1000, 2),
            details=db.get_pool_stats(),
        )
    except asyncio.TimeoutError:
        return ComponentHealth(
            name="database",
            status=HealthStatus.UNHEALTHY,
            latency_ms=round((time.time() - start_time) * 1000, 2),
            error=f"Database check timed out after {timeout}s",
        )
    except Exception as e:
        logger.error("Database health check failed", error=str(e), exc_info=True)
        return ComponentHealth(
            name="database",
            status=HealthStatus.UNHEALTHY,
            latency_ms=round((time.time() - start_time) * 1000, 2),
            error=f"Database error: {e}",
        )


async def check_redis_health(timeout: float = 3.0) -> ComponentHealth:
    """
    Ping Redis.

    Redis only backs rate limiting, so an unconfigured or unreachable Redis
    is reported as degraded, never unhealthy.
    """
    start_time = time.time()

    try:
        async with asyncio.timeout(timeout):
            redis_manager = await get_redis_manager()
            if not redis_manager.is_configured:
                return ComponentHealth(
                    name="redis",
                    status=HealthStatus.DEGRADED,
                    error="Redis not configured",
                )

            is_healthy = await redis_manager.health_check()
    except asyncio.TimeoutError:
        is_healthy = False

    latency_ms = round((time.time() - start_time) * 1000, 2)
    if is_healthy:
        return ComponentHealth(name="redis", status=HealthStatus.HEALTHY, latency_ms=latency_ms)
    return ComponentHealth(
        name="redis",
        status=HealthStatus.DEGRADED,
        latency_ms=latency_ms,
        error="Redis ping failed",
    )


# ===== Health Endpoints =====


@router.get("/health", response_model=LivenessResponse)
@router.get("/health/live", response_model=LivenessResponse)
@limiter.exempt
async def liveness_probe(request: Request):
    """
    Liveness probe.

    Always returns 200 while the process is running; no dependencies are
    checked.
    """
    return LivenessResponse(
        version=get_settings().app_version,
        uptime_seconds=round(time.time() - _startup_time, 2),
    )


@router.get("/health/ready", response_model=ReadinessResponse)
@limiter.exempt
async def readiness_probe(request: Request, response: Response):
    """
    Readiness probe.

    Returns 503 when the database is unhealthy. Redis problems are reported
    but do not fail readiness.
    """
    components = [await check_database_health(), await check_redis_health()]

    if any(c.status == HealthStatus.UNHEALTHY for c in components):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="not_ready", components=components)

    return ReadinessResponse(status="ready", components=components)


@router.get("/metrics", response_class=PlainTextResponse, include_in_schema=False)
@limiter.exempt
async def metrics(request: Request):
    """Prometheus metrics endpoint."""
    return PlainTextResponse(generate_latest(), media_type=CONTENT_TYPE_LATEST)
