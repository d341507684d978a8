"""
Redis connection manager.

Redis backs the rate limiter in production and is reported by the
readiness probe. The application keeps working when it is unreachable.
"""
from typing import Optional

from redis.asyncio import Redis, ConnectionPool
from redis.exceptions import RedisError

from solosuccess.config.settings import get_settings
from solosuccess.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class RedisManager:
    """Async Redis connection pool with health checks and graceful fallback."""

    def __init__(self):
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None
        self._is_available: bool = False
        self._settings = get_settings()

    async def initialize(self) -> None:
        """
        Create the connection pool and verify connectivity.

        Logs errors but doesn't raise so the service can start without Redis.
        """
        if not self._settings.redis_url:
            logger.warning("Redis URL not configured, Redis features disabled")
            self._is_available = False
            return

        try:
            self._pool = ConnectionPool.from_url(
                self._settings.redis_url.get_secret_value(),
                decode_responses=True,
                max_connections=10,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            self._client = Redis(connection_pool=self._pool)

            await self._client.ping()
            self._is_available = True
            logger.info("Redis connection established")

        except (RedisError, OSError) as e:
            logger.error("Failed to connect to Redis", error=str(e))
            self._is_available = False
            self._client = None
            self._pool = None

    async def close(self) -> None:
        if self._client:
            try:
                await self._client.aclose()
                logger.info("Redis connection closed")
            except RedisError as e:
                logger.error("Error closing Redis connection", error=str(e))

        if self._pool:
            await self._pool.aclose()

        self._client = None
        self._pool = None
        self._is_available = False

    async def health_check(self) -> bool:
        """True if Redis is configured and answers PING."""
        if not self._is_available or not self._client:
            return False

        try:
            await self._client.ping()
            return True
        except (RedisError, OSError) as e:
            logger.error("Redis health check failed", error=str(e))
            self._is_available = False
            return False

    def get_client(self) -> Optional[Redis]:
        return self._client if self._is_available else None

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.redis_url)

    @property
    def is_available(self) -> bool:
        return self._is_available


# Global Redis manager instance
_redis_manager: Optional[RedisManager] = None


async def get_redis_manager() -> RedisManager:
    """Get or create the global Redis manager instance."""
    global _redis_manager

    if _redis_manager is None:
        _redis_manager = RedisManager()
        await _redis_manager.initialize()

    return _redis_manager


async def close_redis() -> None:
    """Close the global Redis connection. Called during application shutdown."""
    global _redis_manager

    if _redis_manager:
        await _redis_manager.close()
        _redis_manager = None
