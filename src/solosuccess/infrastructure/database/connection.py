from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Any
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine, AsyncEngine

from solosuccess.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """
    Manages async database connections with configurable pool settings.

    Usage:
        db = DatabaseManager()
        await db.connect(url="postgresql+asyncpg://...", pool_size=5)
        async with db.session() as session:
            ...
        await db.disconnect()
    """

    def __init__(self):
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._pool_size: int = 5
        self._max_overflow: int = 10

    async def connect(
        self,
        url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        echo_sql: bool = False,
    ) -> None:
        """
        Connect to the database.

        SQLite URLs (used in tests and local development) skip the pool
        arguments, which the SQLite dialect does not accept.

        Raises:
            RuntimeError: If already connected
        """
        if self._engine is not None:
            raise RuntimeError("Database already connected")

        self._pool_size = pool_size
        self._max_overflow = max_overflow

        engine_kwargs: Dict[str, Any] = {"echo": echo_sql, "pool_pre_ping": pool_pre_ping}
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
            )

        self._engine = create_async_engine(url, **engine_kwargs)
        self.bind(self._engine)

        logger.info(
            "Database connected",
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
        )

    def bind(self, engine: AsyncEngine) -> None:
        """Use an existing engine (tests share one engine with the app)."""
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def disconnect(self) -> None:
        """Dispose of the engine. Safe to call multiple times."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database disconnected")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session with automatic commit/rollback.

        Raises:
            RuntimeError: If database not connected
        """
        if not self._session_factory:
            raise RuntimeError("Database not connected. Call connect() first.")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    def get_pool_stats(self) -> Dict[str, Any]:
        """Connection pool statistics for the readiness probe."""
        if not self._engine:
            raise RuntimeError("Database not connected")

        pool = self._engine.pool
        return {
            "pool_size": self._pool_size,
            "max_overflow": self._max_overflow,
            "checked_out": pool.checkedout() if hasattr(pool, "checkedout") else None,
            "overflow": pool.overflow() if hasattr(pool, "overflow") else None,
        }

    async def health_check(self) -> bool:
        if not self._engine:
            return False

        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False

    @property
    def is_connected(self) -> bool:
        return self._engine is not None


# Global instance
db = DatabaseManager()
