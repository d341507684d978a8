# tests/factories/base.py
"""
Base factory classes for Factory Boy integration.

Provides a base class that integrates Factory Boy with SQLModel and async database sessions.
"""

from typing import Any

from factory import alchemy
from sqlalchemy.ext.asyncio import AsyncSession


class AsyncSQLModelFactory(alchemy.SQLAlchemyModelFactory):
    """
    Base factory for SQLModel database models with async session support.

    Factory Boy only knows synchronous sessions, so instances are built
    with `build()` and persisted through the async session passed in.

    Usage:
        class GoalFactory(AsyncSQLModelFactory):
            class Meta:
                model = Goal

            title = factory.Sequence(lambda n: f"Goal {n}")

        # In tests:
        async def test_goal(db_session, user):
            goal = await GoalFactory.create_async(session=db_session, user_id=user.id)
            assert goal.id is not None
    """

    class Meta:
        abstract = True
        sqlalchemy_session = None
        sqlalchemy_session_persistence = "commit"

    @classmethod
    async def create_async(cls, session: AsyncSession, **kwargs: Any):
        """
        Asynchronously create a model instance and save to database.

        Args:
            session: Async database session to use
            **kwargs: Attributes to override on the model

        Returns:
            Created and committed model instance
        """
        instance = cls.build(**kwargs)
        session.add(instance)
        await session.commit()
        await session.refresh(instance)
        return instance

    @classmethod
    async def create_batch_async(
        cls,
        session: AsyncSession,
        size: int,
        **kwargs: Any
    ):
        """
        Asynchronously create multiple model instances.

        Usage:
            tasks = await TaskFactory.create_batch_async(
                session=db_session,
                size=5,
                user_id=user.id,
            )
        """
        instances = [cls.build(**kwargs) for _ in range(size)]
        session.add_all(instances)
        await session.commit()

        for instance in instances:
            await session.refresh(instance)

        return instances
