# tests/factories/fixtures.py
"""
Factory fixtures for pytest integration.

This module provides fixtures that make it easy to use factories in tests.
It's automatically loaded via pytest_plugins in conftest.py.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from solosuccess.infrastructure.database.models import Competitor, User
from tests.factories.models import CompetitorFactory


@pytest.fixture
async def factory_session(db_session: AsyncSession):
    """
    Direct access to database session for factory usage.

    Usage:
        async def test_create_goal(factory_session, user):
            goal = await GoalFactory.create_async(
                session=factory_session,
                user_id=user.id,
            )
    """
    return db_session


@pytest.fixture
async def competitor(factory_session: AsyncSession, user: User) -> Competitor:
    """A monitored competitor owned by `user`."""
    return await CompetitorFactory.create_async(
        session=factory_session,
        user_id=user.id,
        name="Acme Analytics",
        domain="acme.example.com",
        threat_level="high",
    )
