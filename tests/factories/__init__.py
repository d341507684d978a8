# tests/factories/__init__.py
"""
Factory Boy factories for creating test data.

This package contains factories for generating model instances
for testing purposes using Factory Boy.
"""

from tests.factories.base import AsyncSQLModelFactory
from tests.factories.models import (
    TEST_PASSWORD,
    AlertFactory,
    CompetitorFactory,
    GoalFactory,
    OpportunityFactory,
    SocialMediaPostFactory,
    TaskFactory,
    UserFactory,
)

__all__ = [
    "AsyncSQLModelFactory",
    "TEST_PASSWORD",
    "AlertFactory",
    "CompetitorFactory",
    "GoalFactory",
    "OpportunityFactory",
    "SocialMediaPostFactory",
    "TaskFactory",
    "UserFactory",
]
