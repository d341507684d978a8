# tests/conftest.py
"""
Main pytest configuration and shared fixtures for all tests.

This module provides:
- Async test support (pytest-asyncio auto mode)
- Test environment (fast bcrypt, fixed secret key, no external services)
- A fresh in-memory SQLite database per test, bound to the app's `db`
- An httpx AsyncClient talking to the app in-process
- Authentication fixtures (a user and its bearer headers)
- A scripted chat agent standing in for the OpenAI-backed personas
"""

import os

# Settings are read from the environment on first use, so the test
# environment has to be in place before anything from solosuccess is imported.
os.environ.update(
    {
        "ENVIRONMENT": "local",
        "SECRET_KEY": "test-secret-key-for-testing-only-not-for-production",
        "BCRYPT_ROUNDS": "4",
        "LOG_LEVEL": "40",
        "RATE_LIMIT_ENABLED": "true",
        "METRICS_ENABLED": "true",
        "SOCIAL_PROCESSOR_AUTOSTART": "false",
        "CELERY_TASK_ALWAYS_EAGER": "true",
    }
)
for _name in ("DATABASE_URL", "REDIS_URL", "OPENAI_API_KEY", "EMAIL_API_KEY", "SENTRY_DSN"):
    os.environ.pop(_name, None)

from typing import Any, AsyncGenerator, AsyncIterator
from uuid import UUID

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from solosuccess.agent.openai_chat import reset_openai_client
from solosuccess.agent.registry import agent_registry
from solosuccess.api.app import create_app
from solosuccess.api.middleware.rate_limit import limiter
from solosuccess.auth.security import create_access_token
from solosuccess.config.settings import get_settings
from solosuccess.infrastructure.database import db
from solosuccess.infrastructure.database import models  # noqa: F401  registers tables
from solosuccess.infrastructure.database.models import User
from solosuccess.interfaces import AgentInput, AgentOutput, IAgent, StreamChunk
from tests.factories import UserFactory


# ============================================================================
# Pytest Configuration
# ============================================================================

pytest_plugins = ["tests.factories.fixtures"]


def pytest_configure(config):
    """Configure pytest-asyncio to use auto mode."""
    config.option.asyncio_mode = "auto"


# ============================================================================
# Settings and Configuration
# ============================================================================

@pytest.fixture(scope="session", autouse=True)
def test_settings():
    """
    Settings built from the test environment above.

    The cache is cleared so a `.env` picked up by an earlier import cannot
    leak into the run.
    """
    get_settings.cache_clear()
    settings = get_settings()
    yield settings
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Every test starts with empty rate-limit windows."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture(autouse=True)
def queued_emails(monkeypatch) -> list[UUID]:
    """
    Capture welcome emails instead of sending them to a Celery broker.

    Returns the list of user ids that would have been queued.
    """
    queued: list[UUID] = []

    def _enqueue(user_id: UUID) -> bool:
        queued.append(user_id)
        return True

    monkeypatch.setattr("solosuccess.services.onboarding.enqueue_welcome_email", _enqueue)
    return queued


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
async def test_engine():
    """
    In-memory SQLite engine with all tables, bound to the global `db`.

    StaticPool keeps the single in-memory connection alive across sessions,
    so routes, services and fixtures all see the same data.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,  # Set to True for SQL debugging
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    db.bind(engine)
    yield engine
    await db.disconnect()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session for arranging and asserting test data.

    Usage:
        async def test_something(db_session):
            db_session.add(Goal(...))
            await db_session.commit()
    """
    async with db.session() as session:
        yield session


# ============================================================================
# FastAPI Application Fixtures
# ============================================================================

@pytest.fixture
def app(test_engine) -> FastAPI:
    """
    FastAPI application instance for testing.

    The lifespan is not run; the database is already bound by `test_engine`.
    """
    return create_app()


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for testing FastAPI endpoints.

    Usage:
        async def test_endpoint(async_client):
            response = await async_client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# ============================================================================
# Authentication Fixtures
# ============================================================================

@pytest.fixture
async def user(db_session: AsyncSession) -> User:
    """A registered user with password `correct-horse-battery`."""
    return await UserFactory.create_async(session=db_session, full_name="Test Founder")


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    token, _ = create_access_token(user.id, user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second tenant, for cross-user isolation checks."""
    return await UserFactory.create_async(session=db_session)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict[str, str]:
    token, _ = create_access_token(other_user.id, other_user.email)
    return {"Authorization": f"Bearer {token}"}


# ============================================================================
# Agent Fixtures
# ============================================================================

class ScriptedAgent(IAgent):
    """Chat agent that echoes the message and records what it was given."""

    def __init__(self, name: str = "blaze", chunks: tuple[str, ...] = ("Hello", " there")):
        self._name = name
        self.chunks = chunks
        self.inputs: list[AgentInput] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return "Scripted test agent"

    async def invoke(self, input: AgentInput) -> AgentOutput:
        self.inputs.append(input)
        return AgentOutput(
            content=f"echo: {input.message}",
            metadata={
                "model": "scripted",
                "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5},
            },
        )

    async def stream(self, input: AgentInput) -> AsyncIterator[StreamChunk]:
        self.inputs.append(input)
        for chunk in self.chunks:
            yield StreamChunk(type="text", content=chunk)


@pytest.fixture
def scripted_agent() -> Any:
    """
    Replace the `blaze` persona with a scripted agent for the test.

    The real personas are registered again afterwards.
    """
    agent = ScriptedAgent()
    agent_registry.register(agent)
    yield agent
    agent_registry.register_personas()
    reset_openai_client()
