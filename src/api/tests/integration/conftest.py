"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Tests are skipped
when the database cannot be reached.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import iam.infrastructure.models  # noqa: F401 - registers tables on Base.metadata
from infrastructure.database.engines import create_write_engine
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        DOCGROUPS_DB_HOST, DOCGROUPS_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("DOCGROUPS_DB_HOST", "localhost"),
        port=int(os.getenv("DOCGROUPS_DB_PORT", "5432")),
        database=os.getenv("DOCGROUPS_DB_DATABASE", "docgroups"),
        username=os.getenv("DOCGROUPS_DB_USERNAME", "docgroups"),
        password=SecretStr(
            os.getenv("DOCGROUPS_DB_PASSWORD", "docgroups_dev_password")
        ),
        pool_max_connections=12,
    )


@pytest_asyncio.fixture
async def engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Provide an engine with the IAM tables created and emptied around each test."""
    engine = create_write_engine(integration_db_settings)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            await conn.execute(text("TRUNCATE user_groups, groups, users"))
    except (OSError, SQLAlchemyError) as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL not available: {e}")

    yield engine

    async with engine.begin() as conn:
        await conn.execute(text("TRUNCATE user_groups, groups, users"))
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def async_session(
    sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async session for integration tests."""
    async with sessionmaker() as session:
        yield session


@pytest.fixture
def make_user(engine: AsyncEngine):
    """Insert an active user row and return its ID."""

    async def _make(user_id: str, username: str) -> str:
        async with engine.begin() as conn:
            await conn.execute(
                text(
                    "INSERT INTO users (id, username, state, created_at, updated_at) "
                    "VALUES (:id, :username, 'active', now(), now())"
                ),
                {"id": user_id, "username": username},
            )
        return user_id

    return _make
