"""
Database fixtures for persistence and integration tests.

Two backends are provided:

- ``sqlite_session_maker`` runs on in-memory SQLite and needs nothing
  external. Tables are created and roles seeded for every test.
- ``pg_engine`` connects to an ephemeral PostgreSQL started with
  Testcontainers. Tests using it must be marked ``integration``.

Usage:
    from tests.shared.fixtures.database import sqlite_session_maker

    async def test_something(sqlite_session_maker):
        async with sqlite_session_maker() as session:
            repo = UserRepositorySQLAlchemy(session)
            await repo.save(user)
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool
from testcontainers.postgres import PostgresContainer

from mathquest.infrastructure.persistence.sqlalchemy.database import (
    create_engine,
    create_session_maker,
)
from mathquest.infrastructure.persistence.sqlalchemy.init_db import init_database

# Use same Postgres version as production
POSTGRES_IMAGE = "postgres:16-alpine"

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def sqlite_engine():
    """In-memory SQLite engine with tables created and roles seeded."""
    engine = create_engine(SQLITE_MEMORY_URL)
    await init_database(engine, create_session_maker(engine))

    yield engine

    await engine.dispose()


@pytest.fixture
def sqlite_session_maker(sqlite_engine):
    return create_session_maker(sqlite_engine)


@pytest.fixture(scope="session")
def postgres_container():
    """
    Start a PostgreSQL container for the test session.

    The container is shared across all tests in the session for performance.
    Each test gets a clean database state via table drop/create.
    """
    with PostgresContainer(POSTGRES_IMAGE) as postgres:
        yield postgres


@pytest.fixture(scope="session")
def pg_engine(postgres_container):
    """
    Create an async SQLAlchemy engine connected to the test container.

    Session-scoped to avoid recreating the engine for each test.
    """
    connection_url = postgres_container.get_connection_url()
    # Testcontainers may return postgresql+psycopg2:// or postgresql://
    async_url = connection_url.replace(
        "postgresql+psycopg2://", "postgresql+asyncpg://"
    )
    async_url = async_url.replace("postgresql://", "postgresql+asyncpg://")

    return create_async_engine(
        async_url,
        echo=False,
        poolclass=NullPool,  # Avoid connection pool issues across event loops
    )

