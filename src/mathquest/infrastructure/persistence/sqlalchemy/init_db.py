"""Database initialization utilities."""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from mathquest.application.services import RoleSeeder
from mathquest.domain.user import RoleName
from mathquest.infrastructure.persistence.sqlalchemy.models import Base
from mathquest.infrastructure.persistence.sqlalchemy.repositories import (
    RoleRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all database tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    Existing tables and their data are never modified or deleted.
    """
    logger.info("Ensuring all database tables exist...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database schema is up to date (missing tables created if needed)")


async def drop_tables(engine: AsyncEngine) -> None:
    """
    Drop all database tables (USE WITH CAUTION!).

    This is primarily for testing and development reset scenarios.
    """
    logger.warning("Dropping all database tables...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    logger.info("Database tables dropped successfully")


async def seed_roles(
    session_maker: async_sessionmaker[AsyncSession],
) -> list[RoleName]:
    """Insert any missing role rows in their own transaction."""
    async with session_maker() as session:
        added = await RoleSeeder(RoleRepositorySQLAlchemy(session)).seed()
        await session.commit()
    return added


async def init_database(
    engine: AsyncEngine,
    session_maker: async_sessionmaker[AsyncSession],
) -> None:
    """Create missing tables, then seed roles."""
    await create_tables(engine)
    added = await seed_roles(session_maker)
    logger.info(
        "Database initialized (roles added: %s)",
        ", ".join(role.value for role in added) or "none",
    )
