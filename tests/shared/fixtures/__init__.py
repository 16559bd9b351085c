"""Shared pytest fixtures for all test suites."""

from tests.shared.fixtures.database import (
    pg_engine,
    postgres_container,
    sqlite_engine,
    sqlite_session_maker,
)
from tests.shared.fixtures.factories import TestUserFactory

__all__ = [
    "pg_engine",
    "postgres_container",
    "sqlite_engine",
    "sqlite_session_maker",
    "TestUserFactory",
]
