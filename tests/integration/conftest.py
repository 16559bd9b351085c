"""
Pytest configuration for integration tests.

Import the shared database fixtures to make them available.
"""

from tests.shared.fixtures.database import (
    pg_engine,
    postgres_container,
    sqlite_engine,
    sqlite_session_maker,
)

__all__ = [
    "pg_engine",
    "postgres_container",
    "sqlite_engine",
    "sqlite_session_maker",
]
