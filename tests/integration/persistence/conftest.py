"""Run persistence tests on SQLite always and on PostgreSQL when enabled."""

import pytest
import pytest_asyncio

from mathquest.infrastructure.persistence.sqlalchemy.database import (
    create_engine,
    create_session_maker,
)
from mathquest.infrastructure.persistence.sqlalchemy.init_db import (
    drop_tables,
    init_database,
)
from tests.shared.fixtures.database import SQLITE_MEMORY_URL


@pytest_asyncio.fixture(
    params=["sqlite", pytest.param("postgres", marks=pytest.mark.integration)],
)
async def session_maker(request):
    """Session maker on a freshly initialized store of either backend."""
    if request.param == "postgres":
        engine = request.getfixturevalue("pg_engine")
        await drop_tables(engine)
    else:
        engine = create_engine(SQLITE_MEMORY_URL)

    maker = create_session_maker(engine)
    await init_database(engine, maker)

    yield maker

    if request.param == "postgres":
        await drop_tables(engine)
    else:
        await engine.dispose()
