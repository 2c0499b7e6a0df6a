from __future__ import annotations

import pytest
from sqlalchemy import text

import tourney.db.models  # noqa: F401
from tourney.core.integration_db_safety import assert_safe_integration_db
from tourney.db.models.base import Base
from tourney.db.session import engine

TRUNCATE_TABLES = (
    "outbox_events",
    "admin_stats",
    "tournament_registrations",
    "tournaments",
    "users",
)

TRUNCATE_SQL = f"TRUNCATE TABLE {', '.join(TRUNCATE_TABLES)} RESTART IDENTITY CASCADE"

_schema_ready = False


@pytest.fixture(scope="session", autouse=True)
def guard_integration_db_target() -> None:
    assert_safe_integration_db(str(engine.url))


@pytest.fixture(autouse=True)
async def cleanup_db() -> None:
    global _schema_ready

    # Dispose pooled connections between tests to avoid cross-event-loop asyncpg reuse.
    await engine.dispose()

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - environment-dependent
        pytest.skip(f"Postgres is required for integration tests: {exc}")

    async with engine.begin() as conn:
        if not _schema_ready:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
            _schema_ready = True
        await conn.execute(text(TRUNCATE_SQL))

    yield

    await engine.dispose()
