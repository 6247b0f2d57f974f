"""Local database for plugin state (SQLite by default)."""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

from glustervol.infra import models  # noqa: F401 - registers tables
from glustervol.logging_schema import LogEvent

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None


async def init_db(database_url: str, echo: bool = False) -> AsyncEngine:
    """Open the database and create missing tables.

    Args:
        database_url: SQLAlchemy async URL, e.g. sqlite+aiosqlite:///glustervol.db
        echo: Enable SQL query logging
    """
    global _engine

    _engine = create_async_engine(database_url, echo=echo)
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    logger.info(
        "Database initialized",
        extra={"event": LogEvent.DB_READY, "database": database_url.split("@")[-1]},
    )
    return _engine


async def close_db() -> None:
    """Close database connection."""
    global _engine
    if _engine:
        await _engine.dispose()
        _engine = None


def get_engine() -> AsyncEngine:
    """Get the current database engine."""
    if _engine is None:
        raise RuntimeError("Database not initialized")
    return _engine
