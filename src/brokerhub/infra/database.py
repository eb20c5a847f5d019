"""Database engine and session management for the SQL instance store."""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from brokerhub.app.config import DatabaseConfig, get_settings
from brokerhub.core.logging_schema import LogEvent
from brokerhub.infra.models import ServiceInstanceRow  # noqa: F401  (registers table)

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


async def init_db(config: DatabaseConfig | None = None) -> AsyncEngine:
    """Create the engine, verify connectivity and create missing tables."""
    global _engine, _session_factory

    config = config or get_settings().database
    kwargs: dict = {"echo": config.echo}
    # SQLite (tests) manages its own pool
    if not config.url.startswith("sqlite"):
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_recycle=3600,
            pool_pre_ping=True,
        )

    _engine = create_async_engine(config.url, **kwargs)
    _session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    try:
        async with _engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info(
            "Database connected",
            extra={"event": LogEvent.DB_CONNECTED, "dialect": _engine.dialect.name},
        )
    except Exception as e:
        logger.error(
            "Database connection failed",
            extra={
                "event": LogEvent.DB_ERROR,
                "error_type": type(e).__name__,
                "error": str(e),
            },
        )
        raise

    return _engine


async def close_db() -> None:
    global _engine, _session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized")
    return _session_factory
