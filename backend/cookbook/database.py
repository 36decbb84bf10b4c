"""
Cookbook Services — Database Session Management
=================================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       per-request session dependency.
How:   One engine (and pool) per process, created at import from the
       Database config section; every request gets its own AsyncSession.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from configuration.
    pool_recycle=3600 recycles connections hourly.
    SQLite URLs (used by tests and tooling) skip the pool arguments.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from cookbook.config import DatabaseConfig, get_settings

logger = logging.getLogger(__name__)


def engine_options(config: DatabaseConfig, echo: bool = False) -> Dict[str, Any]:
    """Keyword arguments for create_async_engine() derived from the config section."""
    options: Dict[str, Any] = {"echo": echo}
    if config.sqlalchemy_url.startswith("sqlite"):
        return options
    options.update(
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_pre_ping=config.pool_pre_ping,
        pool_recycle=3600,
        connect_args=config.connect_args,
    )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
_settings = get_settings()

engine = create_async_engine(
    _settings.database.sqlalchemy_url,
    **engine_options(
        _settings.database,
        echo=_settings.global_settings.log_level == "DEBUG",
    ),
)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: entities stay readable after the repository commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all ORM models; its metadata drives Alembic."""

    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Repositories commit their own writes; anything left pending when the
    request finishes is committed here, and any exception rolls the session
    back before it propagates.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Close every pooled connection. Called from the app lifespan on shutdown."""
    await engine.dispose()
    logger.info("Database engine disposed")
