"""
Catalog Backend — Database Engine & Session Factory
=====================================================

What:  Async SQLAlchemy engine, session factory, declarative base and
       lifecycle helpers.
How:   Creates an async engine with connection pooling. Services receive the
       session factory through their constructor and open one session per
       operation (`async with factory() as session`), so the connection goes
       back to the pool on every exit path.
Who:   ProductService (sessions), health route (engine), Alembic (Base).
When:  Engine is created at module import; sessions are created per operation.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:     Persistent connections for normal load
    max_overflow=10:  Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:    Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite (tests, local experiments) picks its own pool class and rejects
    the sizing arguments, so they are only passed for server databases.
"""

from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from catalog.config import settings


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine: AsyncEngine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit, which the
# services rely on when building responses from freshly written rows
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with the shared metadata
    (used by Alembic and by `create_tables()`).
    """
    pass


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables() -> None:
    """
    What:  Creates any missing tables from the ORM metadata.
    When:  At startup when DB_AUTO_CREATE is enabled (development only).
    """
    # Models must be imported so their tables are registered on Base.metadata
    import catalog.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping_database() -> None:
    """Runs `SELECT 1`; raises whatever the driver raises if unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
