"""
Microblog Backend: Database Session Management
==============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine (pooled for server databases), provides a
       session dependency that commits on success and rolls back on error.
Who:   Repositories receive the per-request session through the providers
       in `microblog.dependencies`.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings and are only
    passed for non-SQLite URLs. SQLite (tests, local runs) uses SQLAlchemy's
    default pool for the aiosqlite driver.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from microblog.config import settings


def build_engine(database_url: str, **overrides: Any) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Pool options are applied for server databases only; any keyword
    overrides (e.g. a StaticPool in tests) are passed straight through.
    """
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    options.update(overrides)
    return create_async_engine(database_url, **options)


# ── Engine Configuration ──────────────────────────────────────────────────
engine = build_engine(settings.database_url)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: entities returned by repositories stay readable
# after the request's commit, when the response is serialized
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata)."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the repositories used by the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises so the
           global exception handlers can respond
        5. Always: closes the session (returns connection to pool)
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
async def init_schema(bind: AsyncEngine = engine) -> None:
    """
    Create all tables registered on Base.metadata.

    Called from the application lifespan when `create_schema_on_startup`
    is enabled. Model modules are imported here so they register with
    the metadata before create_all runs.
    """
    from microblog.models import account, message  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Gracefully closes all connections in the pool (app shutdown)."""
    await engine.dispose()
