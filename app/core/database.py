"""
Database configuration and session management
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from app.config import settings


def is_sqlite_url(url: str) -> bool:
    """Return True when the URL points at a SQLite database."""
    return make_url(url).get_backend_name() == "sqlite"


def _engine_kwargs(url: str) -> dict[str, Any]:
    """Pool settings only apply to server databases; SQLite uses its own pool."""
    if is_sqlite_url(url):
        return {}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,  # Verify connections before using
        "pool_recycle": 3600,
    }


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """
    Turn on foreign key enforcement for every new SQLite connection.

    SQLite ships with enforcement off, which would silently skip the
    ON DELETE CASCADE rules declared on the models.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, _connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str, **kwargs: Any) -> AsyncEngine:
    """Create an async engine for ``url`` with the project's connection rules."""
    async_engine = create_async_engine(url, echo=settings.DB_ECHO, **_engine_kwargs(url), **kwargs)
    if is_sqlite_url(url):
        enable_sqlite_foreign_keys(async_engine)
    return async_engine


# Create async engine
engine = build_engine(settings.DATABASE_URL)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database sessions.

    Usage in FastAPI:
        @app.get("/items")
        async def read_items(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Item))
            return result.scalars().all()
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(async_engine: AsyncEngine | None = None) -> None:
    """
    Create every table registered on SQLModel.metadata.

    Importing app.models registers all table models before create_all runs.
    """
    import app.models  # noqa: F401

    target = async_engine or engine
    async with target.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
