"""Database connection and session management."""
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config.settings import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)

settings = get_settings()


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement for every SQLite connection.

    SQLite ignores ON DELETE rules and RESTRICT guards unless the pragma is set
    per connection.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine_for(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, applying SQLite connection setup when needed."""
    if _is_sqlite(url):
        new_engine = create_async_engine(url, echo=echo, future=True)
        enable_sqlite_foreign_keys(new_engine)
        return new_engine

    return create_async_engine(
        url,
        echo=echo,
        future=True,
        pool_size=10,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=300,
        pool_pre_ping=True,
    )


engine = create_engine_for(settings.database_url, echo=settings.database_echo)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


async def get_db() -> AsyncSession:
    """
    Dependency that provides a request-scoped database session.

    Commits once the request handler returns, rolls back on any exception.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """Create tables for all registered models."""
    # Registers every model on Base.metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_initialized", sqlite=_is_sqlite(settings.database_url))


async def close_engine():
    """Dispose the primary engine."""
    await engine.dispose()
