"""
Database configuration and the storage availability gate.

The engine is built once at startup. When no connection string is configured,
or the engine cannot be constructed from it, the application runs with an
``Unavailable`` storage and every read is served from mock data.
"""
from dataclasses import dataclass
from typing import Union
import logging

from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from config import Settings

logger = logging.getLogger(__name__)

# Sync driver URLs are rewritten to their asyncio counterparts
ASYNC_DRIVERS = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
    "postgresql+psycopg2://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


@dataclass(frozen=True)
class Connected:
    """A live engine handle"""
    engine: AsyncEngine


@dataclass(frozen=True)
class Unavailable:
    """No engine could be built; ``reason`` says why"""
    reason: str


Storage = Union[Connected, Unavailable]


def is_storage_available(storage: Storage) -> bool:
    """Pure check consulted before every storage operation"""
    return isinstance(storage, Connected)


def to_async_url(database_url: str) -> str:
    for prefix, replacement in ASYNC_DRIVERS.items():
        if database_url.startswith(prefix):
            return replacement + database_url[len(prefix):]
    return database_url


def build_engine(settings: Settings) -> AsyncEngine:
    url = to_async_url(settings.database_url)

    if url.startswith("sqlite"):
        # SQLite for development and tests; in-memory databases need one shared connection
        connect_args = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            return create_async_engine(
                url, echo=settings.db_echo, connect_args=connect_args, poolclass=StaticPool
            )
        return create_async_engine(url, echo=settings.db_echo, connect_args=connect_args)

    # Production configuration with bounded connection pooling
    return create_async_engine(
        url,
        echo=settings.db_echo,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,  # Handle stale connections
        pool_recycle=settings.db_pool_recycle,
    )


def configure_storage(settings: Settings) -> Storage:
    """Build the storage handle once at process start"""
    if not settings.database_url:
        logger.warning("DATABASE_URL is not set; serving mock data for reads")
        return Unavailable("DATABASE_URL is not set")

    try:
        engine = build_engine(settings)
    except (ArgumentError, ImportError, ValueError) as e:
        logger.error(f"Could not configure database engine: {e}")
        return Unavailable(str(e))

    logger.info(f"Database engine configured for {engine.url.render_as_string(hide_password=True)}")
    return Connected(engine)


async def create_db_and_tables(storage: Storage) -> None:
    if not is_storage_available(storage):
        return
    import models  # noqa: F401  registers tables with SQLModel

    async with storage.engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_storage(storage: Storage) -> None:
    if is_storage_available(storage):
        await storage.engine.dispose()

