"""
Async SQLAlchemy engine + session factory for the community database.

The store implementations open one short-lived session per read so that
independent reads of a single feed request can run concurrently.
Timestamps are stored as naive UTC; query bounds go through to_db_time and
the record schemas re-attach UTC on the way out.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from tangofeed.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.database_url,
    pool_pre_ping=True,
    echo=False,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


def to_db_time(value: datetime) -> datetime:
    """Aware (or naive-UTC) datetime → naive UTC for comparisons in SQL."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


async def init_db() -> None:
    """Create all tables if they don't exist (idempotent)."""
    # Import models so they register on Base.metadata
    from tangofeed import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")


async def dispose_db() -> None:
    await engine.dispose()
