"""
Shared plumbing for the SQLAlchemy-backed stores.

Every read runs in its own session taken from the session factory, and any
driver, connection or row-validation failure is re-raised as
DataUnavailable tagged with the store's name.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tangofeed.errors import DataUnavailable

logger = logging.getLogger(__name__)


class SqlStore:
    source = "store"

    def __init__(self, sessions: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = sessions

    @asynccontextmanager
    async def _read(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._sessions() as session:
                yield session
        except (SQLAlchemyError, OSError, ValidationError) as exc:
            logger.warning("%s read failed: %s", self.source, exc)
            raise DataUnavailable(self.source, str(exc)) from exc
