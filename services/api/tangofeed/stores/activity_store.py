"""
Recent member activity reads: who posted or commented since a cutoff.

Rows are returned per activity, newest first; deduplication per member is
the ranking core's job.
"""
from datetime import datetime

from sqlalchemy import select

from tangofeed.database import to_db_time
from tangofeed.models import Post, PostComment, User
from tangofeed.schemas import ActiveUser
from tangofeed.stores.sql_base import SqlStore


class SqlActivityStore(SqlStore):
    source = "activity_store"

    async def recent_posters(self, since: datetime) -> list[ActiveUser]:
        return await self._activity(Post, since)

    async def recent_commenters(self, since: datetime) -> list[ActiveUser]:
        return await self._activity(PostComment, since)

    async def _activity(self, table, since: datetime) -> list[ActiveUser]:
        stmt = (
            select(
                User.id,
                User.name,
                User.username,
                User.profile_image,
                table.created_at.label("last_activity_at"),
            )
            .join(User, table.user_id == User.id)
            .where(table.created_at >= to_db_time(since))
            .order_by(table.created_at.desc())
        )
        async with self._read() as session:
            rows = (await session.execute(stmt)).all()
            return [
                ActiveUser(
                    id=row.id,
                    name=row.name,
                    username=row.username,
                    profile_image=row.profile_image,
                    last_activity_at=row.last_activity_at,
                )
                for row in rows
            ]
