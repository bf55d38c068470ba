"""
Social graph reads: accepted friendships and follows.

Friendships are stored as a single row per pair, so a user's friends are
found on either side of the edge.
"""
from sqlalchemy import select, union

from tangofeed.models import Follow, Friendship
from tangofeed.stores.sql_base import SqlStore

ACCEPTED = "accepted"


class SqlGraphStore(SqlStore):
    source = "graph_store"

    async def friend_ids(self, user_id: int) -> list[int]:
        stmt = union(
            select(Friendship.friend_id).where(
                Friendship.user_id == user_id,
                Friendship.status == ACCEPTED,
            ),
            select(Friendship.user_id).where(
                Friendship.friend_id == user_id,
                Friendship.status == ACCEPTED,
            ),
        )
        async with self._read() as session:
            rows = await session.execute(stmt)
            return [r[0] for r in rows.all()]

    async def following_ids(self, user_id: int) -> list[int]:
        async with self._read() as session:
            rows = await session.execute(
                select(Follow.following_id).where(Follow.follower_id == user_id)
            )
            return [r[0] for r in rows.all()]
