"""Interaction history reads (reactions), joined with the reacted post's author."""
from datetime import datetime

from sqlalchemy import select

from tangofeed.database import to_db_time
from tangofeed.models import Post, Reaction
from tangofeed.schemas import InteractionRecord
from tangofeed.stores.sql_base import SqlStore


class SqlInteractionStore(SqlStore):
    source = "interaction_store"

    async def recent_interactions(
        self, user_id: int, since: datetime
    ) -> list[InteractionRecord]:
        stmt = (
            select(
                Reaction.user_id,
                Reaction.post_id,
                Post.user_id.label("author_id"),
                Reaction.type,
                Reaction.created_at,
            )
            .join(Post, Reaction.post_id == Post.id)
            .where(
                Reaction.user_id == user_id,
                Reaction.created_at >= to_db_time(since),
            )
            .order_by(Reaction.created_at.desc())
        )
        async with self._read() as session:
            rows = (await session.execute(stmt)).all()
            return [
                InteractionRecord(
                    user_id=row.user_id,
                    item_id=row.post_id,
                    item_author_id=row.author_id,
                    interaction_type=row.type,
                    created_at=row.created_at,
                )
                for row in rows
            ]
