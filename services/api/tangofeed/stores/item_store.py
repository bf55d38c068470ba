"""
Candidate item reads.

Two counter representations are supported:
  joined — like / comment / share counts computed with correlated
           sub-queries against reactions, post_comments and post_shares
  stored — the denormalised like_count / comment_count / share_count
           columns kept on the post row by the write side

Either way the caller receives the same CandidateItem shape.
"""
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from sqlalchemy import and_, func, or_, select

from tangofeed.database import to_db_time
from tangofeed.models import Post, PostComment, PostShare, Reaction, User
from tangofeed.schemas import (
    AuthorSummary,
    CandidateItem,
    CounterSource,
    Visibility,
    VisibilityFilter,
)
from tangofeed.stores.sql_base import SqlStore

logger = logging.getLogger(__name__)


def _joined_counters():
    likes = (
        select(func.count(Reaction.id))
        .where(Reaction.post_id == Post.id, Reaction.type == "like")
        .correlate(Post)
        .scalar_subquery()
    )
    comments = (
        select(func.count(PostComment.id))
        .where(PostComment.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )
    shares = (
        select(func.count(PostShare.id))
        .where(PostShare.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )
    return likes.label("likes"), comments.label("comments"), shares.label("shares")


def _stored_counters():
    return (
        Post.like_count.label("likes"),
        Post.comment_count.label("comments"),
        Post.share_count.label("shares"),
    )


class SqlItemStore(SqlStore):
    source = "item_store"

    async def candidates_since(
        self,
        since: datetime,
        *,
        excluding_user_id: Optional[int] = None,
        visibility: VisibilityFilter = VisibilityFilter.PUBLIC_ONLY,
        connected_ids: Iterable[int] = (),
        limit: Optional[int] = None,
        counters: CounterSource = CounterSource.JOINED,
    ) -> list[CandidateItem]:
        connected = sorted(set(connected_ids))

        if visibility is VisibilityFilter.AUTHORED_BY and not connected:
            return []

        counter_columns = (
            _stored_counters() if counters is CounterSource.STORED else _joined_counters()
        )
        stmt = (
            select(
                Post.id,
                Post.user_id,
                Post.content,
                Post.visibility,
                Post.created_at,
                User.name,
                User.username,
                User.profile_image,
                *counter_columns,
            )
            .join(User, Post.user_id == User.id)
            .where(Post.created_at >= to_db_time(since))
        )

        if excluding_user_id is not None:
            stmt = stmt.where(Post.user_id != excluding_user_id)

        if visibility is VisibilityFilter.PUBLIC_ONLY:
            stmt = stmt.where(Post.visibility == Visibility.PUBLIC.value)
        elif visibility is VisibilityFilter.CONNECTED:
            if connected:
                stmt = stmt.where(
                    or_(
                        Post.visibility == Visibility.PUBLIC.value,
                        and_(
                            Post.visibility == Visibility.FRIENDS.value,
                            Post.user_id.in_(connected),
                        ),
                    )
                )
            else:
                stmt = stmt.where(Post.visibility == Visibility.PUBLIC.value)
        else:
            stmt = stmt.where(
                Post.user_id.in_(connected),
                Post.visibility != Visibility.PRIVATE.value,
            )

        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._read() as session:
            rows = (await session.execute(stmt)).all()
            items = [
                CandidateItem(
                    id=row.id,
                    author_id=row.user_id,
                    author=AuthorSummary(
                        id=row.user_id,
                        name=row.name,
                        username=row.username,
                        profile_image=row.profile_image,
                    ),
                    content=row.content,
                    visibility=row.visibility,
                    created_at=row.created_at,
                    likes=row.likes,
                    comments=row.comments,
                    shares=row.shares,
                )
                for row in rows
            ]

        logger.debug(
            "Fetched %d candidates since %s (visibility=%s, counters=%s)",
            len(items), since.isoformat(), visibility.value, counters.value,
        )
        return items
