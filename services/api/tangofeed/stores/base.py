"""
Collaborator interfaces consumed by the ranking core.

The surrounding application provides these; tangofeed ships SQLAlchemy
implementations in the sibling modules. Implementations must raise
DataUnavailable on any read failure and return fully validated records.
"""
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Optional, Protocol

from tangofeed.schemas import (
    ActiveUser,
    CandidateItem,
    CounterSource,
    InteractionRecord,
    VisibilityFilter,
)


class ItemStore(Protocol):
    async def candidates_since(
        self,
        since: datetime,
        *,
        excluding_user_id: Optional[int] = None,
        visibility: VisibilityFilter = VisibilityFilter.PUBLIC_ONLY,
        connected_ids: Iterable[int] = (),
        limit: Optional[int] = None,
        counters: CounterSource = CounterSource.JOINED,
    ) -> Sequence[CandidateItem]:
        """Items created at or after `since`, newest first."""
        ...


class GraphStore(Protocol):
    async def friend_ids(self, user_id: int) -> Sequence[int]:
        """Partner ids of accepted friendships, in either direction."""
        ...

    async def following_ids(self, user_id: int) -> Sequence[int]:
        ...


class InteractionStore(Protocol):
    async def recent_interactions(
        self, user_id: int, since: datetime
    ) -> Sequence[InteractionRecord]:
        ...


class ActivityStore(Protocol):
    async def recent_posters(self, since: datetime) -> Sequence[ActiveUser]:
        """One row per post created since `since` (duplicates allowed)."""
        ...

    async def recent_commenters(self, since: datetime) -> Sequence[ActiveUser]:
        """One row per comment created since `since` (duplicates allowed)."""
        ...


class SimilarityScorer(Protocol):
    """
    Optional content-similarity ranker for recommendations.

    Returns one score per item, aligned with `items`; higher is more similar.
    An embedding-backed implementation can be injected into
    FeedAlgorithmService without changing the deterministic feeds.
    """

    async def similarity(
        self, user_id: int, items: Sequence[CandidateItem]
    ) -> Sequence[float]:
        ...
