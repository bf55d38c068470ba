"""
Signal fetching: social graph, interaction history and candidate pools.

Independent reads run concurrently; everything must complete before any
scoring starts. A failure in any collaborator aborts the request with
DataUnavailable. Nothing is retried and nothing is degraded to an empty
result here.
"""
import asyncio
import logging
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, TypeVar

from opentelemetry import trace

from tangofeed.errors import DataUnavailable
from tangofeed.schemas import (
    CandidateItem,
    ConnectedIds,
    CounterSource,
    InteractionRecord,
    VisibilityFilter,
)
from tangofeed.stores.base import GraphStore, InteractionStore, ItemStore

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FeedSignals:
    connected: ConnectedIds
    interactions: Sequence[InteractionRecord]
    candidates: Sequence[CandidateItem]


async def guarded(source: str, call: Awaitable[T]) -> T:
    """Await a collaborator call, converting any failure into DataUnavailable."""
    try:
        return await call
    except DataUnavailable:
        raise
    except Exception as exc:
        logger.warning("%s failed: %s", source, exc)
        raise DataUnavailable(source, str(exc) or type(exc).__name__) from exc


class SignalFetcher:
    def __init__(
        self,
        items: ItemStore,
        graph: GraphStore,
        interactions: InteractionStore,
    ) -> None:
        self._items = items
        self._graph = graph
        self._interactions = interactions

    async def connected_ids(self, user_id: int) -> ConnectedIds:
        with tracer.start_as_current_span("fetch_connected_ids") as span:
            friend_ids, following_ids = await asyncio.gather(
                guarded("graph_store", self._graph.friend_ids(user_id)),
                guarded("graph_store", self._graph.following_ids(user_id)),
            )
            connected = ConnectedIds(
                friends=frozenset(friend_ids),
                following=frozenset(following_ids),
            )
            span.set_attribute("graph.friends", len(connected.friends))
            span.set_attribute("graph.following", len(connected.following))
            return connected

    async def fetch_signals(
        self,
        user_id: int,
        since: datetime,
        interactions_since: datetime,
        limit: Optional[int] = None,
    ) -> FeedSignals:
        """Graph, interaction history and the connected-visibility candidate pool."""
        with tracer.start_as_current_span("fetch_signals") as span:
            connected, interactions = await asyncio.gather(
                self.connected_ids(user_id),
                guarded(
                    "interaction_store",
                    self._interactions.recent_interactions(user_id, interactions_since),
                ),
            )
            candidates = await guarded(
                "item_store",
                self._items.candidates_since(
                    since,
                    excluding_user_id=user_id,
                    visibility=VisibilityFilter.CONNECTED,
                    connected_ids=connected.all,
                    limit=limit,
                    counters=CounterSource.JOINED,
                ),
            )
            span.set_attribute("signals.interactions", len(interactions))
            span.set_attribute("signals.candidates", len(candidates))
            return FeedSignals(
                connected=connected,
                interactions=list(interactions),
                candidates=list(candidates),
            )

    async def following_candidates(
        self,
        connected: ConnectedIds,
        since: datetime,
    ) -> list[CandidateItem]:
        """Items authored by connected users; the author set implies permission."""
        if connected.is_empty:
            return []
        candidates = await guarded(
            "item_store",
            self._items.candidates_since(
                since,
                visibility=VisibilityFilter.AUTHORED_BY,
                connected_ids=connected.all,
                counters=CounterSource.JOINED,
            ),
        )
        return list(candidates)

    async def public_candidates(
        self,
        since: datetime,
        excluding_user_id: Optional[int] = None,
        limit: Optional[int] = None,
        counters: CounterSource = CounterSource.JOINED,
    ) -> list[CandidateItem]:
        candidates = await guarded(
            "item_store",
            self._items.candidates_since(
                since,
                excluding_user_id=excluding_user_id,
                visibility=VisibilityFilter.PUBLIC_ONLY,
                limit=limit,
                counters=counters,
            ),
        )
        return list(candidates)
