"""
Feed ranking service.

Three feed variants share the same signal fetcher and paginator:

  personalized │ connected-visibility pool (7d) → relevance score
               │ → stable sort → author diversity cap (3) → page
  following    │ posts by friends + follows (7d) → newest first → page
  discover     │ public pool (48h, not own) → engagement velocity
               │ → stable sort → page  (trending authors may dominate)

Plus read-only views with a fixed small N and no cursor:

  trending            public posts of the last 24h by engagement velocity,
                      using the counters stored on the post row
  recently active     members who posted or commented in the last hour
  recommended         public posts of the last 7 days by engagement
                      velocity, or by an injected SimilarityScorer

The service holds references to its collaborators and nothing else, so one
instance can serve any number of concurrent requests.
"""
import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Optional

from opentelemetry import trace

from tangofeed.config import Settings, settings as default_settings
from tangofeed.errors import DataUnavailable
from tangofeed.ranking.diversity import limit_consecutive
from tangofeed.ranking.pagination import paginate, validate_pagination
from tangofeed.ranking.scoring import (
    DISCOVER_MIN_AGE_HOURS,
    TRENDING_MIN_AGE_HOURS,
    RelevanceScorer,
    score_by_velocity,
    sort_by_score,
)
from tangofeed.ranking.signals import SignalFetcher, guarded
from tangofeed.schemas import (
    ActiveUser,
    CandidateItem,
    CounterSource,
    FeedPage,
    FeedVariant,
    ScoredItem,
)
from tangofeed.stores.base import (
    ActivityStore,
    GraphStore,
    InteractionStore,
    ItemStore,
    SimilarityScorer,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FeedAlgorithmService:
    def __init__(
        self,
        items: ItemStore,
        graph: GraphStore,
        interactions: InteractionStore,
        activity: ActivityStore,
        *,
        config: Optional[Settings] = None,
        clock: Callable[[], datetime] = _utcnow,
        scorer: Optional[RelevanceScorer] = None,
        similarity: Optional[SimilarityScorer] = None,
    ) -> None:
        self._signals = SignalFetcher(items, graph, interactions)
        self._activity = activity
        self._config = config or default_settings
        self._clock = clock
        self._scorer = scorer or RelevanceScorer()
        self._similarity = similarity

    # ── Feeds ──────────────────────────────────────────────────────────────

    async def get_feed(
        self,
        user_id: int,
        variant: FeedVariant = FeedVariant.PERSONALIZED,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> FeedPage:
        handlers = {
            FeedVariant.PERSONALIZED: self.get_personalized_feed,
            FeedVariant.FOLLOWING: self.get_following_feed,
            FeedVariant.DISCOVER: self.get_discover_feed,
        }
        return await handlers[FeedVariant(variant)](user_id, limit, offset)

    async def get_personalized_feed(
        self, user_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> FeedPage:
        limit = self._page_size(limit)
        validate_pagination(limit, offset)

        with tracer.start_as_current_span("personalized_feed") as span:
            span.set_attribute("user.id", user_id)
            now = self._clock()
            signals = await self._signals.fetch_signals(
                user_id,
                since=now - timedelta(days=self._config.personalized_window_days),
                interactions_since=now - timedelta(days=self._config.interaction_window_days),
                limit=self._config.personalized_candidate_limit,
            )

            scored = self._scorer.score_all(
                signals.candidates, signals.connected, signals.interactions, now
            )
            ranked = limit_consecutive(
                sort_by_score(scored), self._config.max_consecutive_per_author
            )
            span.set_attribute("feed.candidates", len(ranked))

            logger.debug(
                "Personalized feed for user %s: %d candidates, %d connections",
                user_id, len(ranked), len(signals.connected.all),
            )
            return paginate([s.item for s in ranked], limit, offset)

    async def get_following_feed(
        self, user_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> FeedPage:
        limit = self._page_size(limit)
        validate_pagination(limit, offset)

        with tracer.start_as_current_span("following_feed") as span:
            span.set_attribute("user.id", user_id)
            now = self._clock()
            connected = await self._signals.connected_ids(user_id)
            if connected.is_empty:
                return FeedPage(items=[], next_offset=None, has_more=False)

            candidates = await self._signals.following_candidates(
                connected,
                since=now - timedelta(days=self._config.following_window_days),
            )
            newest_first = sorted(candidates, key=lambda item: item.created_at, reverse=True)
            span.set_attribute("feed.candidates", len(newest_first))
            return paginate(newest_first, limit, offset)

    async def get_discover_feed(
        self, user_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> FeedPage:
        limit = self._page_size(limit)
        validate_pagination(limit, offset)

        with tracer.start_as_current_span("discover_feed") as span:
            span.set_attribute("user.id", user_id)
            now = self._clock()
            candidates = await self._signals.public_candidates(
                since=now - timedelta(hours=self._config.discover_window_hours),
                excluding_user_id=user_id,
                limit=self._config.discover_candidate_limit,
            )
            ranked = sort_by_score(
                score_by_velocity(candidates, now, DISCOVER_MIN_AGE_HOURS)
            )
            span.set_attribute("feed.candidates", len(ranked))
            return paginate([s.item for s in ranked], limit, offset)

    # ── Auxiliary views ────────────────────────────────────────────────────

    async def get_trending_posts(self, limit: Optional[int] = None) -> list[CandidateItem]:
        limit = self._config.trending_limit if limit is None else limit
        validate_pagination(limit, 0)

        with tracer.start_as_current_span("trending_posts"):
            now = self._clock()
            candidates = await self._signals.public_candidates(
                since=now - timedelta(hours=self._config.trending_window_hours),
                counters=CounterSource.STORED,
            )
            ranked = sort_by_score(
                score_by_velocity(candidates, now, TRENDING_MIN_AGE_HOURS)
            )
            return [s.item for s in ranked[:limit]]

    async def get_recently_active_users(
        self, limit: Optional[int] = None
    ) -> list[ActiveUser]:
        limit = self._config.active_users_limit if limit is None else limit
        validate_pagination(limit, 0)

        with tracer.start_as_current_span("recently_active_users"):
            since = self._clock() - timedelta(
                minutes=self._config.active_users_window_minutes
            )
            posters, commenters = await asyncio.gather(
                guarded("activity_store", self._activity.recent_posters(since)),
                guarded("activity_store", self._activity.recent_commenters(since)),
            )

            latest: dict[int, ActiveUser] = {}
            for activity in [*posters, *commenters]:
                known = latest.get(activity.id)
                if known is None or activity.last_activity_at > known.last_activity_at:
                    latest[activity.id] = activity

            ordered = sorted(
                latest.values(), key=lambda a: a.last_activity_at, reverse=True
            )
            return ordered[:limit]

    async def get_recommended_posts(
        self, user_id: int, limit: Optional[int] = None
    ) -> list[CandidateItem]:
        limit = self._config.recommended_limit if limit is None else limit
        validate_pagination(limit, 0)

        with tracer.start_as_current_span("recommended_posts") as span:
            now = self._clock()
            candidates = await self._signals.public_candidates(
                since=now - timedelta(days=self._config.recommended_window_days),
                excluding_user_id=user_id,
                limit=self._config.recommended_candidate_limit,
            )

            if self._similarity is not None and candidates:
                span.set_attribute("recommend.strategy", "similarity")
                scores = await guarded(
                    "similarity_scorer",
                    self._similarity.similarity(user_id, candidates),
                )
                if len(scores) != len(candidates):
                    raise DataUnavailable(
                        "similarity_scorer",
                        f"expected {len(candidates)} scores, got {len(scores)}",
                    )
                scored = [
                    ScoredItem(item=item, score=float(score))
                    for item, score in zip(candidates, scores)
                ]
            else:
                span.set_attribute("recommend.strategy", "engagement")
                scored = score_by_velocity(candidates, now, DISCOVER_MIN_AGE_HOURS)

            return [s.item for s in sort_by_score(scored)[:limit]]

    def _page_size(self, limit: Optional[int]) -> int:
        return self._config.feed_page_size if limit is None else limit
