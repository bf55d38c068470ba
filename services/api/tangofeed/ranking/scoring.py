"""
Deterministic relevance scoring.

Personalized relevance (0-100) is the sum of four independently capped terms:

  graph proximity   40 if the author is a friend, 25 if only followed
  engagement        (likes + 2*comments + 3*shares) / 10, capped at 30
  recency           20 - (age_hours / 24) * 20, floored at 0
  prior interaction 10 if the user reacted to this author's posts recently

Comments and shares weigh more than likes because they take more effort.
There is no normalisation and no randomness: for a fixed `now` the same
inputs always produce the same score.

Engagement velocity is the single-signal score behind discover, trending
and recommendations:

  (likes + 2*comments + 3*shares) / max(age_hours, floor)
"""
from collections.abc import Iterable, Sequence
from datetime import datetime

from tangofeed.schemas import CandidateItem, ConnectedIds, InteractionRecord, ScoredItem

FRIEND_WEIGHT = 40.0
FOLLOW_WEIGHT = 25.0

LIKE_WEIGHT = 1
COMMENT_WEIGHT = 2
SHARE_WEIGHT = 3
ENGAGEMENT_DIVISOR = 10.0
ENGAGEMENT_CAP = 30.0

RECENCY_MAX = 20.0
RECENCY_SPAN_HOURS = 24.0

INTERACTION_BONUS = 10.0

MAX_SCORE = FRIEND_WEIGHT + ENGAGEMENT_CAP + RECENCY_MAX + INTERACTION_BONUS

DISCOVER_MIN_AGE_HOURS = 1.0
TRENDING_MIN_AGE_HOURS = 0.1


def age_hours(item: CandidateItem, now: datetime) -> float:
    """Hours since the item was created; future timestamps count as 0."""
    return max((now - item.created_at).total_seconds() / 3600.0, 0.0)


def weighted_engagement(item: CandidateItem) -> int:
    return (
        item.likes * LIKE_WEIGHT
        + item.comments * COMMENT_WEIGHT
        + item.shares * SHARE_WEIGHT
    )


def proximity_score(item: CandidateItem, connected: ConnectedIds) -> float:
    if connected.is_friend(item.author_id):
        return FRIEND_WEIGHT
    if connected.is_followed(item.author_id):
        return FOLLOW_WEIGHT
    return 0.0


def engagement_score(item: CandidateItem) -> float:
    return min(weighted_engagement(item) / ENGAGEMENT_DIVISOR, ENGAGEMENT_CAP)


def recency_score(item: CandidateItem, now: datetime) -> float:
    decayed = RECENCY_MAX - (age_hours(item, now) / RECENCY_SPAN_HOURS) * RECENCY_MAX
    return max(decayed, 0.0)


def interacted_author_ids(history: Iterable[InteractionRecord]) -> frozenset:
    return frozenset(record.item_author_id for record in history)


def engagement_velocity(
    item: CandidateItem,
    now: datetime,
    min_age_hours: float = DISCOVER_MIN_AGE_HOURS,
) -> float:
    return weighted_engagement(item) / max(age_hours(item, now), min_age_hours)


class RelevanceScorer:
    """Scores candidates for the personalized feed. Holds no state."""

    def score(
        self,
        item: CandidateItem,
        connected: ConnectedIds,
        history: Iterable[InteractionRecord],
        now: datetime,
    ) -> float:
        return self._score(item, connected, interacted_author_ids(history), now)

    def score_all(
        self,
        items: Sequence[CandidateItem],
        connected: ConnectedIds,
        history: Iterable[InteractionRecord],
        now: datetime,
    ) -> list[ScoredItem]:
        """Score every item, keeping input order."""
        authors = interacted_author_ids(history)
        return [
            ScoredItem(item=item, score=self._score(item, connected, authors, now))
            for item in items
        ]

    @staticmethod
    def _score(
        item: CandidateItem,
        connected: ConnectedIds,
        interacted_authors: frozenset,
        now: datetime,
    ) -> float:
        score = proximity_score(item, connected)
        score += engagement_score(item)
        score += recency_score(item, now)
        if item.author_id in interacted_authors:
            score += INTERACTION_BONUS
        return score


def score_by_velocity(
    items: Sequence[CandidateItem],
    now: datetime,
    min_age_hours: float = DISCOVER_MIN_AGE_HOURS,
) -> list[ScoredItem]:
    return [
        ScoredItem(item=item, score=engagement_velocity(item, now, min_age_hours))
        for item in items
    ]


def sort_by_score(scored: Iterable[ScoredItem]) -> list[ScoredItem]:
    """Descending by score; ties keep their incoming order (sorted is stable)."""
    return sorted(scored, key=lambda s: s.score, reverse=True)
