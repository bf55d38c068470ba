"""Unit tests for tangofeed.ranking.scoring (pure, no stores)."""
from datetime import timedelta

import pytest

from fakes import NOW, make_interaction, make_item
from tangofeed.ranking.scoring import (
    MAX_SCORE,
    RelevanceScorer,
    engagement_score,
    engagement_velocity,
    proximity_score,
    recency_score,
    score_by_velocity,
    sort_by_score,
)
from tangofeed.schemas import ConnectedIds, ScoredItem

FRIEND, FOLLOWED, STRANGER = 10, 20, 30
CONNECTED = ConnectedIds(friends=frozenset({FRIEND}), following=frozenset({FOLLOWED}))


@pytest.fixture
def scorer() -> RelevanceScorer:
    return RelevanceScorer()


class TestProximity:
    def test_friend_gets_full_weight(self):
        assert proximity_score(make_item(author_id=FRIEND), CONNECTED) == 40

    def test_followed_only_gets_follow_weight(self):
        assert proximity_score(make_item(author_id=FOLLOWED), CONNECTED) == 25

    def test_stranger_gets_nothing(self):
        assert proximity_score(make_item(author_id=STRANGER), CONNECTED) == 0

    def test_friendship_wins_over_follow(self):
        both = ConnectedIds(friends=frozenset({FRIEND}), following=frozenset({FRIEND}))
        assert proximity_score(make_item(author_id=FRIEND), both) == 40


class TestEngagement:
    def test_weighted_sum_over_ten(self):
        item = make_item(likes=10, comments=5, shares=2)
        assert engagement_score(item) == pytest.approx((10 + 10 + 6) / 10)

    def test_capped_at_thirty(self):
        assert engagement_score(make_item(likes=10_000)) == 30

    def test_zero_counters_are_rankable(self):
        assert engagement_score(make_item()) == 0


class TestRecency:
    def test_brand_new_item_scores_twenty(self):
        assert recency_score(make_item(created_at=NOW), NOW) == 20

    def test_half_day_old_scores_ten(self):
        assert recency_score(make_item(age_hours=12), NOW) == pytest.approx(10)

    def test_thirty_hours_old_is_floored_at_zero(self):
        assert recency_score(make_item(age_hours=30), NOW) == 0

    def test_future_timestamp_does_not_exceed_twenty(self):
        item = make_item(created_at=NOW + timedelta(hours=3))
        assert recency_score(item, NOW) == 20


class TestRelevanceScorer:
    def test_sums_all_four_terms(self, scorer):
        item = make_item(author_id=FRIEND, likes=20, comments=0, shares=0, created_at=NOW)
        history = [make_interaction(author_id=FRIEND)]
        assert scorer.score(item, CONNECTED, history, NOW) == pytest.approx(40 + 2 + 20 + 10)

    def test_interaction_bonus_only_for_same_author(self, scorer):
        item = make_item(author_id=STRANGER, age_hours=48)
        history = [make_interaction(author_id=FRIEND)]
        assert scorer.score(item, CONNECTED, history, NOW) == 0
        history.append(make_interaction(author_id=STRANGER))
        assert scorer.score(item, CONNECTED, history, NOW) == 10

    def test_same_engagement_weight_scores_equal(self, scorer):
        # 10 likes and 5 comments both weigh 10 → identical totals
        x = make_item(author_id=FRIEND, likes=10, created_at=NOW - timedelta(hours=2))
        y = make_item(author_id=FRIEND, comments=5, created_at=NOW - timedelta(hours=2))
        assert engagement_score(x) == engagement_score(y) == pytest.approx(1.0)
        assert scorer.score(x, CONNECTED, [], NOW) == scorer.score(y, CONNECTED, [], NOW)

    def test_deterministic_for_fixed_now(self, scorer):
        item = make_item(author_id=FOLLOWED, likes=7, comments=3, shares=1, age_hours=5)
        history = [make_interaction(author_id=FOLLOWED)]
        first = scorer.score(item, CONNECTED, history, NOW)
        assert all(scorer.score(item, CONNECTED, history, NOW) == first for _ in range(5))

    @pytest.mark.parametrize("author_id", [FRIEND, FOLLOWED, STRANGER])
    @pytest.mark.parametrize("age", [-5, 0, 6, 23.9, 24, 200])
    def test_score_stays_within_bounds(self, scorer, author_id, age):
        item = make_item(author_id=author_id, likes=999, comments=999, shares=999, age_hours=age)
        history = [make_interaction(author_id=author_id)]
        assert 0 <= scorer.score(item, CONNECTED, history, NOW) <= MAX_SCORE == 100
        assert 0 <= scorer.score(make_item(age_hours=age), ConnectedIds(), [], NOW) <= 100

    def test_newer_item_never_scores_lower(self, scorer):
        ages = [0, 1, 6, 12, 23, 24, 30, 100]
        scores = [
            scorer.score(make_item(author_id=FOLLOWED, likes=4, age_hours=a), CONNECTED, [], NOW)
            for a in ages
        ]
        assert scores == sorted(scores, reverse=True)

    def test_score_all_keeps_input_order(self, scorer):
        items = [make_item(author_id=STRANGER), make_item(author_id=FRIEND)]
        scored = scorer.score_all(items, CONNECTED, [], NOW)
        assert [s.item for s in scored] == items
        assert scored[1].score > scored[0].score

    def test_score_all_empty(self, scorer):
        assert scorer.score_all([], CONNECTED, [], NOW) == []


class TestEngagementVelocity:
    def test_divides_by_age_in_hours(self):
        item = make_item(likes=4, comments=3, shares=2, age_hours=4)
        assert engagement_velocity(item, NOW) == pytest.approx((4 + 6 + 6) / 4)

    def test_age_floor_guards_fresh_items(self):
        item = make_item(likes=5, created_at=NOW)
        assert engagement_velocity(item, NOW) == 5
        assert engagement_velocity(item, NOW, min_age_hours=0.1) == pytest.approx(50)

    def test_score_by_velocity_pairs_items(self):
        items = [make_item(likes=2, age_hours=2), make_item(likes=9, age_hours=3)]
        assert [s.score for s in score_by_velocity(items, NOW)] == [1, 3]


def test_sort_by_score_is_stable_for_ties():
    a, b, c = make_item(), make_item(), make_item()
    ranked = sort_by_score([ScoredItem(a, 1.0), ScoredItem(b, 2.0), ScoredItem(c, 1.0)])
    assert [s.item for s in ranked] == [b, a, c]
