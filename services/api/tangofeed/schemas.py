"""
Typed records exchanged between the stores, the ranking core and the API.

Store rows are converted into these models immediately after each query so
the scorer and the diversity limiter only ever see a closed, validated shape.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ──────────────────────────── Enums ───────────────────────────────────────

class Visibility(str, Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class VisibilityFilter(str, Enum):
    """Which items a candidate query may return."""
    CONNECTED = "connected"        # public, or friends-only by a connected author
    PUBLIC_ONLY = "public_only"
    AUTHORED_BY = "authored_by"    # any non-private item by a connected author


class CounterSource(str, Enum):
    """How engagement counters are obtained for a candidate query."""
    JOINED = "joined"    # counted from reactions / comments / shares at read time
    STORED = "stored"    # pre-aggregated columns on the post row


class FeedVariant(str, Enum):
    PERSONALIZED = "personalized"
    FOLLOWING = "following"
    DISCOVER = "discover"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ──────────────────────────── Items ───────────────────────────────────────

class AuthorSummary(BaseModel):
    id: int
    name: Optional[str] = None
    username: Optional[str] = None
    profile_image: Optional[str] = None

    class Config:
        frozen = True
        from_attributes = True


class CandidateItem(BaseModel):
    """A feed-eligible post with its engagement counters attached."""
    id: int
    author_id: int
    author: Optional[AuthorSummary] = None
    content: str = ""
    visibility: Visibility = Visibility.PUBLIC
    created_at: datetime
    likes: int = Field(0, ge=0)
    comments: int = Field(0, ge=0)
    shares: int = Field(0, ge=0)

    class Config:
        frozen = True

    @field_validator("likes", "comments", "shares", mode="before")
    @classmethod
    def _missing_counter_is_zero(cls, value):
        return 0 if value is None else value

    @field_validator("content", mode="before")
    @classmethod
    def _missing_content_is_empty(cls, value):
        return "" if value is None else value

    @field_validator("created_at")
    @classmethod
    def _normalise_timezone(cls, value: datetime) -> datetime:
        return _as_utc(value)


# ──────────────────────────── Signals ─────────────────────────────────────

@dataclass(frozen=True)
class ConnectedIds:
    """
    Ids the requesting user is connected to.

    Friendship and follow membership are kept apart because they carry
    different proximity weight; an id present in both counts as a friend.
    """
    friends: frozenset = frozenset()
    following: frozenset = frozenset()

    @property
    def all(self) -> frozenset:
        return self.friends | self.following

    @property
    def is_empty(self) -> bool:
        return not self.friends and not self.following

    def is_friend(self, user_id: int) -> bool:
        return user_id in self.friends

    def is_followed(self, user_id: int) -> bool:
        return user_id in self.following

    def __contains__(self, user_id: object) -> bool:
        return user_id in self.friends or user_id in self.following


class InteractionRecord(BaseModel):
    user_id: int
    item_id: int
    # Author of the item interacted with, joined in by the interaction store
    item_author_id: int
    interaction_type: str
    created_at: datetime

    class Config:
        frozen = True

    @field_validator("created_at")
    @classmethod
    def _normalise_timezone(cls, value: datetime) -> datetime:
        return _as_utc(value)


@dataclass(frozen=True)
class ScoredItem:
    item: CandidateItem
    score: float


# ──────────────────────────── Outputs ─────────────────────────────────────

class FeedPage(BaseModel):
    """One page of a feed plus the cursor for the next one."""
    items: list[CandidateItem]
    next_offset: Optional[int] = Field(None, alias="nextOffset")
    has_more: bool = Field(False, alias="hasMore")

    class Config:
        populate_by_name = True


class ActiveUser(BaseModel):
    id: int
    name: Optional[str] = None
    username: Optional[str] = None
    profile_image: Optional[str] = None
    last_activity_at: datetime = Field(..., alias="lastActivityAt")

    class Config:
        populate_by_name = True

    @field_validator("last_activity_at")
    @classmethod
    def _normalise_timezone(cls, value: datetime) -> datetime:
        return _as_utc(value)
