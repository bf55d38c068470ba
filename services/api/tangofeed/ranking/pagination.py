"""Offset pagination over a fully ranked list."""
from collections.abc import Sequence

from tangofeed.errors import InvalidPagination
from tangofeed.schemas import CandidateItem, FeedPage


def validate_pagination(limit: int, offset: int) -> None:
    if limit < 0 or offset < 0:
        raise InvalidPagination(limit, offset)


def paginate(items: Sequence[CandidateItem], limit: int, offset: int) -> FeedPage:
    """
    Slice items[offset:offset + limit].

    `next_offset` is the offset of the following page, or None once the
    list is exhausted. An offset past the end is an empty last page.
    """
    validate_pagination(limit, offset)
    end = offset + limit
    has_more = end < len(items)
    return FeedPage(
        items=list(items[offset:end]),
        next_offset=end if has_more else None,
        has_more=has_more,
    )
