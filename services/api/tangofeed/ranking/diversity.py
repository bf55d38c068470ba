"""
Author diversity: cap consecutive runs of posts by the same author.

When the next post in score order would extend an author's run past
`max_consecutive`, the first unplaced post by a different author is pulled
forward in its place. The displaced post stays at the head of the queue and
is placed as soon as the run is broken. If only the capped author's posts
remain, they are appended anyway: this stage reorders, it never drops.
"""
import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from tangofeed.schemas import ScoredItem

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _author_of(scored: ScoredItem) -> int:
    return scored.item.author_id


def limit_consecutive(
    items: Sequence[T],
    max_consecutive: int,
    author_of: Callable[[T], int] = _author_of,
) -> list[T]:
    if max_consecutive < 1:
        raise ValueError("max_consecutive must be at least 1")

    pending = list(items)
    result: list[T] = []
    run_author = None
    run_length = 0
    pulled_forward = 0

    while pending:
        pick = 0
        if author_of(pending[0]) == run_author and run_length >= max_consecutive:
            # One bounded scan per output position
            for idx in range(1, len(pending)):
                if author_of(pending[idx]) != run_author:
                    pick = idx
                    pulled_forward += 1
                    break

        chosen = pending.pop(pick)
        author = author_of(chosen)
        if author == run_author:
            run_length += 1
        else:
            run_author, run_length = author, 1
        result.append(chosen)

    if pulled_forward:
        logger.debug(
            "Diversity limiter pulled %d of %d items forward (cap=%d)",
            pulled_forward, len(result), max_consecutive,
        )
    return result
