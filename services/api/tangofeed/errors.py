"""
Error taxonomy of the ranking core.

Only two conditions are errors. Everything else (no candidates, no
connections, no interaction history) is a valid, empty result.
"""


class FeedError(Exception):
    """Base class for errors raised by the feed ranking core."""


class DataUnavailable(FeedError):
    """A collaborator store failed or timed out; the request cannot be served."""

    def __init__(self, source: str, message: str = "") -> None:
        self.source = source
        self.message = message or "read failed"
        super().__init__(f"{source}: {self.message}")


class InvalidPagination(FeedError):
    """Negative limit or offset, rejected before any store is read."""

    def __init__(self, limit: int, offset: int) -> None:
        self.limit = limit
        self.offset = offset
        super().__init__(
            f"limit and offset must be non-negative (limit={limit}, offset={offset})"
        )
