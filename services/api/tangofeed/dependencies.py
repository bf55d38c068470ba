"""
FastAPI wiring for the ranking service.

The service is stateless, so a fresh instance per request costs nothing and
keeps tests free to override it. The HTTP layer owns the request timeout
and the mapping of core errors to status codes.
"""
import asyncio
import logging
import time
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import HTTPException, status

from tangofeed.config import settings
from tangofeed.database import AsyncSessionLocal
from tangofeed.errors import DataUnavailable, InvalidPagination
from tangofeed.ranking.service import FeedAlgorithmService
from tangofeed.schemas import FeedPage
from tangofeed.stores.activity_store import SqlActivityStore
from tangofeed.stores.graph_store import SqlGraphStore
from tangofeed.stores.interaction_store import SqlInteractionStore
from tangofeed.stores.item_store import SqlItemStore
from tangofeed.telemetry import FEED_ERRORS_TOTAL, FEED_ITEMS_SERVED, FEED_LATENCY

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_feed_service() -> FeedAlgorithmService:
    """FastAPI dependency that builds the service over the SQL stores."""
    return FeedAlgorithmService(
        items=SqlItemStore(AsyncSessionLocal),
        graph=SqlGraphStore(AsyncSessionLocal),
        interactions=SqlInteractionStore(AsyncSessionLocal),
        activity=SqlActivityStore(AsyncSessionLocal),
        config=settings,
    )


async def serve(variant: str, call: Awaitable[T]) -> T:
    """
    Await a service call under the request budget and record metrics.

    InvalidPagination → 400, DataUnavailable (including a timeout) → 503.
    """
    start_time = time.time()
    try:
        result = await asyncio.wait_for(
            call, timeout=settings.feed_request_timeout_seconds
        )
    except InvalidPagination as exc:
        FEED_ERRORS_TOTAL.labels(variant=variant, reason="invalid_pagination").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except (DataUnavailable, asyncio.TimeoutError) as exc:
        if not isinstance(exc, DataUnavailable):
            exc = DataUnavailable("request", "timed out")
        FEED_ERRORS_TOTAL.labels(variant=variant, reason="data_unavailable").inc()
        logger.warning("Feed '%s' unavailable: %s", variant, exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Feed temporarily unavailable ({exc.source})",
        )
    finally:
        FEED_LATENCY.labels(variant=variant).observe(time.time() - start_time)

    served = len(result.items) if isinstance(result, FeedPage) else len(result)
    FEED_ITEMS_SERVED.labels(variant=variant).inc(served)
    logger.info("Served %s: %d items in %.1fms", variant, served, (time.time() - start_time) * 1000)
    return result
