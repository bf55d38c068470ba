"""
Feed endpoints:
  GET /feed             — personalized | following | discover, paginated
  GET /feed/trending    — top public posts of the last 24h
  GET /feed/recommended — recommended public posts for a member

Paginated responses are FeedPage: { items, nextOffset, hasMore }.
Follow `nextOffset` until `hasMore` is false to read the whole feed.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tangofeed.dependencies import get_feed_service, serve
from tangofeed.ranking.service import FeedAlgorithmService
from tangofeed.schemas import CandidateItem, FeedPage, FeedVariant

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=FeedPage)
async def get_feed(
    user_id: int = Query(..., description="ID of the requesting member"),
    variant: FeedVariant = Query(FeedVariant.PERSONALIZED),
    limit: Optional[int] = Query(None, description="Page size (default 20)"),
    offset: int = Query(0),
    service: FeedAlgorithmService = Depends(get_feed_service),
):
    return await serve(
        variant.value, service.get_feed(user_id, variant, limit, offset)
    )


@router.get("/trending", response_model=list[CandidateItem])
async def get_trending(
    limit: Optional[int] = Query(None, description="Number of posts (default 5)"),
    service: FeedAlgorithmService = Depends(get_feed_service),
):
    return await serve("trending", service.get_trending_posts(limit))


@router.get("/recommended", response_model=list[CandidateItem])
async def get_recommended(
    user_id: int = Query(..., description="ID of the requesting member"),
    limit: Optional[int] = Query(None, description="Number of posts (default 10)"),
    service: FeedAlgorithmService = Depends(get_feed_service),
):
    return await serve("recommended", service.get_recommended_posts(user_id, limit))
