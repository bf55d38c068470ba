"""
Member endpoints:
  GET /users/active — members who posted or commented in the last hour
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tangofeed.dependencies import get_feed_service, serve
from tangofeed.ranking.service import FeedAlgorithmService
from tangofeed.schemas import ActiveUser

router = APIRouter()


@router.get("/active", response_model=list[ActiveUser])
async def list_active_users(
    limit: Optional[int] = Query(None, description="Number of members (default 10)"),
    service: FeedAlgorithmService = Depends(get_feed_service),
):
    return await serve("active_users", service.get_recently_active_users(limit))
