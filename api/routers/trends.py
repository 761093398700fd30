"""
Trend endpoints for reading the current trend set.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_scheduler, get_store
from api.schemas.common import ErrorResponse
from api.schemas.trends import TrendListResponse
from trend_search.scheduler import UpdateScheduler
from trend_search.storage.interfaces import TrendCache
from trend_search.types import AggregatedTrend, SourceType

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/trends", tags=["Trends"])


@router.get(
    "",
    response_model=TrendListResponse,
    status_code=status.HTTP_200_OK,
    summary="List current trends",
    description="Get the current trend set in rank order, optionally filtered by category or source.",
)
async def list_trends(
    category: Optional[str] = Query(None, description="Filter by category"),
    source: Optional[SourceType] = Query(
        None, description="Keep trends with at least one item from this source"
    ),
    limit: Optional[int] = Query(None, ge=1, le=100, description="Maximum number of trends"),
    store: TrendCache = Depends(get_store),
    scheduler: UpdateScheduler = Depends(get_scheduler),
) -> TrendListResponse:
    """
    List trends.

    Args:
        category: Category name (technology, business, ..., general)
        source: Source type of any constituent item
        limit: Maximum number of trends to return (1-100)

    Returns:
        TrendListResponse with trends, their count and the last update time
    """
    trends = store.get_aggregated()

    if category:
        wanted = category.lower()
        trends = [t for t in trends if t.category == wanted]

    if source:
        trends = [t for t in trends if any(item.source == source for item in t.sources)]

    if limit is not None:
        trends = trends[:limit]

    return TrendListResponse(
        trends=trends,
        count=len(trends),
        last_update=scheduler.get_status().last_update_at,
    )


@router.get(
    "/{trend_id}",
    response_model=AggregatedTrend,
    status_code=status.HTTP_200_OK,
    responses={404: {"model": ErrorResponse}},
    summary="Get trend by ID",
)
async def get_trend(
    trend_id: str,
    store: TrendCache = Depends(get_store),
) -> AggregatedTrend:
    trend = store.get_aggregated_by_id(trend_id)
    if trend is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Trend not found",
        )
    return trend
