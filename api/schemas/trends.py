"""
API schemas for trends, updates and system status.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from trend_search.types import AggregatedTrend, CollectorStatus


class TrendListResponse(BaseModel):
    """Current trend set."""

    trends: List[AggregatedTrend] = Field(..., description="Trends in rank order")
    count: int = Field(..., ge=0, description="Number of trends returned")
    last_update: Optional[datetime] = Field(
        None, description="Completion time of the last successful update"
    )


class UpdateResponse(BaseModel):
    """Result of a completed manual update."""

    message: str = Field(..., description="Outcome message")
    item_count: int = Field(..., ge=0, description="Cached raw items after the update")
    trend_count: int = Field(..., ge=0, description="Cached trends after the update")

    class Config:
        json_schema_extra = {
            "example": {
                "message": "Update completed",
                "item_count": 120,
                "trend_count": 45,
            }
        }


class StatusResponse(BaseModel):
    """Scheduler, cache and collector status."""

    is_running: bool
    last_update_at: Optional[datetime] = None
    next_update_at: Optional[datetime] = None
    interval_ms: int
    is_scheduled: bool
    item_count: int = Field(..., ge=0)
    trend_count: int = Field(..., ge=0)
    collectors: List[CollectorStatus] = Field(default_factory=list)
