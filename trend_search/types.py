"""
Shared type definitions for the Trend Search System.

This module contains the data models exchanged between collectors, the
aggregation pipeline, the scheduler and the cache. These types serve as the
contract between components and are what the API layer serializes.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from trend_search.utils import generate_id, utc_now


# ============================================================================
# Enums
# ============================================================================


class SourceType(str, Enum):
    """Kind of data source an item was collected from."""

    RSS = "rss"
    NEWSAPI = "newsapi"
    WEB_SCRAPING = "web-scraping"
    TWITTER = "twitter"


# ============================================================================
# Core Data Models
# ============================================================================


class TrendItem(BaseModel):
    """A single raw, source-attributed piece of content."""

    id: str = Field(default_factory=generate_id)
    title: str
    description: str = ""
    url: str
    source: SourceType
    source_name: str
    published_at: datetime = Field(default_factory=utc_now)
    collected_at: datetime = Field(default_factory=utc_now)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True


class CollectionResult(BaseModel):
    """Outcome of one collector run."""

    source: SourceType
    items: List[TrendItem] = Field(default_factory=list)
    collected_at: datetime = Field(default_factory=utc_now)
    success: bool
    error: Optional[str] = None
    duration: float = 0.0  # Seconds

    class Config:
        frozen = True


class AggregatedTrend(BaseModel):
    """A cluster of related items with derived summary, score and category."""

    id: str = Field(default_factory=generate_id)
    topic: str
    summary: str
    sources: List[TrendItem] = Field(..., min_length=1)
    score: float
    category: str
    last_updated: datetime

    class Config:
        frozen = True


class CollectorStatus(BaseModel):
    """Health of a registered collector as of its last run."""

    name: str
    source: SourceType
    healthy: bool = False
    last_run: Optional[datetime] = None
    last_item_count: int = 0
    last_error: Optional[str] = None

    class Config:
        frozen = True


# ============================================================================
# Orchestration and Scheduling Models
# ============================================================================


class CollectAllResult(BaseModel):
    """Combined output of a fan-out over all collectors."""

    items: List[TrendItem] = Field(default_factory=list)
    results: List[CollectionResult] = Field(default_factory=list)

    class Config:
        frozen = True


class TriggerResult(BaseModel):
    """Whether a trigger started a new update run."""

    started: bool

    class Config:
        frozen = True


class SchedulerStatus(BaseModel):
    """Snapshot of the update scheduler state."""

    is_running: bool
    last_update_at: Optional[datetime] = None
    next_update_at: Optional[datetime] = None
    interval_ms: int
    is_scheduled: bool

    class Config:
        frozen = True
