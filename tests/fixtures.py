"""
Test fixtures and sample data.

This module provides builders for items, collection results and trends.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from trend_search.types import (
    AggregatedTrend,
    CollectionResult,
    SourceType,
    TrendItem,
)

# Fixed reference time so recency scoring is deterministic
NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# Sample Items
# ============================================================================


def create_item(
    title: str = "Sample Trending Item",
    url: Optional[str] = None,
    source: SourceType = SourceType.RSS,
    description: str = "A sample item for testing purposes.",
    published_at: Optional[datetime] = None,
    source_name: str = "Sample Source",
    metadata: Optional[Dict[str, Any]] = None,
) -> TrendItem:
    """Create a sample item; URLs default to a unique path derived from the title."""
    if url is None:
        slug = "-".join(title.lower().split()) or "item"
        url = f"https://example.com/{slug}"

    return TrendItem(
        title=title,
        description=description,
        url=url,
        source=source,
        source_name=source_name,
        published_at=published_at or NOW - timedelta(hours=3),
        collected_at=NOW,
        metadata=metadata or {},
    )


def create_unrelated_items(count: int = 5) -> List[TrendItem]:
    """Create items whose titles share no tokens with each other."""
    titles = [
        "Volcano erupts near island village",
        "Chess grandmaster wins tournament",
        "Bakery opens downtown",
        "Orchestra premieres symphony",
        "Bridge closure disrupts commuters",
        "Garden festival draws crowds",
        "Lighthouse restoration completed",
        "Marathon route announced",
    ]
    return [create_item(title=titles[i]) for i in range(count)]


# ============================================================================
# Sample Results and Trends
# ============================================================================


def create_result(
    items: Optional[List[TrendItem]] = None,
    source: SourceType = SourceType.RSS,
    success: bool = True,
    error: Optional[str] = None,
) -> CollectionResult:
    return CollectionResult(
        source=source,
        items=items or [],
        collected_at=NOW,
        success=success,
        error=error,
        duration=0.01,
    )


def create_trend(
    topic: str = "Sample Trend",
    category: str = "general",
    score: float = 10.0,
    sources: Optional[List[TrendItem]] = None,
) -> AggregatedTrend:
    return AggregatedTrend(
        topic=topic,
        summary=f"Summary of {topic}",
        sources=sources or [create_item(title=topic)],
        score=score,
        category=category,
        last_updated=NOW,
    )
