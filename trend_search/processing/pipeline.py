"""
Aggregation pipeline.

This module turns a batch of raw collected items into ranked, summarized and
categorized trends: deduplicate, group and rank, then build one
AggregatedTrend per topic group.
"""

import logging
import time
from datetime import datetime
from typing import List, Optional

from trend_search.categories import detect_category
from trend_search.observability.metrics import record_trend_created
from trend_search.processing.deduplicate import (
    DEFAULT_TITLE_THRESHOLD,
    deduplicate_items,
)
from trend_search.processing.rank import rank_items
from trend_search.processing.summarize import MAX_SUMMARY_LENGTH, summarize
from trend_search.types import AggregatedTrend, TrendItem
from trend_search.utils import as_utc, generate_id, utc_now

logger = logging.getLogger(__name__)


class TrendAggregator:
    """
    Aggregates raw items into trends.

    Stages run in sequence:
    1. Deduplication (URL and title similarity)
    2. Grouping and ranking
    3. Summarization and categorization per group
    """

    def __init__(
        self,
        title_threshold: float = DEFAULT_TITLE_THRESHOLD,
        max_summary_length: int = MAX_SUMMARY_LENGTH,
    ):
        """
        Initialize the aggregator.

        Args:
            title_threshold: Title similarity above which items are duplicates
            max_summary_length: Summary truncation length
        """
        self.title_threshold = title_threshold
        self.max_summary_length = max_summary_length

    def aggregate(
        self, items: List[TrendItem], now: Optional[datetime] = None
    ) -> List[AggregatedTrend]:
        """
        Aggregate raw items into ranked trends.

        Args:
            items: Raw items from all collectors
            now: Reference time for recency scoring and ``last_updated``
                (default: current time)

        Returns:
            Trends ordered by score descending
        """
        if not items:
            return []

        start_time = time.time()
        now = as_utc(now) if now else utc_now()

        unique_items = deduplicate_items(items, threshold=self.title_threshold)
        groups = rank_items(unique_items, now=now)

        trends: List[AggregatedTrend] = []
        for group in groups:
            category = detect_category(group.topic, group.items)
            trends.append(
                AggregatedTrend(
                    id=generate_id(),
                    topic=group.topic,
                    summary=summarize(
                        group.topic, group.items, max_length=self.max_summary_length
                    ),
                    sources=group.items,
                    score=group.score,
                    category=category,
                    last_updated=now,
                )
            )
            record_trend_created(category)

        logger.info(
            f"Aggregated {len(items)} items -> {len(unique_items)} unique -> "
            f"{len(trends)} trends in {time.time() - start_time:.3f}s"
        )

        return trends
