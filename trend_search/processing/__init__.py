"""
Processing module for the aggregation pipeline.

Deduplication, topic grouping and ranking, and extractive summarization of
collected items.
"""

from trend_search.processing.deduplicate import (
    deduplicate_items,
    normalize_url,
    title_similarity,
    tokenize,
)
from trend_search.processing.pipeline import TrendAggregator
from trend_search.processing.rank import RankedGroup, calculate_score, rank_items
from trend_search.processing.summarize import summarize

__all__ = [
    "tokenize",
    "title_similarity",
    "normalize_url",
    "deduplicate_items",
    "RankedGroup",
    "calculate_score",
    "rank_items",
    "summarize",
    "TrendAggregator",
]
