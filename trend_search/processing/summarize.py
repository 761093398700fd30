"""
Extractive summarization for topic clusters.

Picks the most informative description of a cluster as its summary.
"""

from typing import List

from trend_search.types import TrendItem

MAX_SUMMARY_LENGTH = 300
ELLIPSIS = "..."


def summarize(
    topic: str, items: List[TrendItem], max_length: int = MAX_SUMMARY_LENGTH
) -> str:
    """
    Generate an extractive summary for a cluster.

    Args:
        topic: Topic of the cluster
        items: Members of the cluster
        max_length: Length above which the summary is truncated

    Returns:
        The longest non-empty description (first seen on ties), truncated to
        ``max_length`` characters plus an ellipsis when longer; the topic when
        there are no items; a "N sources reporting" line when no item has a
        description
    """
    if not items:
        return topic

    descriptions = [item.description.strip() for item in items]
    descriptions = [d for d in descriptions if d]

    if not descriptions:
        return f"{topic} - {len(items)} sources reporting"

    best = descriptions[0]
    for description in descriptions[1:]:
        if len(description) > len(best):
            best = description

    if len(best) > max_length:
        return best[:max_length].rstrip() + ELLIPSIS

    return best
