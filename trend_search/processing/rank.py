"""
Ranking module for the aggregation pipeline.

This module groups deduplicated items into topic clusters with a greedy
first-fit pass and scores each cluster by source diversity, volume, recency
and social (tweet volume) signal.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from trend_search.processing.deduplicate import tokenize
from trend_search.types import TrendItem
from trend_search.utils import as_utc, utc_now

logger = logging.getLogger(__name__)

RELATED_OVERLAP_RATIO = 0.5

SOURCE_WEIGHT = 10
ITEM_WEIGHT = 3
RECENCY_BONUS = 5
RECENCY_WINDOW = timedelta(hours=1)
VOLUME_WEIGHT = 2

TWEET_VOLUME_KEYS = ("tweet_volume", "tweetVolume")


@dataclass
class RankedGroup:
    """A topic cluster: the founding title, its members and their score."""

    topic: str
    items: List[TrendItem] = field(default_factory=list)
    score: float = 0.0


def is_related(title: str, topic: str) -> bool:
    """
    Check whether a title belongs to a topic.

    Related means at least half of the smaller token set is shared.

    Args:
        title: Candidate item title
        topic: Topic (founding title) of a group

    Returns:
        True if related
    """
    title_tokens = tokenize(title)
    topic_tokens = tokenize(topic)

    if not title_tokens or not topic_tokens:
        return False

    overlap = len(title_tokens & topic_tokens)
    smaller = min(len(title_tokens), len(topic_tokens))
    return overlap / smaller >= RELATED_OVERLAP_RATIO


def group_by_topic(items: List[TrendItem]) -> List[RankedGroup]:
    """
    Group items into topics with a single greedy first-fit pass.

    Each item joins the first existing group (in creation order) whose topic
    is related to its title, otherwise it founds a new group. The result
    depends on input order; this is an accepted property of the heuristic.

    Args:
        items: Deduplicated items

    Returns:
        Groups in creation order (unscored)
    """
    groups: List[RankedGroup] = []

    for item in items:
        for group in groups:
            if is_related(item.title, group.topic):
                group.items.append(item)
                break
        else:
            groups.append(RankedGroup(topic=item.title, items=[item]))

    return groups


def _tweet_volume(item: TrendItem) -> Optional[float]:
    for key in TWEET_VOLUME_KEYS:
        volume = item.metadata.get(key)
        if isinstance(volume, bool) or not isinstance(volume, (int, float)):
            continue
        if volume > 0:
            return float(volume)
    return None


def calculate_score(items: List[TrendItem], now: Optional[datetime] = None) -> float:
    """
    Score a topic cluster.

    score = 10 * distinct sources + 3 * items + 5 * items published within
    the last hour + sum(log10(tweet volume) * 2), rounded to 2 decimals.

    Args:
        items: Members of the cluster
        now: Reference time for the recency bonus (default: current time)

    Returns:
        Cluster score
    """
    now = as_utc(now) if now else utc_now()
    recent_cutoff = now - RECENCY_WINDOW

    score = float(len({item.source for item in items}) * SOURCE_WEIGHT)
    score += len(items) * ITEM_WEIGHT

    for item in items:
        if as_utc(item.published_at) > recent_cutoff:
            score += RECENCY_BONUS

    for item in items:
        volume = _tweet_volume(item)
        if volume is not None:
            score += math.log10(volume) * VOLUME_WEIGHT

    return round(score, 2)


def rank_items(
    items: List[TrendItem], now: Optional[datetime] = None
) -> List[RankedGroup]:
    """
    Group items by topic and rank the groups.

    Args:
        items: Deduplicated items
        now: Reference time for the recency bonus (default: current time)

    Returns:
        Groups sorted by score descending; equal scores keep creation order
    """
    groups = group_by_topic(items)

    for group in groups:
        group.score = calculate_score(group.items, now=now)

    # list.sort is stable, so ties keep group-creation order
    groups.sort(key=lambda g: g.score, reverse=True)

    logger.debug(f"Ranked {len(items)} items into {len(groups)} topic groups")

    return groups
