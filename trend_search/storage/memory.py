"""
In-memory trend cache with TTL expiry.

Holds raw items and the latest set of aggregated trends. Nothing is
persisted; the cache is rebuilt by the next update after a restart.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from trend_search.types import AggregatedTrend, SourceType, TrendItem

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 86400.0


@dataclass
class _Entry(Generic[T]):
    data: T
    expires_at: float


class TrendStore:
    """
    TTL cache for items and aggregated trends.

    Every entry carries an absolute expiry (``clock() + ttl``) and counts as
    expired once ``clock()`` is strictly past it. Expired entries are evicted
    lazily by reads. ``set_aggregated`` swaps in a freshly built mapping, so a
    reader sees either the previous trend set or the new one, never a mix.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the store.

        Args:
            ttl_seconds: Lifetime of each entry
            clock: Monotonic time source in seconds
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._items: Dict[str, _Entry[TrendItem]] = {}
        self._aggregated: Dict[str, _Entry[AggregatedTrend]] = {}

    # ------------------------------------------------------------------
    # Raw items
    # ------------------------------------------------------------------

    def add_items(self, items: List[TrendItem]) -> None:
        """Insert or replace items by id, renewing their TTL."""
        expires_at = self._clock() + self.ttl_seconds
        for item in items:
            self._items[item.id] = _Entry(item, expires_at)

    def get_all(self) -> List[TrendItem]:
        """Get all live items."""
        self._evict_items()
        return [entry.data for entry in self._items.values()]

    def get_by_source(self, source: SourceType) -> List[TrendItem]:
        return [item for item in self.get_all() if item.source == source]

    def get_item(self, item_id: str) -> Optional[TrendItem]:
        entry = self._items.get(item_id)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._items[item_id]
            return None
        return entry.data

    @property
    def item_count(self) -> int:
        self._evict_items()
        return len(self._items)

    def _evict_items(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._items.items() if now > entry.expires_at]
        for key in expired:
            del self._items[key]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired items")

    # ------------------------------------------------------------------
    # Aggregated trends
    # ------------------------------------------------------------------

    def set_aggregated(self, trends: List[AggregatedTrend]) -> None:
        """Replace the whole trend set; order is kept as given (rank order)."""
        expires_at = self._clock() + self.ttl_seconds
        self._aggregated = {trend.id: _Entry(trend, expires_at) for trend in trends}

    def get_aggregated(self) -> List[AggregatedTrend]:
        """Get live trends in rank order, evicting expired ones."""
        now = self._clock()
        trends = []
        for key, entry in list(self._aggregated.items()):
            if now > entry.expires_at:
                del self._aggregated[key]
            else:
                trends.append(entry.data)
        return trends

    def get_aggregated_by_id(self, trend_id: str) -> Optional[AggregatedTrend]:
        entry = self._aggregated.get(trend_id)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._aggregated[trend_id]
            return None
        return entry.data

    @property
    def aggregated_count(self) -> int:
        return len(self.get_aggregated())

    def clear(self) -> None:
        """Drop all items and trends."""
        self._items.clear()
        self._aggregated.clear()
