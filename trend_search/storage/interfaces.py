"""
Storage layer interface contracts.

Protocol classes for the cache the API layer reads from, so the transport
depends on behaviour rather than on the in-memory implementation.
"""

from typing import List, Optional, Protocol, runtime_checkable

from trend_search.types import AggregatedTrend, SourceType, TrendItem


@runtime_checkable
class TrendCache(Protocol):
    """Interface for the trend cache read by the API and written by updates."""

    def add_items(self, items: List[TrendItem]) -> None:
        ...

    def get_all(self) -> List[TrendItem]:
        ...

    def get_by_source(self, source: SourceType) -> List[TrendItem]:
        ...

    def set_aggregated(self, trends: List[AggregatedTrend]) -> None:
        """
        Replace the current trend set.

        Args:
            trends: Trends in rank order
        """
        ...

    def get_aggregated(self) -> List[AggregatedTrend]:
        """
        Get live trends.

        Returns:
            Trends in rank order, expired ones excluded
        """
        ...

    def get_aggregated_by_id(self, trend_id: str) -> Optional[AggregatedTrend]:
        ...

    @property
    def item_count(self) -> int:
        ...

    @property
    def aggregated_count(self) -> int:
        ...

    def clear(self) -> None:
        ...
