"""
Base classes for data collectors.

This module defines the abstract interface that all data collectors must
implement. The orchestrator depends only on this contract, never on a
concrete source.
"""

import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from trend_search.types import CollectionResult, SourceType, TrendItem
from trend_search.utils import utc_now


class Collector(ABC):
    """
    Abstract base class for data collectors.

    Subclasses set ``name`` and ``source`` and implement ``collect`` and
    ``health_check``. ``collect`` is expected to report its own I/O failures
    as a result with ``success=False`` rather than raise; an exception that
    does escape is isolated by the orchestrator.
    """

    #: Human-readable name, unique per registered collector
    name: str
    #: Source type this collector produces
    source: SourceType

    @abstractmethod
    async def collect(self) -> CollectionResult:
        """
        Collect items from the source.

        Returns:
            Outcome of the run, including the collected items
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check that the collector is configured and its source is reachable.

        Returns:
            True if healthy
        """
        pass

    def _result(
        self,
        started: float,
        items: Optional[List[TrendItem]] = None,
        success: bool = True,
        error: Optional[str] = None,
        collected_at: Optional[datetime] = None,
    ) -> CollectionResult:
        """Build a CollectionResult timed from ``started`` (a ``time.monotonic()`` value)."""
        return CollectionResult(
            source=self.source,
            items=items or [],
            collected_at=collected_at or utc_now(),
            success=success,
            error=error,
            duration=time.monotonic() - started,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} ({self.name})>"


class CollectionError(Exception):
    """Exception raised when data collection fails."""

    pass
