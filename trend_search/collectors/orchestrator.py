"""
Collector orchestration.

Runs every registered collector concurrently, isolates per-collector
failures, concatenates collected items and tracks per-collector health.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from trend_search.collectors.base import CollectionError, Collector
from trend_search.observability.metrics import (
    record_collector_run,
    record_item_collected,
)
from trend_search.types import CollectAllResult, CollectionResult, CollectorStatus
from trend_search.utils import utc_now

logger = logging.getLogger(__name__)


class CollectorOrchestrator:
    """
    Fans out collection over all registered collectors.

    A collector that raises (or exceeds ``collector_timeout``) never affects
    the others: it is reported as a failed CollectionResult with no items.
    """

    def __init__(self, collector_timeout: Optional[float] = None):
        """
        Initialize the orchestrator.

        Args:
            collector_timeout: Per-collector timeout in seconds (None disables it)
        """
        self.collector_timeout = collector_timeout
        self._collectors: List[Collector] = []
        self._statuses: Dict[str, CollectorStatus] = {}

    def register(self, collector: Collector) -> None:
        """
        Register a collector.

        Args:
            collector: Collector to add; runs in registration order
        """
        self._collectors.append(collector)
        self._statuses[collector.name] = CollectorStatus(
            name=collector.name,
            source=collector.source,
        )
        logger.info(f"Registered collector: {collector.name} ({collector.source.value})")

    async def _run_collector(self, collector: Collector) -> CollectionResult:
        if self.collector_timeout is None:
            return await collector.collect()

        try:
            return await asyncio.wait_for(
                collector.collect(), timeout=self.collector_timeout
            )
        except asyncio.TimeoutError:
            raise CollectionError(
                f"Collector timed out after {self.collector_timeout}s"
            ) from None

    async def collect_all(self) -> CollectAllResult:
        """
        Run all collectors concurrently and join on every one of them.

        Returns:
            Items concatenated in registration order, plus one result per
            collector in registration order
        """
        outcomes = await asyncio.gather(
            *(self._run_collector(c) for c in self._collectors),
            return_exceptions=True,
        )

        items = []
        results: List[CollectionResult] = []

        for collector, outcome in zip(self._collectors, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    # Cancellation and interpreter exits are not collector failures
                    raise outcome

                error = str(outcome) or outcome.__class__.__name__
                now = utc_now()
                result = CollectionResult(
                    source=collector.source,
                    items=[],
                    collected_at=now,
                    success=False,
                    error=error,
                    duration=0.0,
                )
                self._statuses[collector.name] = CollectorStatus(
                    name=collector.name,
                    source=collector.source,
                    healthy=False,
                    last_run=now,
                    last_item_count=0,
                    last_error=error,
                )
                logger.error(f"Collector {collector.name} raised: {error}")
            else:
                result = outcome
                items.extend(result.items)
                self._statuses[collector.name] = CollectorStatus(
                    name=collector.name,
                    source=collector.source,
                    healthy=result.success,
                    last_run=result.collected_at,
                    last_item_count=len(result.items),
                    last_error=result.error,
                )
                if result.success:
                    logger.info(
                        f"Collector {collector.name}: {len(result.items)} items "
                        f"in {result.duration:.2f}s"
                    )
                else:
                    logger.warning(f"Collector {collector.name} failed: {result.error}")

                if result.items:
                    record_item_collected(collector.source.value, len(result.items))

            record_collector_run(collector.name, result.success, result.duration)
            results.append(result)

        return CollectAllResult(items=items, results=results)

    def get_statuses(self) -> List[CollectorStatus]:
        """Get the status of every registered collector, in registration order."""
        return list(self._statuses.values())

    def get_collector_count(self) -> int:
        return len(self._collectors)

    def get_collectors(self) -> List[Collector]:
        return list(self._collectors)

    async def check_health(self) -> Dict[str, bool]:
        """
        Run every collector's health check concurrently.

        Returns:
            Mapping of collector name to health; a raising check counts as unhealthy
        """
        outcomes = await asyncio.gather(
            *(c.health_check() for c in self._collectors),
            return_exceptions=True,
        )

        health: Dict[str, bool] = {}
        for collector, outcome in zip(self._collectors, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(f"Health check for {collector.name} raised: {outcome}")
                health[collector.name] = False
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                health[collector.name] = bool(outcome)

        return health
