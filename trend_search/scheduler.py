"""
Scheduler for periodic trend updates.

This module wraps an update function with APScheduler interval scheduling and
a single-flight guard, so scheduled ticks and manual triggers never run the
update concurrently.
"""

import asyncio
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from trend_search.observability.metrics import record_update_run
from trend_search.types import SchedulerStatus, TriggerResult
from trend_search.utils import utc_now

logger = logging.getLogger(__name__)

UpdateFn = Callable[[], Awaitable[None]]

UPDATE_JOB_ID = "trend_update"
DEFAULT_INTERVAL_SECONDS = 3600.0


class UpdateScheduler:
    """
    Runs an update function on a fixed interval and on demand.

    At most one update runs at a time. A trigger that arrives while an update
    is in flight is rejected (``started=False``), not queued.
    """

    def __init__(
        self, update_fn: UpdateFn, interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    ):
        """
        Initialize the scheduler.

        Args:
            update_fn: Coroutine function performing one full update
            interval_seconds: Period of scheduled updates
        """
        self._update_fn = update_fn
        self.interval_seconds = interval_seconds

        self._lock = asyncio.Lock()
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._last_update_at: Optional[datetime] = None
        self._next_update_at: Optional[datetime] = None

    @property
    def is_scheduled(self) -> bool:
        return self._scheduler is not None

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def start(self) -> None:
        """
        Start periodic updates.

        Must be called from within a running event loop. Calling it again
        while already scheduled does nothing.
        """
        if self._scheduler is not None:
            return

        scheduler = AsyncIOScheduler(timezone=timezone.utc)
        scheduler.add_job(
            self._scheduled_tick,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=UPDATE_JOB_ID,
            name="Trend update",
            coalesce=True,
            replace_existing=True,
        )
        scheduler.start()

        self._scheduler = scheduler
        self._next_update_at = utc_now() + timedelta(seconds=self.interval_seconds)

        logger.info(f"Scheduler started (interval: {self.interval_seconds}s)")

    def stop(self) -> None:
        """Stop periodic updates. Safe to call when not scheduled."""
        if self._scheduler is None:
            return

        self._scheduler.remove_job(UPDATE_JOB_ID)
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        self._next_update_at = None

        logger.info("Scheduler stopped")

    async def trigger_now(self) -> TriggerResult:
        """
        Run an update immediately unless one is already running.

        Returns:
            ``started=False`` if an update was in flight, else ``started=True``
            once the update has completed

        Raises:
            Exception: Whatever the update function raised; the guard is
                released first
        """
        return await self._run("manual")

    async def _run(self, trigger: str) -> TriggerResult:
        # No await between the check and the acquire below
        if self._lock.locked():
            logger.info(f"Update already in progress, skipping {trigger} trigger")
            return TriggerResult(started=False)

        async with self._lock:
            start_time = time.monotonic()
            status = "failure"
            try:
                await self._update_fn()
                status = "success"
            finally:
                record_update_run(trigger, status, time.monotonic() - start_time)

            now = utc_now()
            self._last_update_at = now
            if self.is_scheduled:
                self._next_update_at = now + timedelta(seconds=self.interval_seconds)

        return TriggerResult(started=True)

    async def _scheduled_tick(self) -> None:
        try:
            await self._run("scheduled")
        except Exception as e:
            logger.error(f"Scheduled update failed: {e}", exc_info=True)

    def get_status(self) -> SchedulerStatus:
        """Get a snapshot of the scheduler state."""
        return SchedulerStatus(
            is_running=self.is_running,
            last_update_at=self._last_update_at,
            next_update_at=self._next_update_at,
            interval_ms=round(self.interval_seconds * 1000),
            is_scheduled=self.is_scheduled,
        )
