"""
Tests for the update scheduler: single-flight triggers, error propagation and
start/stop lifecycle.
"""

import asyncio

import pytest

from trend_search import scheduler as scheduler_module
from trend_search.scheduler import UpdateScheduler
from tests.fixtures import NOW


class RecordingUpdate:
    """Update function that counts calls and can be blocked on an event."""

    def __init__(self, block: bool = False, error: Exception = None):
        self.calls = 0
        self.error = error
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        if not block:
            self.release.set()

    async def __call__(self) -> None:
        self.calls += 1
        self.started.set()
        await self.release.wait()
        if self.error is not None:
            raise self.error


@pytest.mark.asyncio
async def test_trigger_now_runs_update():
    update = RecordingUpdate()
    scheduler = UpdateScheduler(update, interval_seconds=60)

    result = await scheduler.trigger_now()

    assert result.started is True
    assert update.calls == 1
    status = scheduler.get_status()
    assert status.last_update_at is not None
    assert status.is_running is False
    assert status.is_scheduled is False
    assert status.next_update_at is None


@pytest.mark.asyncio
async def test_concurrent_trigger_is_rejected(monkeypatch):
    completions = []

    def fake_now():
        completions.append(NOW)
        return NOW

    monkeypatch.setattr(scheduler_module, "utc_now", fake_now)

    update = RecordingUpdate(block=True)
    scheduler = UpdateScheduler(update, interval_seconds=60)

    first = asyncio.create_task(scheduler.trigger_now())
    await update.started.wait()

    assert scheduler.is_running is True
    second = await scheduler.trigger_now()
    assert second.started is False
    assert scheduler.get_status().last_update_at is None

    update.release.set()
    assert (await first).started is True
    assert update.calls == 1
    assert scheduler.is_running is False

    # Stamped once, by the run that completed
    assert completions == [NOW]
    assert scheduler.get_status().last_update_at == NOW


@pytest.mark.asyncio
async def test_last_update_advances_per_run():
    update = RecordingUpdate()
    scheduler = UpdateScheduler(update, interval_seconds=60)

    await scheduler.trigger_now()
    first = scheduler.get_status().last_update_at
    await scheduler.trigger_now()
    second = scheduler.get_status().last_update_at

    assert update.calls == 2
    assert second >= first


@pytest.mark.asyncio
async def test_update_error_propagates_and_releases_guard():
    update = RecordingUpdate(error=RuntimeError("collect failed"))
    scheduler = UpdateScheduler(update, interval_seconds=60)

    with pytest.raises(RuntimeError, match="collect failed"):
        await scheduler.trigger_now()

    assert scheduler.is_running is False
    assert scheduler.get_status().last_update_at is None

    update.error = None
    assert (await scheduler.trigger_now()).started is True


@pytest.mark.asyncio
async def test_scheduled_tick_swallows_errors():
    update = RecordingUpdate(error=RuntimeError("network down"))
    scheduler = UpdateScheduler(update, interval_seconds=60)

    await scheduler._scheduled_tick()

    assert update.calls == 1
    assert scheduler.is_running is False


@pytest.mark.asyncio
async def test_start_and_stop_are_idempotent():
    scheduler = UpdateScheduler(RecordingUpdate(), interval_seconds=60)

    scheduler.start()
    scheduler.start()
    status = scheduler.get_status()
    assert status.is_scheduled is True
    assert status.next_update_at is not None
    assert status.interval_ms == 60_000

    scheduler.stop()
    scheduler.stop()
    status = scheduler.get_status()
    assert status.is_scheduled is False
    assert status.next_update_at is None


@pytest.mark.asyncio
async def test_stop_without_start():
    scheduler = UpdateScheduler(RecordingUpdate(), interval_seconds=60)
    scheduler.stop()
    assert scheduler.is_scheduled is False


@pytest.mark.asyncio
async def test_trigger_while_scheduled_sets_next_update():
    scheduler = UpdateScheduler(RecordingUpdate(), interval_seconds=60)
    scheduler.start()
    try:
        await scheduler.trigger_now()
        status = scheduler.get_status()
        assert status.next_update_at > status.last_update_at
    finally:
        scheduler.stop()
