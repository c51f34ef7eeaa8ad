"""AutoSaveScheduler unit tests.

Uses short millisecond timings; the save callable is an AsyncMock.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from specflow.models import AutoSaveConfig
from specflow.services.autosave import AutoSaveScheduler


class _Dirty:
    """Mutable unsaved flag for the scheduler callback."""

    def __init__(self, value: bool = True):
        self.value = value

    def __call__(self) -> bool:
        return self.value


def _make_scheduler(save=None, dirty=None, **config) -> AutoSaveScheduler:
    defaults = dict(enabled=True, interval=60_000, debounce_delay=50)
    defaults.update(config)
    return AutoSaveScheduler(
        save=save or AsyncMock(),
        has_unsaved_changes=dirty or _Dirty(),
        config=AutoSaveConfig(**defaults),
    )


# ============================================================
# debounce
# ============================================================

class TestDebounce:
    @pytest.mark.asyncio
    async def test_burst_edits_single_save(self):
        save = AsyncMock()
        scheduler = _make_scheduler(save=save)
        scheduler.enable()
        try:
            for _ in range(5):
                scheduler.touch()
                await asyncio.sleep(0.01)
            await asyncio.sleep(0.15)

            assert save.await_count == 1
            assert scheduler.debounce_saves == 1
        finally:
            scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_separate_bursts_save_separately(self):
        save = AsyncMock()
        scheduler = _make_scheduler(save=save)
        scheduler.enable()
        try:
            scheduler.touch()
            await asyncio.sleep(0.12)
            scheduler.touch()
            await asyncio.sleep(0.12)
            assert save.await_count == 2
        finally:
            scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_no_save_when_clean(self):
        save = AsyncMock()
        scheduler = _make_scheduler(save=save, dirty=_Dirty(False))
        scheduler.enable()
        try:
            scheduler.touch()
            await asyncio.sleep(0.1)
            save.assert_not_awaited()
        finally:
            scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_touch_ignored_when_disabled(self):
        save = AsyncMock()
        scheduler = _make_scheduler(save=save, enabled=False)
        scheduler.touch()
        assert scheduler.debounce_pending is False
        await asyncio.sleep(0.1)
        save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancel_pending(self):
        save = AsyncMock()
        scheduler = _make_scheduler(save=save)
        scheduler.touch()
        scheduler.cancel_pending()
        await asyncio.sleep(0.1)
        save.assert_not_awaited()


# ============================================================
# interval
# ============================================================

class TestInterval:
    @pytest.mark.asyncio
    async def test_interval_saves_only_when_dirty(self):
        save = AsyncMock()
        dirty = _Dirty(False)
        scheduler = _make_scheduler(save=save, dirty=dirty, interval=30, debounce_delay=60_000)
        scheduler.enable()
        try:
            await asyncio.sleep(0.1)
            save.assert_not_awaited()

            dirty.value = True
            await asyncio.sleep(0.1)
            assert save.await_count >= 1
            assert scheduler.interval_saves >= 1
        finally:
            scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_save_reporting_nothing_is_not_counted(self):
        save = AsyncMock(return_value=False)
        scheduler = _make_scheduler(save=save, interval=20, debounce_delay=60_000)
        scheduler.enable()
        try:
            await asyncio.sleep(0.1)
            assert save.await_count >= 1
            assert scheduler.interval_saves == 0
        finally:
            scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_enable_arms_interval(self):
        scheduler = _make_scheduler(enabled=False)
        assert scheduler.is_running is False
        scheduler.enable()
        assert scheduler.is_running is True
        assert scheduler.enabled is True
        scheduler.shutdown()
        assert scheduler.is_running is False


# ============================================================
# failures and lifecycle
# ============================================================

class TestFailuresAndLifecycle:
    @pytest.mark.asyncio
    async def test_timer_save_failure_is_swallowed(self):
        save = AsyncMock(side_effect=RuntimeError("disk full"))
        scheduler = _make_scheduler(save=save)
        scheduler.touch()
        await asyncio.sleep(0.1)
        await scheduler.drain()

        assert save.await_count == 1
        assert scheduler.debounce_saves == 0

    @pytest.mark.asyncio
    async def test_disable_clears_both_timers(self):
        save = AsyncMock()
        scheduler = _make_scheduler(save=save, interval=30)
        scheduler.enable()
        scheduler.touch()

        scheduler.disable()

        assert scheduler.is_running is False
        assert scheduler.debounce_pending is False
        assert scheduler.config.enabled is False
        await asyncio.sleep(0.1)
        save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_configure_merges_and_rearms(self):
        save = AsyncMock()
        scheduler = _make_scheduler(save=save, debounce_delay=60_000)
        scheduler.enable()
        try:
            config = scheduler.configure(debounce_delay=30, interval=None)
            assert config.debounce_delay == 30
            assert config.interval == 60_000
            assert scheduler.is_running is True
            # unsaved changes exist, so the debounce timer is re-armed
            assert scheduler.debounce_pending is True

            await asyncio.sleep(0.1)
            assert save.await_count == 1
        finally:
            scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_configure_disable(self):
        scheduler = _make_scheduler()
        scheduler.enable()
        scheduler.configure(enabled=False)
        assert scheduler.is_running is False
        assert scheduler.enabled is False

    def test_config_is_copied(self):
        config = AutoSaveConfig(enabled=False)
        scheduler = AutoSaveScheduler(save=AsyncMock(), has_unsaved_changes=_Dirty(), config=config)
        scheduler.config.interval = 5
        assert config.interval == 30000

    @pytest.mark.asyncio
    async def test_shutdown_lets_interval_save_finish(self):
        started = asyncio.Event()
        release = asyncio.Event()
        finished = []

        async def slow_save():
            started.set()
            await release.wait()
            finished.append(True)

        scheduler = _make_scheduler(save=slow_save, interval=20, debounce_delay=60_000)
        scheduler.enable()
        await asyncio.wait_for(started.wait(), timeout=1)

        scheduler.shutdown()
        release.set()
        await scheduler.drain()

        assert finished == [True]
        assert scheduler.interval_saves == 1
        assert scheduler.is_running is False
