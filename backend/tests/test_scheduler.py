"""
Tests for Main Thread Scheduler.

Requires Python 3.11+.
"""

import threading

import pytest

from conftest import RecordingRebuild
from host.tick import TickRegistry
from watcher.errors import RebuildActionFailedError
from watcher.scheduler import MainThreadScheduler


class TestMainThreadScheduler:
    """Test cases for MainThreadScheduler."""

    @pytest.fixture
    def scheduler(self, ticks: TickRegistry, rebuild: RecordingRebuild) -> MainThreadScheduler:
        """Create a scheduler on the test tick registry."""
        return MainThreadScheduler(ticks, rebuild)

    def test_idle_scheduler_is_not_subscribed(self, scheduler: MainThreadScheduler, ticks: TickRegistry):
        """Test nothing polls while no change is pending."""
        assert scheduler.is_pending is False
        assert ticks.subscriber_count == 0

    def test_signal_subscribes_once(self, scheduler: MainThreadScheduler, ticks: TickRegistry):
        """Test that a signal sets the flag and subscribes to ticks."""
        scheduler.signal_change()
        scheduler.signal_change()

        assert scheduler.is_pending is True
        assert ticks.is_subscribed(scheduler.tick)
        assert ticks.subscriber_count == 1

    def test_tick_runs_rebuild_and_unsubscribes(
        self, scheduler: MainThreadScheduler, ticks: TickRegistry, rebuild: RecordingRebuild
    ):
        """Test that the next tick services the rebuild exactly once."""
        scheduler.signal_change()
        ticks.run_once()

        assert rebuild.calls == 1
        assert scheduler.is_pending is False
        assert ticks.subscriber_count == 0

        ticks.run_once()
        assert rebuild.calls == 1

    def test_burst_coalesces_into_one_rebuild(
        self, scheduler: MainThreadScheduler, ticks: TickRegistry, rebuild: RecordingRebuild
    ):
        """Test N signals before one tick yield one rebuild."""
        for _ in range(25):
            scheduler.signal_change()

        ticks.run_once()

        assert rebuild.calls == 1
        assert scheduler.rebuild_count == 1

    def test_tick_without_pending_change(self, scheduler: MainThreadScheduler, rebuild: RecordingRebuild):
        """Test a stray tick does nothing."""
        scheduler.tick()

        assert rebuild.calls == 0

    def test_separate_bursts_rebuild_separately(
        self, scheduler: MainThreadScheduler, ticks: TickRegistry, rebuild: RecordingRebuild
    ):
        """Test that each burst gets its own rebuild."""
        scheduler.signal_change()
        ticks.run_once()
        scheduler.signal_change()
        scheduler.signal_change()
        ticks.run_once()

        assert rebuild.calls == 2

    def test_concurrent_signals_from_notification_threads(
        self, scheduler: MainThreadScheduler, ticks: TickRegistry, rebuild: RecordingRebuild
    ):
        """Test racing signals settle on one subscription and one rebuild on the main thread."""
        start = threading.Barrier(8)

        def notify() -> None:
            start.wait()
            for _ in range(100):
                scheduler.signal_change()

        threads = [threading.Thread(target=notify) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert ticks.subscriber_count == 1

        ticks.run_once()

        assert rebuild.calls == 1
        assert rebuild.threads == [threading.main_thread()]

    def test_signal_during_rebuild_starts_next_burst(self, ticks: TickRegistry):
        """Test a change arriving while the rebuild runs is serviced on the next tick."""
        calls: list[int] = []
        scheduler: MainThreadScheduler

        def rebuild_with_save() -> None:
            calls.append(1)
            if len(calls) == 1:
                scheduler.signal_change()

        scheduler = MainThreadScheduler(ticks, rebuild_with_save)
        scheduler.signal_change()

        ticks.run_once()
        assert len(calls) == 1
        assert scheduler.is_pending is True

        ticks.run_once()
        assert len(calls) == 2
        assert scheduler.is_pending is False
        assert ticks.subscriber_count == 0

    def test_rebuild_failure_is_swallowed(self, ticks: TickRegistry):
        """Test that a failing rebuild is logged and the scheduler resets."""
        failing = RecordingRebuild(error=RuntimeError("compiler crashed"))
        scheduler = MainThreadScheduler(ticks, failing)

        scheduler.signal_change()
        ticks.run_once()

        assert failing.calls == 1
        assert scheduler.is_pending is False
        assert ticks.subscriber_count == 0
        assert isinstance(scheduler.last_error, RebuildActionFailedError)
        assert "compiler crashed" in str(scheduler.last_error)

        scheduler.signal_change()
        ticks.run_once()
        assert failing.calls == 2
