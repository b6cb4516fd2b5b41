"""Tests pour UsageTracker."""

from unittest.mock import MagicMock

import pytest

from src.services.usage_tracker import UsageTracker


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tracker(clock) -> UsageTracker:
    return UsageTracker(stalled_time_seconds=60, clock=clock)


class TestUsageTracker:
    """Tests du comptage et du signal de blocage."""

    def test_enter_counts_active_usage(self, tracker):
        with tracker.enter("Episode 12"):
            assert tracker.active_count == 1
        assert tracker.active_count == 0

    def test_enter_releases_on_error(self, tracker):
        with pytest.raises(ValueError):
            with tracker.enter("Episode 12"):
                raise ValueError("boom")
        assert tracker.active_count == 0

    def test_not_stalled_before_delay(self, tracker, clock):
        callback = MagicMock()
        tracker.on_stalled(callback)
        clock.now += 30

        assert tracker.check_stalled() is False
        callback.assert_not_called()

    def test_stalled_after_delay_fires_callbacks(self, tracker, clock):
        first, second = MagicMock(), MagicMock()
        tracker.on_stalled(first)
        tracker.on_stalled(second)
        clock.now += 61

        assert tracker.check_stalled() is True
        first.assert_called_once()
        second.assert_called_once()

    def test_stalled_fires_once_per_idle_period(self, tracker, clock):
        callback = MagicMock()
        tracker.on_stalled(callback)
        clock.now += 61
        tracker.check_stalled()
        clock.now += 120

        assert tracker.check_stalled() is False
        callback.assert_called_once()

    def test_new_activity_rearms_detection(self, tracker, clock):
        callback = MagicMock()
        tracker.on_stalled(callback)
        clock.now += 61
        tracker.check_stalled()

        with tracker.enter("Series 100"):
            pass
        clock.now += 61

        assert tracker.check_stalled() is True
        assert callback.call_count == 2

    def test_never_stalled_while_active(self, tracker, clock):
        callback = MagicMock()
        tracker.on_stalled(callback)
        tracker_id = tracker.add("Long refresh")
        clock.now += 600

        assert tracker.check_stalled() is False

        tracker.remove(tracker_id)
        clock.now += 61
        assert tracker.check_stalled() is True

    def test_explicit_now(self, tracker):
        assert tracker.check_stalled(now=1061.0) is True
