"""Tests for the fixed-window throttle."""

import pytest

from gbg_feeds.adapters.throttling import FixedWindowThrottle


class TestFixedWindowThrottle:
    """Tests for FixedWindowThrottle."""

    def test_when_capacity_used_within_window_then_next_is_denied(self) -> None:
        """Given capacity 2 per minute, when admitting 3 times at once, then the third is denied."""
        throttle = FixedWindowThrottle("window-test", capacity=2, refill_interval_ms=60_000)

        results = [throttle.admit() for _ in range(3)]

        assert results == [True, True, False]

    def test_when_separate_instances_then_budgets_are_independent(self) -> None:
        """Given two throttles with the same name, when one is exhausted, then the other still admits."""
        first = FixedWindowThrottle("shared-name", capacity=1, refill_interval_ms=60_000)
        second = FixedWindowThrottle("shared-name", capacity=1, refill_interval_ms=60_000)

        first.admit()

        assert first.admit() is False
        assert second.admit() is True

    @pytest.mark.parametrize("interval", [500, 1500])
    def test_when_interval_not_whole_seconds_then_raises(self, interval: int) -> None:
        """Given a window that is not a whole number of seconds, when constructing, then raises."""
        with pytest.raises(ValueError, match="whole number of seconds"):
            FixedWindowThrottle("test", capacity=1, refill_interval_ms=interval)
