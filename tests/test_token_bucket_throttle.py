"""Tests for the token bucket throttle."""

import threading

import pytest

from conftest import FakeClock
from gbg_feeds.adapters.throttling import TokenBucketThrottle, create_throttle
from gbg_feeds.adapters.throttling.fixed_window_throttle import FixedWindowThrottle


class TestTokenBucketThrottle:
    """Tests for TokenBucketThrottle."""

    def test_when_capacity_requests_in_one_interval_then_next_is_denied(self) -> None:
        """Given capacity 3 per 100ms, when calling admit 4 times at once, then 3 succeed."""
        clock = FakeClock()
        throttle = TokenBucketThrottle("test", capacity=3, refill_interval_ms=100, clock=clock)

        results = [throttle.admit() for _ in range(4)]

        assert results == [True, True, True, False]

    def test_when_interval_passes_then_bucket_is_full_again(self) -> None:
        """Given an empty bucket, when a full interval passes, then capacity tokens are available."""
        clock = FakeClock()
        throttle = TokenBucketThrottle("test", capacity=3, refill_interval_ms=100, clock=clock)
        for _ in range(3):
            throttle.admit()

        clock.advance(0.1)

        assert [throttle.admit() for _ in range(4)] == [True, True, True, False]

    def test_when_less_than_interval_passes_then_no_refill(self) -> None:
        """Given an empty bucket, when 99ms pass, then requests are still denied."""
        clock = FakeClock()
        throttle = TokenBucketThrottle("test", capacity=3, refill_interval_ms=100, clock=clock)
        for _ in range(3):
            throttle.admit()

        clock.advance(0.099)

        assert throttle.admit() is False

    def test_when_idle_for_many_intervals_then_tokens_do_not_accumulate(self) -> None:
        """Given a long idle period, when refilled, then tokens are capped at capacity."""
        clock = FakeClock()
        throttle = TokenBucketThrottle("test", capacity=2, refill_interval_ms=100, clock=clock)

        clock.advance(10)

        assert [throttle.admit() for _ in range(3)] == [True, True, False]
        assert throttle.state.tokens == 0

    def test_when_refilled_then_last_refill_moves_to_now(self) -> None:
        """Given a refill, when reading state, then last_refill_at is the refill time."""
        clock = FakeClock(start=50.0)
        throttle = TokenBucketThrottle("test", capacity=1, refill_interval_ms=1000, clock=clock)
        throttle.admit()

        clock.advance(1.5)
        throttle.admit()

        state = throttle.state
        assert state.last_refill_at == 51.5
        assert state.tokens == 0
        assert state.capacity == 1
        assert state.refill_interval_ms == 1000

    def test_over_many_intervals_tokens_stay_within_bounds(self) -> None:
        """Given calls every 10ms for 1s, when sampling state, then 0 <= tokens <= capacity."""
        clock = FakeClock(start=0.0)
        throttle = TokenBucketThrottle("test", capacity=3, refill_interval_ms=100, clock=clock)

        admitted = 0
        for _ in range(100):
            admitted += throttle.admit()
            assert 0 <= throttle.state.tokens <= 3
            clock.advance(0.01)

        # Initial bucket plus at most one refill per 100ms
        assert admitted <= 3 * 11

    def test_when_called_from_threads_then_admits_exactly_capacity(self) -> None:
        """Given many threads racing, when the clock is frozen, then exactly capacity are admitted."""
        clock = FakeClock()
        throttle = TokenBucketThrottle("test", capacity=5, refill_interval_ms=1000, clock=clock)
        results: list[bool] = []
        lock = threading.Lock()

        def worker() -> None:
            for _ in range(10):
                admitted = throttle.admit()
                with lock:
                    results.append(admitted)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 5

    @pytest.mark.parametrize("capacity,interval", [(0, 100), (1, 0)])
    def test_when_invalid_settings_then_raises(self, capacity: int, interval: int) -> None:
        """Given a non-positive capacity or interval, when constructing, then raises ValueError."""
        with pytest.raises(ValueError):
            TokenBucketThrottle("test", capacity=capacity, refill_interval_ms=interval)


class TestCreateThrottle:
    """Tests for the throttle factory."""

    def test_when_token_bucket_then_returns_token_bucket(self) -> None:
        """Given strategy token_bucket, when creating, then a TokenBucketThrottle is returned."""
        throttle = create_throttle("api", 40, 60_000)

        assert isinstance(throttle, TokenBucketThrottle)

    def test_when_fixed_window_then_returns_fixed_window(self) -> None:
        """Given strategy fixed_window, when creating, then a FixedWindowThrottle is returned."""
        throttle = create_throttle("api", 2, 12_000, strategy="fixed_window")

        assert isinstance(throttle, FixedWindowThrottle)

    def test_when_unknown_strategy_then_raises(self) -> None:
        """Given an unknown strategy, when creating, then raises ValueError."""
        with pytest.raises(ValueError, match="Unknown throttle strategy"):
            create_throttle("api", 1, 1000, strategy="leaky")
