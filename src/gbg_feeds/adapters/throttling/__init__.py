"""Throttles and the throttled requester."""

from gbg_feeds.adapters.throttling.fixed_window_throttle import FixedWindowThrottle
from gbg_feeds.adapters.throttling.throttled_requester import ThrottledRequester
from gbg_feeds.adapters.throttling.token_bucket_throttle import TokenBucketThrottle
from gbg_feeds.domain.contracts.throttle import Throttle

THROTTLE_STRATEGIES = ("token_bucket", "fixed_window")


def create_throttle(
    name: str, capacity: int, refill_interval_ms: int, strategy: str = "token_bucket"
) -> Throttle:
    """Create the throttle for one API according to the configured strategy."""
    if strategy == "fixed_window":
        return FixedWindowThrottle(name, capacity, refill_interval_ms)
    if strategy == "token_bucket":
        return TokenBucketThrottle(name, capacity, refill_interval_ms)
    raise ValueError(f"Unknown throttle strategy: {strategy}")


__all__ = [
    "THROTTLE_STRATEGIES",
    "FixedWindowThrottle",
    "ThrottledRequester",
    "TokenBucketThrottle",
    "create_throttle",
]
