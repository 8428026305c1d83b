"""Token bucket state domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenBucketState:
    """Snapshot of a token bucket's counters."""

    capacity: int
    tokens: int
    last_refill_at: float  # Clock reading (seconds) of the last full refill
    refill_interval_ms: int
