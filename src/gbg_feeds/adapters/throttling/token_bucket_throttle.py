"""Token bucket admission control for outgoing API requests.

Each upstream API gets its own bucket. The bucket is refilled to full
capacity once a whole refill interval has passed since the previous refill;
unused intervals do not accumulate extra tokens. Requests that find the
bucket empty are dropped, never queued.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from gbg_feeds.domain.contracts.throttle import Throttle
from gbg_feeds.domain.models.token_bucket_state import TokenBucketState

logger = logging.getLogger(__name__)


class TokenBucketThrottle(Throttle):
    """Token bucket with periodic full refill.

    The check-then-decrement in admit() holds a lock, so the bucket never
    admits more than ``capacity`` requests per interval even when called
    from several threads.
    """

    def __init__(
        self,
        name: str,
        capacity: int,
        refill_interval_ms: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize a full bucket.

        Args:
            name: Name of the API (for logging).
            capacity: Number of requests allowed per refill interval.
            refill_interval_ms: How often the bucket is refilled, in milliseconds.
            clock: Monotonic clock returning seconds.
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if refill_interval_ms < 1:
            raise ValueError("refill_interval_ms must be at least 1")

        self.name = name
        self.capacity = capacity
        self.refill_interval_ms = refill_interval_ms
        self._clock = clock
        self._tokens = capacity
        self._last_refill_at = clock()
        self._lock = threading.Lock()

    def _refill(self, now: float) -> bool:
        """Refill to capacity if a full interval has passed. Caller holds the lock."""
        if (now - self._last_refill_at) * 1000 < self.refill_interval_ms:
            return False
        self._tokens = self.capacity
        self._last_refill_at = now
        return True

    def admit(self) -> bool:
        """Take one token if available.

        Returns:
            True if the request may be sent, False if it must be dropped.
        """
        with self._lock:
            if self._refill(self._clock()):
                logger.debug(f"{self.name}: token bucket refilled to {self.capacity}")

            if self._tokens > 0:
                self._tokens -= 1
                return True

        logger.debug(f"{self.name}: token bucket empty, dropping request")
        return False

    @property
    def state(self) -> TokenBucketState:
        """Snapshot of the bucket counters."""
        with self._lock:
            return TokenBucketState(
                capacity=self.capacity,
                tokens=self._tokens,
                last_refill_at=self._last_refill_at,
                refill_interval_ms=self.refill_interval_ms,
            )
