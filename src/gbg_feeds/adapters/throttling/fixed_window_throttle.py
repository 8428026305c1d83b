"""Fixed-window admission control using throttled-py."""

import logging
from datetime import timedelta

from throttled import RateLimiterType, Throttled, rate_limiter, store

from gbg_feeds.domain.contracts.throttle import Throttle

logger = logging.getLogger(__name__)


class FixedWindowThrottle(Throttle):
    """Allows ``capacity`` requests per window; excess requests are dropped.

    Windows are aligned to the store's clock rather than to the previous
    refill, so a burst may straddle two windows. The window length must be a
    whole number of seconds.
    """

    def __init__(self, name: str, capacity: int, refill_interval_ms: int) -> None:
        """Initialize the throttle.

        Args:
            name: Name of the API, also used as the limiter key.
            capacity: Number of requests allowed per window.
            refill_interval_ms: Window length in milliseconds (whole seconds).
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if refill_interval_ms < 1000 or refill_interval_ms % 1000:
            raise ValueError("refill_interval_ms must be a whole number of seconds")

        self.name = name
        self.capacity = capacity
        self.refill_interval_ms = refill_interval_ms
        self._throttle = Throttled(
            key=name,
            using=RateLimiterType.FIXED_WINDOW.value,
            quota=rate_limiter.per_duration(
                timedelta(milliseconds=refill_interval_ms), limit=capacity
            ),
            store=store.MemoryStore(),
        )

    def admit(self) -> bool:
        """Count one request against the current window.

        Returns:
            True if the request may be sent, False if it must be dropped.
        """
        result = self._throttle.limit()
        if result.limited:
            logger.debug(f"{self.name}: window limit of {self.capacity} reached, dropping request")
            return False
        return True
