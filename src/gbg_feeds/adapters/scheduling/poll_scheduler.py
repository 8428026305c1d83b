"""Scheduler running independent interval timers per poll job."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo

from gbg_feeds.adapters.scheduling.schedules import Schedule
from gbg_feeds.domain.contracts.scheduler import SchedulerProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollJob:
    """A named poll and the schedule it fires on.

    Jobs with ``fire_on_start`` also run once as soon as the scheduler starts.
    """

    name: str
    schedule: Schedule
    poll: Callable[[], Awaitable[None]]
    fire_on_start: bool = False


class PollScheduler(SchedulerProtocol):
    """Fires poll jobs on their schedules without waiting for them.

    Each job has its own timer task. A fired poll runs as a separate task,
    so a slow or hanging poll never delays other jobs or later fires of the
    same job. Fire times missed while the process was stalled are dropped,
    not made up.
    """

    def __init__(
        self,
        jobs: list[PollJob],
        timezone: tzinfo,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the scheduler.

        Args:
            jobs: Jobs to run.
            timezone: Timezone schedules are evaluated in.
            clock: Returns the current aware time (default: wall clock).
            sleep: Coroutine function used to wait for the next fire time.
        """
        self.jobs = jobs
        self.timezone = timezone
        self._clock = clock or (lambda: datetime.now(UTC))
        self._sleep = sleep
        self._timers: dict[str, asyncio.Task] = {}
        self._in_flight: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        """Number of fired polls that have not finished yet."""
        return len(self._in_flight)

    def _now(self) -> datetime:
        return self._clock().astimezone(self.timezone)

    async def start(self) -> None:
        """Start one timer task per job."""
        if self._timers:
            logger.warning("Poll scheduler already running")
            return

        for job in self.jobs:
            if job.fire_on_start:
                self.fire(job)
            self._timers[job.name] = asyncio.create_task(self._run_timer(job), name=f"timer:{job.name}")
        logger.info(f"Started poll scheduler with {len(self.jobs)} job(s)")

    async def stop(self) -> None:
        """Cancel timers and any polls still in flight."""
        tasks = [*self._timers.values(), *self._in_flight]
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._timers.clear()
        self._in_flight.clear()
        logger.info("Stopped poll scheduler")

    def fire(self, job: PollJob) -> asyncio.Task:
        """Start one poll of ``job`` in the background and return its task."""
        task = asyncio.create_task(job.poll(), name=f"poll:{job.name}")
        self._in_flight.add(task)
        task.add_done_callback(lambda done: self._on_poll_done(job, done))
        return task

    def _on_poll_done(self, job: PollJob, task: asyncio.Task) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Poll '{job.name}' failed: {error}", exc_info=error)

    async def _run_timer(self, job: PollJob) -> None:
        """Sleep until each fire time of ``job`` and fire it."""
        last_fire: datetime | None = None
        try:
            while True:
                now = self._now()
                # Waking slightly early must not fire the same slot twice
                reference = max(now, last_fire) if last_fire is not None else now
                fire_at = job.schedule.next_fire_after(reference)
                delay = (fire_at.astimezone(UTC) - now.astimezone(UTC)).total_seconds()
                await self._sleep(max(delay, 0.0))

                logger.debug(f"Firing '{job.name}' for {fire_at.isoformat()}")
                self.fire(job)
                last_fire = fire_at
        except asyncio.CancelledError:
            logger.debug(f"Timer for '{job.name}' cancelled")
            raise
