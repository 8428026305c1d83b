"""Fire-time calculations for poll jobs.

Schedules work on aware datetimes in the scheduler's timezone. Interval
schedules are aligned to local midnight, so a 10 second interval fires at
:00, :10, :20 ... and a 30 minute interval at hh:00:00 and hh:30:00.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Protocol


class Schedule(Protocol):
    """Computes when a job fires next."""

    def next_fire_after(self, now: datetime) -> datetime:
        """Return the first fire time strictly after ``now``."""
        ...


def _local_midnight(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass(frozen=True)
class IntervalSchedule(Schedule):
    """Fires every ``every``, on boundaries counted from local midnight."""

    every: timedelta

    def __post_init__(self) -> None:
        if self.every < timedelta(seconds=1):
            raise ValueError("interval must be at least one second")

    def next_fire_after(self, now: datetime) -> datetime:
        """Next boundary after ``now``; the day's last slot is cut short at midnight."""
        midnight = _local_midnight(now)
        slots = (now - midnight) // self.every + 1
        return min(midnight + slots * self.every, midnight + timedelta(days=1))


@dataclass(frozen=True)
class DailySchedule(Schedule):
    """Fires once a day at a local time of day."""

    at: time

    def next_fire_after(self, now: datetime) -> datetime:
        """Today's fire time if still ahead, else tomorrow's."""
        candidate = datetime.combine(now.date(), self.at, tzinfo=now.tzinfo)
        if candidate <= now:
            candidate = datetime.combine(
                now.date() + timedelta(days=1), self.at, tzinfo=now.tzinfo
            )
        return candidate
