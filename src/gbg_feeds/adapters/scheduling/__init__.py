"""Poll scheduling."""

from gbg_feeds.adapters.scheduling.poll_scheduler import PollJob, PollScheduler
from gbg_feeds.adapters.scheduling.schedules import DailySchedule, IntervalSchedule, Schedule

__all__ = ["DailySchedule", "IntervalSchedule", "PollJob", "PollScheduler", "Schedule"]
