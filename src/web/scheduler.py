"""
================================================================================
SCHEDULER - Nightly Completion Reset
================================================================================

Background scheduler that clears every family's completed parts once a day at
a fixed local wall-clock time (22:00 by default).

Schedule:
    - First run: today at the reset time, or tomorrow if that time has
      already passed
    - Then every 24 hours (one APScheduler IntervalTrigger job anchored at
      the first run)
    - Clock changes (DST) shift the wall-clock time of later runs; accepted

Configuration:
    configs/config.json

    "scheduler": {
        "enabled": true,
        "reset_time": "22:00"
    }

Integration:
    - Started by the web server (src.web.server.main)
    - Calls CompletionTracker.reset_all, which takes the store lock
    - shutdown() stops the job for clean exit and in tests

Safety:
    - Errors in the reset action are logged and don't stop the schedule
    - Missed runs (process busy/asleep) are coalesced into one

Usage:
    from src.web.scheduler import ResetScheduler

    scheduler = ResetScheduler(tracker.reset_all, parse_reset_time('22:00'))
    scheduler.start()

================================================================================
"""
import logging
from datetime import datetime, time, timedelta
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.utils.constants import DEFAULT_RESET_TIME, RESET_INTERVAL_HOURS, RESET_JOB_ID

logger = logging.getLogger("reading_tracker")


def parse_reset_time(time_str: str) -> time:
    """Parse 'HH:MM' into a time of day"""
    try:
        return datetime.strptime(time_str, '%H:%M').time()
    except (TypeError, ValueError):
        logger.error(f"Invalid time format: {time_str}")
        raise ValueError("Time must be in HH:MM format")


def next_reset_time(now: datetime, reset_at: time) -> datetime:
    """
    Next occurrence of reset_at.

    Args:
        now: Current local time
        reset_at: Daily reset time

    Returns:
        Today at reset_at if now is not past it, otherwise tomorrow at reset_at
    """
    target = now.replace(hour=reset_at.hour, minute=reset_at.minute,
                         second=0, microsecond=0)
    if now > target:
        target += timedelta(days=1)
    return target


class ResetScheduler:
    """Runs a reset action every day at a fixed local time"""

    def __init__(self, reset_action: Callable[[], None],
                 reset_at: Optional[time] = None,
                 clock: Callable[[], datetime] = datetime.now,
                 scheduler: Optional[BackgroundScheduler] = None):
        self.reset_action = reset_action
        self.reset_at = reset_at or parse_reset_time(DEFAULT_RESET_TIME)
        self.clock = clock
        self.scheduler = scheduler if scheduler is not None else BackgroundScheduler()

    def run_reset(self):
        """Execute the reset action (called by scheduler)"""
        try:
            logger.info("Running scheduled completion reset")
            self.reset_action()
        except Exception as e:
            logger.error(f"Scheduled completion reset failed: {e}")

    def start(self) -> datetime:
        """
        Register the daily job and start the background scheduler.

        Returns:
            Time of the first reset
        """
        first_run = next_reset_time(self.clock(), self.reset_at)
        self.scheduler.add_job(
            func=self.run_reset,
            trigger=IntervalTrigger(hours=RESET_INTERVAL_HOURS, start_date=first_run),
            id=RESET_JOB_ID,
            replace_existing=True,
            coalesce=True,
            misfire_grace_time=3600,
        )
        if not self.scheduler.running:
            self.scheduler.start()

        logger.info(f"Automatic reset scheduled for all families at {first_run:%Y-%m-%d %H:%M:%S}")
        return first_run

    def next_run_time(self) -> Optional[datetime]:
        job = self.scheduler.get_job(RESET_JOB_ID)
        return job.next_run_time if job else None

    def shutdown(self):
        """Cancel the reset job and shut the scheduler down"""
        if self.scheduler.get_job(RESET_JOB_ID):
            self.scheduler.remove_job(RESET_JOB_ID)
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("Scheduler shut down")
