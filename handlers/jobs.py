"""
handlers/jobs.py
----------------
Recurring JobQueue work: the daily reminder resync.

The resync re-derives every reminder, which also moves the "Daily Tithe
Check" on to the next day. It therefore runs 30 seconds after the check's
own fire time, once that day's check has been delivered, and is moved
whenever the reminder time changes.
"""

from datetime import datetime, time as dt_time
from typing import Optional

from telegram.ext import ContextTypes, Job, JobQueue

from models.settings import ReminderSettings
from utils.logger import get_logger

logger = get_logger(__name__)

RESYNC_JOB = "daily_resync"
RESYNC_DELAY_SECONDS = 30


def resync_time(settings: ReminderSettings) -> dt_time:
    """Local wall-clock time of the daily resync: the reminder time plus 30 seconds."""
    return dt_time(
        hour=settings.hour,
        minute=settings.minute,
        second=RESYNC_DELAY_SECONDS,
        tzinfo=datetime.now().astimezone().tzinfo,
    )


async def resync_reminders(context: ContextTypes.DEFAULT_TYPE) -> None:
    """Scheduled job: rebuild every reminder from the stored ledger."""
    count = await context.bot_data["income_service"].resync()
    logger.info(f"Daily resync scheduled {count} reminders")


def schedule_daily_resync(job_queue: Optional[JobQueue],
                          settings: ReminderSettings) -> Optional[Job]:
    """
    Replace the daily resync job so that it follows the configured reminder time.

    Returns:
        The new job, or None when the JobQueue is unavailable.
    """
    if job_queue is None:
        logger.warning("JobQueue unavailable; reminders cannot be scheduled.")
        return None
    for job in job_queue.get_jobs_by_name(RESYNC_JOB):
        job.schedule_removal()
    when = resync_time(settings)
    job = job_queue.run_daily(resync_reminders, time=when, name=RESYNC_JOB)
    logger.info(f"Daily reminder resync set for {when:%H:%M:%S}")
    return job
