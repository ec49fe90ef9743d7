"""
Scheduler Service - Background scheduler lifecycle management
Handles starting, stopping, and configuring the APScheduler instance
"""
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from neoroutine.core.config import settings
from neoroutine.utils.timezone import get_timezone
from .jobs import prepare_adaptive_reminders

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = None


def start_scheduler():
    """
    Start the background scheduler on the running event loop
    Prepares adaptive reminders once a day at REMINDER_SWEEP_HOUR
    """
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already running")
        return

    scheduler = AsyncIOScheduler(timezone=get_timezone())

    scheduler.add_job(
        func=prepare_adaptive_reminders,
        trigger=CronTrigger(hour=settings.REMINDER_SWEEP_HOUR, minute=0),
        id='adaptive_reminders',
        name='Prepare daily adaptive reminders',
        replace_existing=True
    )

    scheduler.start()
    logger.info(f"Scheduler started - adaptive reminders daily at {settings.REMINDER_SWEEP_HOUR:02d}:00")


def stop_scheduler():
    """Stop the background scheduler"""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler stopped")
