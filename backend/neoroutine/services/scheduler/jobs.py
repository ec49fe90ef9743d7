"""
Scheduler Job Definitions
Contains the scheduled job that prepares daily adaptive reminders
"""
from datetime import date
from typing import Optional
import logging
import random

from neoroutine.services.reminders import service as reminders_service
from neoroutine.utils.timezone import get_today_date

logger = logging.getLogger(__name__)


async def prepare_adaptive_reminders(today: Optional[date] = None,
                                     rng: Optional[random.Random] = None) -> int:
    """
    Prepare today's adaptive reminder for every user who wants one
    Called once daily by the scheduler

    Returns:
        Number of reminders logged
    """
    today = today or get_today_date()
    prepared = 0

    try:
        logger.info("[SCHEDULER] Preparing adaptive reminders...")

        users = await reminders_service.get_users_needing_reminders(today)
        if not users:
            logger.info("[SCHEDULER] No users need reminders")
            return 0

        for user in users:
            user_id = str(user["id"])
            try:
                reminder = await reminders_service.get_user_adaptive_reminder(user_id, today, rng)
                await reminders_service.mark_reminder_prepared(user_id, reminder, today)
                prepared += 1
                logger.info(f"[SCHEDULER] Prepared {reminder['intensity']} reminder for user_id={user_id}")
            except Exception as e:
                logger.error(f"[SCHEDULER] Failed to prepare reminder for user_id={user_id}: {e}")

        logger.info(f"[SCHEDULER] Prepared {prepared} reminder(s)")

    except Exception as e:
        logger.error(f"[SCHEDULER] Error in prepare_adaptive_reminders: {e}", exc_info=True)

    return prepared
