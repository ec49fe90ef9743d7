"""
Adaptive reminder preparation
Loads a user's recent activity and picks the reminder intensity and message
"""
from datetime import date, timedelta
from typing import Optional, Dict, Any, List
import logging
import random

from neoroutine.core.constants import REMINDER_FREQUENCY_OFF, REMINDER_TYPE_ADAPTIVE
from neoroutine.services import repository
from neoroutine.services.tasks import count_active_tasks
from neoroutine.utils.timezone import get_today_date, to_iso
from .messages import calculate_completion_stats, get_adaptive_reminder

logger = logging.getLogger(__name__)


async def get_user_adaptive_reminder(user_id: str, today: Optional[date] = None,
                                     rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """
    Build the adaptive reminder for one user from the last 7 days

    Returns:
        Dict with the reminder config plus the stats it was derived from
    """
    today = today or get_today_date()
    start = today - timedelta(days=6)

    routines = await repository.get_active_routines(user_id)
    check_ins = await repository.get_check_ins_in_range([user_id], to_iso(start), to_iso(today))

    stats = calculate_completion_stats(check_ins, count_active_tasks(routines), days=7, today=today)
    reminder = get_adaptive_reminder(stats["completion_rate"], rng)

    return {**reminder, "stats": stats}


async def get_users_needing_reminders(today: Optional[date] = None) -> List[Dict[str, Any]]:
    """
    Get users that should get an adaptive reminder today

    Logic:
    - Reminder frequency is not 'off'
    - No adaptive reminder logged for them today
    """
    today = today or get_today_date()

    users = await repository.get_all_users()
    if not users:
        return []

    already_logged = await repository.get_reminders_for_date(to_iso(today), REMINDER_TYPE_ADAPTIVE)
    logged_ids = {str(r["user_id"]) for r in already_logged}

    return [
        u for u in users
        if ((u.get("preferences") or {}).get("reminder_frequency") != REMINDER_FREQUENCY_OFF)
        and str(u["id"]) not in logged_ids
    ]


async def mark_reminder_prepared(user_id: str, reminder: Dict[str, Any],
                                 today: Optional[date] = None) -> Dict[str, Any]:
    """
    Record the reminder in reminder_log so it is prepared once per day

    Returns:
        Dict with status and data
    """
    today = today or get_today_date()

    entry = await repository.create_reminder_log(
        user_id,
        to_iso(today),
        REMINDER_TYPE_ADAPTIVE,
        reminder["intensity"],
        reminder["message"],
    )

    return {
        "status": "success",
        "user_id": user_id,
        "reminder_type": REMINDER_TYPE_ADAPTIVE,
        "date": to_iso(today),
        "data": entry
    }
