"""
Check-ins Service - recording and removing task completions
Keeps the user's streak analytics current and triggers badge checks
"""
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Optional, Dict, Any
import logging
import random
import re

from neoroutine.core.exceptions import (
    UserNotFoundError,
    RoutineNotFoundError,
    TaskNotFoundError,
    CheckInNotFoundError,
    InvalidCheckInDataError,
    DatabaseError,
)
from neoroutine.core.constants import ANALYTICS_UPDATE_ATTEMPTS
from neoroutine.services import repository
from neoroutine.services.badges import (
    BADGE_DEFINITIONS,
    get_celebration_for_badge,
    run_badge_checks,
)
from neoroutine.services.reminders import get_gentle_message
from neoroutine.services.tasks import active_tasks, active_task_keys
from neoroutine.utils.numbers import clamp_percent, percent
from neoroutine.utils.timezone import get_monday_iso, get_now, parse_iso_date, to_iso

logger = logging.getLogger(__name__)

DATE_ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def compute_streak_update(analytics: Dict[str, Any], date_iso: str) -> Dict[str, Any]:
    """
    Compute the user's analytics after one more check-in on date_iso

    - same day as last active: streak unchanged
    - the day after last active: streak + 1
    - first check-in ever or a gap: streak restarts at 1
    - a back-filled earlier day: streak and last active day unchanged

    Args:
        analytics: Current analytics sub-object (may be empty)
        date_iso: Date of the new check-in

    Returns:
        New analytics dict
    """
    day = parse_iso_date(date_iso)
    last_active = analytics.get("last_active_date")
    current = analytics.get("current_streak") or 0
    new_last_active = date_iso

    if not last_active:
        current = 1
    else:
        last_day = parse_iso_date(last_active)
        if day == last_day:
            pass
        elif day - last_day == timedelta(days=1):
            current += 1
        elif day < last_day:
            new_last_active = last_active
        else:
            current = 1

    return {
        "total_check_ins": (analytics.get("total_check_ins") or 0) + 1,
        "current_streak": current,
        "longest_streak": max(analytics.get("longest_streak") or 0, current),
        "last_active_date": new_last_active,
    }


def _resolve_date(date_iso: Optional[str], today: date) -> str:
    if not date_iso:
        return to_iso(today)
    if not DATE_ISO_PATTERN.match(date_iso):
        raise InvalidCheckInDataError("Invalid date format. Use YYYY-MM-DD")
    try:
        parse_iso_date(date_iso)
    except ValueError:
        raise InvalidCheckInDataError(f"Invalid date: {date_iso}")
    return date_iso


async def _load_user(user_id: str) -> Dict[str, Any]:
    user = await repository.get_user(user_id)
    if not user:
        raise UserNotFoundError(f"User {user_id} not found")
    return user


def _user_now(user: Dict[str, Any], now: Optional[datetime]) -> datetime:
    if now is not None:
        return now
    return get_now((user.get("preferences") or {}).get("timezone"))


async def _day_percent(user_id: str, date_iso: str) -> Dict[str, int]:
    """Completed vs. total active tasks for one day, ignoring check-ins of inactive tasks"""
    routines = await repository.get_active_routines(user_id)
    keys = active_task_keys(routines)
    check_ins = await repository.get_check_ins_in_range([user_id], date_iso, date_iso)
    done = {(str(c["routine_id"]), str(c["task_id"])) for c in check_ins} & keys
    return {
        "completed": len(done),
        "total": len(keys),
        "percent": clamp_percent(percent(len(done), len(keys))),
    }


async def _apply_to_analytics(user_id: str, user: Dict[str, Any], date_iso: str) -> Optional[str]:
    """
    Fold one check-in into the user's analytics

    The write only lands if no other check-in changed the analytics since they
    were read; otherwise the user is re-read and the update recomputed.

    Returns:
        last_active_date as it was before this check-in
    """
    for attempt in range(ANALYTICS_UPDATE_ATTEMPTS):
        if attempt:
            user = await _load_user(user_id)
        analytics = user.get("analytics") or {}
        updated = await repository.update_user_analytics_if_unchanged(
            user_id, analytics.get("total_check_ins"), compute_streak_update(analytics, date_iso)
        )
        if updated:
            return analytics.get("last_active_date")
        logger.info(f"[CheckIn] Analytics for user {user_id} changed concurrently, retrying")

    raise DatabaseError(
        f"Analytics for user {user_id} still changing after {ANALYTICS_UPDATE_ATTEMPTS} attempts"
    )


async def record_check_in(user_id: str, routine_id: str, task_id: str, date_iso: Optional[str] = None,
                          note: Optional[str] = None, now: Optional[datetime] = None,
                          rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """
    Mark a task as completed for a day

    Args:
        user_id: The user ID
        routine_id: Routine the task belongs to
        task_id: The task ID
        date_iso: Day of the check-in (defaults to today in the user's timezone)
        note: Optional note (trimmed to 200 characters)
        now: Current time, passed through to the badge checks
        rng: Random source for the gentle message

    Returns:
        Dict with created flag, check-in, today's progress, new badges and a message

    Raises:
        UserNotFoundError, RoutineNotFoundError, TaskNotFoundError,
        InvalidCheckInDataError, CheckInAlreadyExistsError, DatabaseError
    """
    user = await _load_user(user_id)
    now = _user_now(user, now)
    date_iso = _resolve_date(date_iso, now.date())

    routine = await repository.get_active_routine(user_id, routine_id)
    if not routine:
        raise RoutineNotFoundError("Routine not found")

    if not any(str(t["id"]) == str(task_id) for t in active_tasks(routine)):
        raise TaskNotFoundError("Task not found in routine")

    existing = await repository.get_check_in(user_id, routine_id, task_id, date_iso)
    if existing:
        return {
            "created": False,
            "message": "Task already completed for this day",
            "check_in": existing,
            "new_badges": [],
        }

    check_in = await repository.create_check_in(
        user_id, routine_id, task_id, date_iso, (note or "").strip()[:200]
    )

    # The check-in is stored from here on; follow-up failures are logged, not raised
    previous_active_date = (user.get("analytics") or {}).get("last_active_date")
    try:
        previous_active_date = await _apply_to_analytics(user_id, user, date_iso)
    except DatabaseError as e:
        logger.error(f"[CheckIn] Saved check-in of task {task_id} for user {user_id}, analytics not updated: {e}")

    try:
        progress = await _day_percent(user_id, date_iso)
    except DatabaseError as e:
        logger.error(f"[CheckIn] Saved check-in of task {task_id} for user {user_id}, progress unavailable: {e}")
        progress = None

    today_percent = progress["percent"] if progress else None

    new_badges = await run_badge_checks(
        user_id,
        {"today_percent": today_percent or 0, "previous_active_date": previous_active_date},
        now=now,
    )

    days_since_active = None
    if previous_active_date:
        days_since_active = (parse_iso_date(date_iso) - parse_iso_date(previous_active_date)).days

    logger.info(f"[CheckIn] User {user_id} checked task {task_id} on {date_iso}")

    return {
        "created": True,
        "message": get_gentle_message(today_percent or 0, days_since_active=days_since_active, rng=rng),
        "check_in": check_in,
        "today_count": progress["completed"] if progress else None,
        "today_percent": today_percent,
        "new_badges": [
            {
                **badge,
                "definition": BADGE_DEFINITIONS.get(badge["badge_id"]),
                "celebration": get_celebration_for_badge(badge["badge_id"]),
            }
            for badge in new_badges
        ],
    }


async def remove_check_in(user_id: str, routine_id: str, task_id: str, date_iso: Optional[str] = None,
                          now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Remove a check-in (uncheck a task)

    Raises:
        UserNotFoundError, CheckInNotFoundError, InvalidCheckInDataError, DatabaseError
    """
    user = await _load_user(user_id)
    now = _user_now(user, now)
    date_iso = _resolve_date(date_iso, now.date())

    deleted = await repository.delete_check_in(user_id, routine_id, task_id, date_iso)
    if deleted == 0:
        raise CheckInNotFoundError("Check-in not found")

    return {
        "status": "success",
        "message": "No worries, take your time.",
        "date": date_iso,
    }


async def get_today_progress(user_id: str, now: Optional[datetime] = None,
                             rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """
    Get today's and this week's (Mon-Sun) completion with a gentle message

    Check-ins of deleted or inactive tasks are ignored.
    """
    user = await _load_user(user_id)
    now = _user_now(user, now)
    date_iso = to_iso(now.date())
    week_start = parse_iso_date(get_monday_iso(date_iso))

    routines = await repository.get_active_routines(user_id)
    keys = active_task_keys(routines)
    total_tasks = len(keys)

    check_ins = await repository.get_check_ins_in_range([user_id], to_iso(week_start), date_iso)

    by_date = defaultdict(set)
    for c in check_ins:
        key = (str(c["routine_id"]), str(c["task_id"]))
        if key in keys:
            by_date[c["date_iso"]].add(key)

    completed_today = len(by_date.get(date_iso, set()))
    today_percent = clamp_percent(percent(completed_today, total_tasks))

    weekly_data = []
    for i, label in enumerate(WEEKDAY_LABELS):
        day_iso = to_iso(week_start + timedelta(days=i))
        count = len(by_date.get(day_iso, set()))
        weekly_data.append({
            "date": day_iso,
            "day": label,
            "count": count,
            "percent": clamp_percent(percent(count, total_tasks)),
            "is_today": day_iso == date_iso,
        })

    weekly_completed = sum(len(s) for s in by_date.values())
    weekly_possible = total_tasks * 7
    weekly_percent = clamp_percent(percent(weekly_completed, weekly_possible))

    days_since_active = None
    last_active = (user.get("analytics") or {}).get("last_active_date")
    if completed_today == 0 and last_active:
        days_since_active = (now.date() - parse_iso_date(last_active)).days

    return {
        "date": date_iso,
        "checked_task_ids": sorted(f"{r}_{t}" for r, t in by_date.get(date_iso, set())),
        "stats": {
            "today": {"completed": completed_today, "total": total_tasks, "percent": today_percent},
            "weekly": {
                "completed": weekly_completed,
                "possible": weekly_possible,
                "percent": weekly_percent,
                "data": weekly_data,
            },
        },
        "micro_message": get_gentle_message(today_percent, weekly_percent, days_since_active, rng),
    }
