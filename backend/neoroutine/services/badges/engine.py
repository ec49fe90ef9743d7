"""
Badge Engine - Automatically awards badges based on user actions and milestones
Every checker walks its full milestone list; the unique (user_id, badge_id)
index makes repeated awards no-ops.
"""
import asyncio
from collections import Counter
from datetime import datetime, timedelta
from typing import Optional, Dict, Any, List
import logging

import pytz

from neoroutine.core.constants import (
    STREAK_MILESTONES,
    CHECKIN_MILESTONES,
    COMPLETED_GOAL_MILESTONES,
    ROUTINE_MILESTONES,
    EARLY_BIRD_BEFORE_HOUR,
    NIGHT_OWL_FROM_HOUR,
    PERFECT_WEEK_DAYS,
    COMEBACK_AFTER_DAYS,
)
from neoroutine.core.exceptions import BadgeAlreadyExistsError
from neoroutine.services import repository
from neoroutine.services.tasks import count_active_tasks
from neoroutine.utils.timezone import get_now, parse_iso_date, to_iso

logger = logging.getLogger(__name__)


async def award_badge(user_id: str, badge_id: str, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Award a badge to a user (idempotent - won't duplicate)

    Args:
        user_id: The user ID
        badge_id: Badge identifier, e.g. 'streak_7'
        context: Free-form data stored with the badge

    Returns:
        Dict with 'awarded' plus either 'badge', 'already_exists' or 'error'.
        Never raises.
    """
    earned_at = datetime.now(pytz.utc).isoformat()
    try:
        badge = await repository.insert_badge_if_absent(user_id, badge_id, context or {}, earned_at)
    except BadgeAlreadyExistsError:
        return {"awarded": False, "already_exists": True}
    except Exception as e:
        logger.error(f"[Badge] Award error for {badge_id}: {e}")
        return {"awarded": False, "error": str(e)}

    if badge is None:
        return {"awarded": False, "already_exists": True}

    logger.info(f'[Badge] Awarded "{badge_id}" to user {user_id}')
    return {"awarded": True, "badge": badge}


async def _award_all(user_id: str, candidates: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Attempt each candidate in order and keep the ones that were new"""
    awarded = []
    for candidate in candidates:
        result = await award_badge(user_id, candidate["badge_id"], candidate.get("context"))
        if result["awarded"]:
            awarded.append(candidate["descriptor"])
    return awarded


def _candidate(badge_id: str, context: Optional[Dict[str, Any]] = None, **extra) -> Dict[str, Any]:
    return {"badge_id": badge_id, "context": context, "descriptor": {"badge_id": badge_id, **extra}}


async def check_streak_badges(user_id: str, current_streak: int) -> List[Dict[str, Any]]:
    """Award every streak milestone the current streak has reached"""
    candidates = [
        _candidate(f"streak_{m}", {"value": current_streak}, milestone=m)
        for m in STREAK_MILESTONES
        if current_streak >= m
    ]
    return await _award_all(user_id, candidates)


async def check_volume_badges(user_id: str) -> List[Dict[str, Any]]:
    """Award first check-in and total check-in volume milestones"""
    user = await repository.get_user(user_id)
    total_check_ins = ((user or {}).get("analytics") or {}).get("total_check_ins") or 0

    candidates = []
    for m in CHECKIN_MILESTONES:
        if total_check_ins < m:
            continue
        if m == 1:
            candidates.append(_candidate("first_checkin", {"value": 1}, milestone=1))
        else:
            candidates.append(_candidate(f"checkins_{m}", {"value": total_check_ins}, milestone=m))
    return await _award_all(user_id, candidates)


async def check_achievement_badges(user_id: str, completion_data: Optional[Dict[str, Any]] = None,
                                   now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """
    Award perfect-day and time-of-day badges

    The hour comes from the clock at the time the check runs, not from the
    check-in being processed.
    """
    completion_data = completion_data or {}
    hour = (now or get_now()).hour

    candidates = []
    if completion_data.get("today_percent") == 100:
        candidates.append(_candidate("perfect_day"))
    if hour < EARLY_BIRD_BEFORE_HOUR:
        candidates.append(_candidate("early_bird"))
    if hour >= NIGHT_OWL_FROM_HOUR:
        candidates.append(_candidate("night_owl"))
    return await _award_all(user_id, candidates)


async def check_goal_badges(user_id: str) -> List[Dict[str, Any]]:
    """Award goal creation and goal completion badges"""
    total_goals, completed_goals = await asyncio.gather(
        repository.count_goals(user_id),
        repository.count_goals(user_id, status="completed"),
    )

    candidates = []
    if total_goals >= 1:
        candidates.append(_candidate("first_goal"))
    for m, badge_id in sorted(COMPLETED_GOAL_MILESTONES.items()):
        if completed_goals >= m:
            candidates.append(_candidate(badge_id, milestone=m))
    return await _award_all(user_id, candidates)


async def check_routine_badges(user_id: str) -> List[Dict[str, Any]]:
    """Award routine count badges (archived routines don't count)"""
    routine_count = await repository.count_active_routines(user_id)
    candidates = [
        _candidate(badge_id, milestone=m)
        for m, badge_id in sorted(ROUTINE_MILESTONES.items())
        if routine_count >= m
    ]
    return await _award_all(user_id, candidates)


async def check_perfect_week_badge(user_id: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """
    Award perfect_week when each of the last 7 calendar days has at least as
    many check-ins as the user has active tasks
    """
    routines = await repository.get_active_routines(user_id)
    if not routines:
        return []

    required = count_active_tasks(routines)
    if required == 0:
        return []

    today = (now or get_now()).date()
    days = [to_iso(today - timedelta(days=offset)) for offset in range(PERFECT_WEEK_DAYS - 1, -1, -1)]
    check_ins = await repository.get_check_ins_in_range([user_id], days[0], days[-1])
    counts = Counter(c["date_iso"] for c in check_ins)

    perfect_days = sum(1 for d in days if counts.get(d, 0) >= required)
    if perfect_days < PERFECT_WEEK_DAYS:
        return []

    return await _award_all(user_id, [_candidate("perfect_week")])


async def check_comeback_badge(user_id: str, now: Optional[datetime] = None,
                               last_active_date: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Award comeback_kid when the user returns after 7+ days away

    Args:
        user_id: The user ID
        now: Current time (defaults to the wall clock)
        last_active_date: Last active ISO date; read from the user when omitted
    """
    if last_active_date is None:
        user = await repository.get_user(user_id)
        last_active_date = ((user or {}).get("analytics") or {}).get("last_active_date")
    if not last_active_date:
        return []

    today = (now or get_now()).date()
    days_away = (today - parse_iso_date(last_active_date)).days
    if days_away < COMEBACK_AFTER_DAYS:
        return []

    return await _award_all(
        user_id,
        [_candidate("comeback_kid", {"days_away": days_away}, days_away=days_away)],
    )


async def run_badge_checks(user_id: str, completion_data: Optional[Dict[str, Any]] = None,
                           now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """
    Run all badge checks for a user after a check-in

    Checkers run concurrently. One that fails is logged and contributes no
    badges; this never raises into the caller.

    Args:
        user_id: The user ID
        completion_data: Optional dict with 'today_percent' and
                         'previous_active_date' (last active day before this check-in)
        now: Current time (defaults to the wall clock)

    Returns:
        List of newly awarded badge descriptors
    """
    completion_data = completion_data or {}
    now = now or get_now()

    try:
        user = await repository.get_user(user_id)
    except Exception as e:
        logger.error(f"[Badge Engine] Error running checks: {e}", exc_info=True)
        return []

    current_streak = ((user or {}).get("analytics") or {}).get("current_streak") or 0

    checks = {
        "streak": check_streak_badges(user_id, current_streak),
        "volume": check_volume_badges(user_id),
        "achievement": check_achievement_badges(user_id, completion_data, now),
        "goal": check_goal_badges(user_id),
        "routine": check_routine_badges(user_id),
        "perfect_week": check_perfect_week_badge(user_id, now),
        "comeback": check_comeback_badge(user_id, now, completion_data.get("previous_active_date")),
    }
    results = await asyncio.gather(*checks.values(), return_exceptions=True)

    all_awarded: List[Dict[str, Any]] = []
    for name, result in zip(checks, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.error(f"[Badge Engine] {name} check failed: {result}", exc_info=result)
            continue
        all_awarded.extend(result)

    if all_awarded:
        logger.info(f"[Badge Engine] {len(all_awarded)} new badge(s) for user {user_id}")
    return all_awarded
