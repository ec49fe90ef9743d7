"""
Analytics Aggregator - per-user and per-coach insight summaries
Builds dense daily series, routine/goal breakdowns and smart insights
"""
import asyncio
from collections import Counter
from datetime import date
from typing import Optional, Dict, Any, List
import logging

from neoroutine.core.constants import (
    DAY_ABBREVIATIONS,
    DAY_NAMES,
    MAX_INSIGHTS,
)
from neoroutine.services import repository
from neoroutine.services.tasks import active_tasks
from neoroutine.utils.numbers import clamp_percent, percent, round_half_up
from neoroutine.utils.timezone import day_of_week_index, get_range_dates

logger = logging.getLogger(__name__)


def build_series(dates: List[str], check_ins: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Dense per-day check-in counts; days without check-ins count 0"""
    counts = Counter(c["date_iso"] for c in check_ins)
    return [{"date_iso": d, "check_ins": counts.get(d, 0)} for d in dates]


def goal_progress(goal: Dict[str, Any]) -> int:
    """Goal progress percentage clamped to [0, 100]"""
    target = goal.get("target_value") or 0
    if target <= 0:
        return 0
    return clamp_percent(percent(goal.get("current_value") or 0, target))


def get_weekly_summary_message(days_with_activity: int) -> str:
    """Generate weekly motivational message from active days in the last week"""
    if days_with_activity >= 6:
        return "Incredible consistency! You're in the zone."
    if days_with_activity >= 5:
        return "Great week! Keep the momentum going."
    if days_with_activity >= 4:
        return "Solid progress - you're building habits."
    if days_with_activity >= 3:
        return "Good start! Try for one more day this week."
    if days_with_activity >= 1:
        return "Every drop counts - keep showing up!"
    return "A new week, a fresh start. You got this!"


def _routine_stats(routines: List[Dict[str, Any]], check_ins: List[Dict[str, Any]], days: int) -> List[Dict[str, Any]]:
    per_routine = Counter(str(c["routine_id"]) for c in check_ins)

    stats = []
    for routine in routines:
        routine_id = str(routine["id"])
        completed = per_routine.get(routine_id, 0)
        total_tasks = len(active_tasks(routine))
        total_possible = total_tasks * days
        stats.append({
            "id": routine_id,
            "name": routine.get("title") or routine.get("name") or "",
            "color": routine.get("color") or "neo",
            "completed": completed,
            "total_possible": total_possible,
            "total_tasks": total_tasks,
            "completion_rate": min(100, percent(completed, total_possible)),
        })

    # Stable sort keeps the stored routine order between equal rates
    stats.sort(key=lambda r: r["completion_rate"], reverse=True)
    return stats


def _goals_progress(goals: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "id": str(goal["id"]),
            "title": goal.get("title", ""),
            "category": goal.get("category"),
            "progress": goal_progress(goal),
            "current_value": goal.get("current_value") or 0,
            "target_value": goal.get("target_value") or 100,
            "due_date": goal.get("due_date"),
            "status": goal.get("status"),
        }
        for goal in goals
    ]


def generate_insights(total_check_ins: int, streaks: Dict[str, int], days_with_activity: int, days: int,
                      routine_stats: List[Dict[str, Any]], goals_progress: List[Dict[str, Any]],
                      best_day_of_week: Optional[int], dow_counts: Dict[int, int]) -> List[Dict[str, str]]:
    """
    Generate smart insights from aggregated counts

    Rules are checked in a fixed order; within a rule the first matching
    threshold wins. At most five insights are returned.
    """
    insights = []

    # Streak
    if streaks["current"] >= 7:
        insights.append({
            "icon": "🔥",
            "title": "On Fire!",
            "description": f"{streaks['current']} day streak! You're building strong habits.",
            "type": "achievement",
        })
    elif streaks["current"] >= 3:
        insights.append({
            "icon": "⚡",
            "title": "Building Momentum",
            "description": f"{streaks['current']} days in a row. Keep it going!",
            "type": "positive",
        })

    # Best day
    if best_day_of_week is not None and any(c > 0 for c in dow_counts.values()):
        insights.append({
            "icon": "📅",
            "title": "Your Power Day",
            "description": f"You're most productive on {DAY_NAMES[best_day_of_week]}s.",
            "type": "pattern",
        })

    # Routine performance
    if routine_stats:
        best_routine = routine_stats[0]
        if best_routine["completion_rate"] >= 70:
            insights.append({
                "icon": "🏆",
                "title": "Top Routine",
                "description": f"\"{best_routine['name']}\" is your strongest at {best_routine['completion_rate']}%.",
                "type": "achievement",
            })

        worst_routine = routine_stats[-1]
        if (len(routine_stats) > 1 and worst_routine["completion_rate"] < 30
                and worst_routine["completion_rate"] < best_routine["completion_rate"]):
            insights.append({
                "icon": "💡",
                "title": "Room to Grow",
                "description": (
                    f"\"{worst_routine['name']}\" needs attention ({worst_routine['completion_rate']}%). "
                    "Try smaller steps."
                ),
                "type": "suggestion",
            })

    # Goals
    almost_done = [g for g in goals_progress if 80 <= g["progress"] < 100]
    if almost_done:
        noun = "goals are" if len(almost_done) > 1 else "goal is"
        insights.append({
            "icon": "🎯",
            "title": "Almost There!",
            "description": f"{len(almost_done)} {noun} over 80% complete.",
            "type": "motivation",
        })

    # Consistency
    consistency_rate = percent(days_with_activity, days)
    if consistency_rate >= 80:
        insights.append({
            "icon": "💧",
            "title": "Consistency Master",
            "description": f"Active {consistency_rate}% of days - excellent discipline!",
            "type": "achievement",
        })
    elif consistency_rate < 30 and total_check_ins > 0:
        insights.append({
            "icon": "🌱",
            "title": "Growth Opportunity",
            "description": "Try setting a daily reminder to build consistency.",
            "type": "suggestion",
        })

    # Volume
    if total_check_ins >= 100:
        insights.append({
            "icon": "💯",
            "title": "Century Club!",
            "description": f"{total_check_ins} tasks completed - impressive dedication!",
            "type": "achievement",
        })
    elif total_check_ins >= 50:
        insights.append({
            "icon": "🌊",
            "title": "Making Waves",
            "description": f"{total_check_ins} tasks done. You're building momentum!",
            "type": "positive",
        })

    return insights[:MAX_INSIGHTS]


async def get_user_insights(user_id: str, days: int = 30, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Get user insights (check-in series, streaks, routine and goal breakdowns)

    Args:
        user_id: The user ID
        days: Window length in days, today included
        today: Last day of the window (defaults to today in APP_TIMEZONE)

    Returns:
        Insight summary dict

    Raises:
        ValueError: If days is not positive
        DatabaseError: If a query fails
    """
    if days < 1:
        raise ValueError("days must be at least 1")

    window = get_range_dates(days, today)

    routines, goals, check_ins, user = await asyncio.gather(
        repository.get_active_routines(user_id),
        repository.get_goals(user_id, ["active", "completed"]),
        repository.get_check_ins_in_range([user_id], window["start_iso"], window["end_iso"]),
        repository.get_user(user_id),
    )

    series = build_series(window["dates"], check_ins)
    total_check_ins = sum(s["check_ins"] for s in series)

    analytics = (user or {}).get("analytics") or {}
    streaks = {
        "current": analytics.get("current_streak") or 0,
        "longest": analytics.get("longest_streak") or 0,
    }

    # Percent is relative to the busiest day in range, not to possible tasks
    max_count = max([s["check_ins"] for s in series] + [1])

    daily_data = [
        {
            "date": s["date_iso"],
            "day": DAY_ABBREVIATIONS[day_of_week_index(s["date_iso"])],
            "check_ins": s["check_ins"],
            "percent": percent(s["check_ins"], max_count),
        }
        for s in series
    ]

    # Weekly summary (last 7 days)
    last_7 = daily_data[-7:]
    week_active_days = sum(1 for d in last_7 if d["check_ins"] > 0)
    weekly_completion_rate = round_half_up(sum(d["percent"] for d in last_7) / len(last_7))

    # Day-of-week totals, Sunday=0
    dow_counts: Dict[int, int] = {}
    for s in series:
        idx = day_of_week_index(s["date_iso"])
        dow_counts[idx] = dow_counts.get(idx, 0) + s["check_ins"]

    best_day_of_week = None
    worst_day_of_week = None
    if dow_counts:
        ordered = sorted(dow_counts)
        best_day_of_week = max(ordered, key=lambda i: dow_counts[i])
        worst_day_of_week = min(ordered, key=lambda i: dow_counts[i])

    routine_stats = _routine_stats(routines, check_ins, days)

    goals_progress = _goals_progress(goals)
    active_goals = sum(1 for g in goals if g.get("status") == "active")
    completed_goals = sum(1 for g in goals if g.get("status") == "completed")
    avg_goal_progress = (
        round_half_up(sum(g["progress"] for g in goals_progress) / len(goals_progress))
        if goals_progress else 0
    )

    days_with_activity = sum(1 for s in series if s["check_ins"] > 0)

    insights = generate_insights(
        total_check_ins=total_check_ins,
        streaks=streaks,
        days_with_activity=days_with_activity,
        days=days,
        routine_stats=routine_stats,
        goals_progress=goals_progress,
        best_day_of_week=best_day_of_week,
        dow_counts=dow_counts,
    )

    summary = {
        "total_check_ins": total_check_ins,
        "completion_rate": percent(total_check_ins, days * max_count),
        "current_streak": streaks["current"],
        "longest_streak": streaks["longest"],
        "days_with_activity": days_with_activity,
        "active_day_rate": percent(days_with_activity, days),
        "routine_count": len(routines),
        "active_goals": active_goals,
        "completed_goals": completed_goals,
        "total_goals": len(goals),
        "avg_goal_progress": avg_goal_progress,
    }

    logger.info(f"[Insights] Built {days}-day insights for user {user_id}: {total_check_ins} check-ins")

    return {
        "range_days": days,
        "totals": {"check_ins": total_check_ins},
        "series": series,
        "streaks": streaks,
        "summary": summary,
        "daily_data": daily_data,
        "weekly": {
            "completion_rate": weekly_completion_rate,
            "days_with_activity": week_active_days,
            "message": get_weekly_summary_message(week_active_days),
        },
        "routine_stats": routine_stats,
        "goals_progress": goals_progress,
        "insights": insights,
        "patterns": {
            "best_day_of_week": best_day_of_week,
            "worst_day_of_week": worst_day_of_week,
        },
    }


async def get_coach_insights(coach_id: str, days: int = 30, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Get coach-level analytics (active clients, clients list, check-ins series)

    Args:
        coach_id: The coach's user ID
        days: Window length in days, today included
        today: Last day of the window

    Returns:
        Coach insight summary dict

    Raises:
        ValueError: If days is not positive
        DatabaseError: If a query fails
    """
    if days < 1:
        raise ValueError("days must be at least 1")

    window = get_range_dates(days, today)

    clients, templates = await asyncio.gather(
        repository.get_coach_clients(coach_id),
        repository.get_coach_templates(coach_id),
    )
    client_ids = [str(c["id"]) for c in clients]

    check_ins = await repository.get_check_ins_in_range(client_ids, window["start_iso"], window["end_iso"])
    series = build_series(window["dates"], check_ins)

    template_adoptions = sum(((t.get("stats") or {}).get("adoptions") or 0) for t in templates)

    clients_summary = [
        {
            "id": str(c["id"]),
            "name": c.get("name"),
            "email": c.get("email"),
            "last_active": (c.get("analytics") or {}).get("last_active_date"),
            "total_check_ins": (c.get("analytics") or {}).get("total_check_ins") or 0,
            "coaching": c.get("coaching"),
        }
        for c in clients
    ]

    return {
        "coach_id": coach_id,
        "range_days": days,
        "totals": {
            "active_clients": len(clients),
            "check_ins": sum(s["check_ins"] for s in series),
            "template_adoptions": template_adoptions,
        },
        "series": series,
        "clients": clients_summary,
    }
