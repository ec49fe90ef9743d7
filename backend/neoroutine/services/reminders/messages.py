"""
Reminder Engine - gentle, adaptive messages based on user progress

Pure functions: no persistence, no side effects. Every random choice goes
through an injectable random.Random so selection can be seeded.
"""
from collections import Counter
from datetime import date, timedelta
from typing import Optional, Dict, Any, List, Iterable
import random

from neoroutine.core.constants import RECOVERY_AFTER_DAYS
from neoroutine.utils.timezone import get_today_date, to_iso

MESSAGE_POOLS: Dict[str, List[str]] = {
    # No progress today (0%)
    "no_progress": [
        "Every journey starts with a single drop. Ready when you are.",
        "The water is calm. Take your time.",
        "New day, fresh start. No pressure.",
        "Your routine is here whenever you need it.",
        "Rest is part of the flow too.",
    ],

    # Low progress (1-25%)
    "low_progress": [
        "You've started! That's what matters most.",
        "Small ripples create big waves over time.",
        "One drop at a time. You're doing great.",
        "Progress isn't always visible, but it's happening.",
        "Even gentle streams carve through stone.",
    ],

    # Moderate progress (26-50%)
    "moderate_progress": [
        "You're finding your flow. Keep going.",
        "Halfway there. The water is rising.",
        "Your consistency is building something beautiful.",
        "Every drop adds to the pool.",
        "Steady progress. Well done.",
    ],

    # Good progress (51-75%)
    "good_progress": [
        "Your progress is making waves!",
        "More than halfway. The momentum is with you.",
        "Your routine is flowing smoothly today.",
        "Look at those ripples spreading.",
        "You're in a great flow state.",
    ],

    # High progress (76-99%)
    "high_progress": [
        "Almost there! Your dedication shows.",
        "The pool is nearly full. Amazing work.",
        "Your consistency is inspiring.",
        "Just a few more drops to complete the day.",
        "You're creating beautiful ripples.",
    ],

    # Complete (100%)
    "complete": [
        "Perfect flow! You completed everything today.",
        "Your pool is full. Well done!",
        "100% - Your consistency is remarkable.",
        "All drops collected. Time to rest.",
        "Beautifully done. The water is still.",
    ],

    # Returning after a few days away
    "recovery": [
        "Welcome back. The water kept your place.",
        "Rivers pause too. Pick up wherever feels right.",
        "No catching up needed. Just one drop today.",
        "Good to see you again. Start small.",
        "Every return is a fresh ripple.",
    ],

    # Weekly encouragement (low weekly average)
    "weekly_low": [
        "This week was challenging. That's okay.",
        "Some weeks flow differently. Be gentle with yourself.",
        "The river finds its way, even around obstacles.",
        "Tomorrow is a new opportunity to flow.",
        "Every week teaches us something.",
    ],

    # Weekly encouragement (good weekly average)
    "weekly_good": [
        "Strong week! Your habits are taking root.",
        "Consistent flow this week. Keep it up.",
        "Your weekly progress is impressive.",
        "The ripples from this week will carry forward.",
        "You've built great momentum.",
    ],

    # Weekly encouragement (excellent weekly average)
    "weekly_excellent": [
        "Exceptional week! You're in full flow.",
        "Your dedication this week is inspiring.",
        "Week after week, you're building something lasting.",
        "The pool is overflowing with your progress.",
        "Masterful consistency. Well done.",
    ],
}

ADAPTIVE_REMINDERS: Dict[str, Dict[str, Any]] = {
    # Struggling - be extra gentle and don't overwhelm
    "soft": {
        "intensity": "soft",
        "tone": "supportive",
        "frequency": "reduced",
        "messages": [
            "Just a gentle nudge. Your routine misses you.",
            "Whenever you're ready, your drops are waiting.",
            "No pressure. Just a friendly reminder.",
            "Take it one small step at a time.",
        ],
    },
    "medium": {
        "intensity": "medium",
        "tone": "encouraging",
        "frequency": "normal",
        "messages": [
            "Time to add some drops to your pool.",
            "Your routine is waiting. Let's flow.",
            "Ready to continue your progress?",
            "A few minutes can make a difference.",
        ],
    },
    # Consistent - celebrate and encourage growth
    "energetic": {
        "intensity": "energetic",
        "tone": "celebratory",
        "frequency": "normal",
        "messages": [
            "You're on a roll! Keep the momentum going.",
            "Your consistency is amazing. Ready for today?",
            "Let's continue your winning flow!",
            "Another day, another opportunity to grow.",
        ],
    },
}

_default_rng = random.Random()


def pick_message(pool: List[str], rng: Optional[random.Random] = None) -> str:
    """Uniformly pick one message from a pool"""
    return (rng or _default_rng).choice(pool)


def get_progress_bucket(today_percent: float) -> str:
    """
    Map today's completion percentage to its message pool name

    0 -> no_progress, 1-25 -> low, 26-50 -> moderate, 51-75 -> good,
    76-99 -> high, 100 -> complete
    """
    if today_percent <= 0:
        return "no_progress"
    if today_percent <= 25:
        return "low_progress"
    if today_percent <= 50:
        return "moderate_progress"
    if today_percent <= 75:
        return "good_progress"
    if today_percent < 100:
        return "high_progress"
    return "complete"


def is_recovery(days_since_active: Optional[int]) -> bool:
    """True when the user has been away long enough for the recovery pool"""
    return days_since_active is not None and days_since_active > RECOVERY_AFTER_DAYS


def get_gentle_message(today_percent: float = 0, weekly_percent: float = 0,
                       days_since_active: Optional[int] = None,
                       rng: Optional[random.Random] = None) -> str:
    """
    Get a gentle micro-message based on today's progress

    Args:
        today_percent: Today's completion percentage (0-100)
        weekly_percent: Weekly completion percentage (0-100), informational
        days_since_active: Days since the previous active day, if known
        rng: Random source (defaults to a module-level Random)

    Returns:
        A gentle, encouraging message
    """
    if is_recovery(days_since_active):
        return pick_message(MESSAGE_POOLS["recovery"], rng)
    return pick_message(MESSAGE_POOLS[get_progress_bucket(today_percent)], rng)


def get_weekly_message(weekly_percent: float = 0, rng: Optional[random.Random] = None) -> str:
    """Get a weekly summary message for the week's completion percentage"""
    if weekly_percent < 40:
        return pick_message(MESSAGE_POOLS["weekly_low"], rng)
    if weekly_percent < 75:
        return pick_message(MESSAGE_POOLS["weekly_good"], rng)
    return pick_message(MESSAGE_POOLS["weekly_excellent"], rng)


def get_adaptive_reminder(last_7_days_percent: float = 0, rng: Optional[random.Random] = None) -> Dict[str, str]:
    """
    Get adaptive reminder intensity based on recent compliance

    Lower intensity for users who are struggling (softer reminders),
    higher intensity for consistent users.

    Args:
        last_7_days_percent: Completion rate for the last 7 days

    Returns:
        Dict with intensity, tone, frequency and message
    """
    if last_7_days_percent < 30:
        config = ADAPTIVE_REMINDERS["soft"]
    elif last_7_days_percent < 60:
        config = ADAPTIVE_REMINDERS["medium"]
    else:
        config = ADAPTIVE_REMINDERS["energetic"]

    return {
        "intensity": config["intensity"],
        "tone": config["tone"],
        "frequency": config["frequency"],
        "message": pick_message(config["messages"], rng),
    }


def calculate_completion_stats(check_ins: Iterable[Dict[str, Any]], total_tasks_per_day: int,
                               days: int = 7, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Calculate completion stats over the trailing window ending today

    Args:
        check_ins: Check-in records (only 'date_iso' is read)
        total_tasks_per_day: Total possible tasks per day
        days: Number of days to analyze
        today: Last day of the window

    Returns:
        Dict with total_completed, total_possible, completion_rate,
        days_with_activity and active_day_rate
    """
    today = today or get_today_date()
    per_day = Counter(c["date_iso"] for c in check_ins)

    total_completed = 0
    days_with_activity = 0
    for offset in range(days):
        count = per_day.get(to_iso(today - timedelta(days=offset)), 0)
        total_completed += count
        if count > 0:
            days_with_activity += 1

    total_possible = total_tasks_per_day * days
    return {
        "total_completed": total_completed,
        "total_possible": total_possible,
        "completion_rate": (total_completed / total_possible * 100) if total_possible > 0 else 0,
        "days_with_activity": days_with_activity,
        "active_day_rate": (days_with_activity / days * 100) if days > 0 else 0,
    }
