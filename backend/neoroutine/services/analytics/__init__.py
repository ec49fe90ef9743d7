"""
Analytics module - insight summaries for users and coaches
"""
from . import insights

from .insights import (
    get_user_insights,
    get_coach_insights,
    generate_insights,
    goal_progress,
    get_weekly_summary_message
)

__all__ = [
    'insights',
    'get_user_insights',
    'get_coach_insights',
    'generate_insights',
    'goal_progress',
    'get_weekly_summary_message'
]
