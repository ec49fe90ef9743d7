"""
Reminders module - gentle messages and adaptive reminders
"""
from . import messages
from . import service

from .messages import (
    get_progress_bucket,
    is_recovery,
    get_gentle_message,
    get_weekly_message,
    get_adaptive_reminder,
    calculate_completion_stats
)

from .service import (
    get_user_adaptive_reminder,
    get_users_needing_reminders,
    mark_reminder_prepared
)

__all__ = [
    'messages',
    'service',
    'get_progress_bucket',
    'is_recovery',
    'get_gentle_message',
    'get_weekly_message',
    'get_adaptive_reminder',
    'calculate_completion_stats',
    'get_user_adaptive_reminder',
    'get_users_needing_reminders',
    'mark_reminder_prepared'
]
