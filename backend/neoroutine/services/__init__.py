"""
Business logic services
"""
from . import repository
from . import badges
from . import analytics
from . import reminders
from . import checkins
from . import scheduler

__all__ = [
    'repository',
    'badges',
    'analytics',
    'reminders',
    'checkins',
    'scheduler'
]
