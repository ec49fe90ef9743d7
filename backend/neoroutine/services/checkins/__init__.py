"""
Check-ins module - task completions and streak analytics
"""
from . import service

from .service import (
    compute_streak_update,
    record_check_in,
    remove_check_in,
    get_today_progress
)

__all__ = [
    'service',
    'compute_streak_update',
    'record_check_in',
    'remove_check_in',
    'get_today_progress'
]
