"""
Badges module - badge catalogue and the award engine
"""
from . import definitions
from . import engine

from .definitions import (
    BADGE_DEFINITIONS,
    RARITY_COLORS,
    MANUALLY_AWARDABLE,
    get_celebration_for_badge,
    is_known_badge
)

from .engine import (
    award_badge,
    run_badge_checks,
    check_streak_badges,
    check_volume_badges,
    check_achievement_badges,
    check_goal_badges,
    check_routine_badges,
    check_perfect_week_badge,
    check_comeback_badge
)

__all__ = [
    # Modules
    'definitions',
    'engine',

    # Catalogue
    'BADGE_DEFINITIONS',
    'RARITY_COLORS',
    'MANUALLY_AWARDABLE',
    'get_celebration_for_badge',
    'is_known_badge',

    # Engine
    'award_badge',
    'run_badge_checks',
    'check_streak_badges',
    'check_volume_badges',
    'check_achievement_badges',
    'check_goal_badges',
    'check_routine_badges',
    'check_perfect_week_badge',
    'check_comeback_badge'
]
