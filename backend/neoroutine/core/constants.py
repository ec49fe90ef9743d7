"""
Fixed thresholds and table names
"""

# ============================================================================
# TABLES
# ============================================================================

USERS_TABLE = "users"
ROUTINES_TABLE = "routines"
CHECK_INS_TABLE = "check_ins"
GOALS_TABLE = "goals"
BADGES_TABLE = "badges"
ROUTINE_TEMPLATES_TABLE = "routine_templates"
REMINDER_LOG_TABLE = "reminder_log"

# Postgres unique_violation
UNIQUE_VIOLATION_CODE = "23505"

# Conditional analytics writes re-read the user at most this many times
ANALYTICS_UPDATE_ATTEMPTS = 5

# ============================================================================
# BADGE MILESTONES
# ============================================================================

STREAK_MILESTONES = [3, 7, 14, 30, 60, 100, 365]

# 1 -> first_checkin, the rest -> checkins_<m>
CHECKIN_MILESTONES = [1, 50, 100, 500, 1000]

COMPLETED_GOAL_MILESTONES = {1: "goal_complete", 5: "five_goals"}

ROUTINE_MILESTONES = {1: "first_routine", 5: "five_routines"}

EARLY_BIRD_BEFORE_HOUR = 7
NIGHT_OWL_FROM_HOUR = 22

PERFECT_WEEK_DAYS = 7
COMEBACK_AFTER_DAYS = 7

# ============================================================================
# INSIGHTS
# ============================================================================

MAX_INSIGHTS = 5
MAX_INSIGHTS_RANGE_DAYS = 365
DAY_ABBREVIATIONS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# ============================================================================
# REMINDERS
# ============================================================================

# Returning after more than this many days away switches to the recovery pool
RECOVERY_AFTER_DAYS = 2
REMINDER_TYPE_ADAPTIVE = "adaptive"
REMINDER_FREQUENCY_OFF = "off"
