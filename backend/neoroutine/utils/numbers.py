"""
Rounding helpers shared by analytics and reminders
"""
import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3)"""
    return int(math.floor(value + 0.5))


def percent(part: float, whole: float) -> int:
    """Whole-number percentage of part over whole, 0 when whole is not positive"""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def clamp_percent(value: int) -> int:
    return max(0, min(100, value))
