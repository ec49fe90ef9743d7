"""
Timezone Utilities - Centralized date and timezone handling
"""
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional
import logging

import pytz

from neoroutine.core.config import settings

logger = logging.getLogger(__name__)


def get_timezone(tz_name: Optional[str] = None):
    """
    Get a pytz timezone, falling back to UTC for unknown names

    Args:
        tz_name: IANA timezone identifier (defaults to APP_TIMEZONE)

    Returns:
        pytz timezone object
    """
    name = tz_name or settings.APP_TIMEZONE
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        logger.warning(f"[Timezone] Invalid timezone: {name}, falling back to UTC")
        return pytz.utc


def is_valid_timezone(tz_name: str) -> bool:
    """Check whether an IANA timezone identifier is known"""
    return tz_name in pytz.all_timezones_set


def get_now(tz_name: Optional[str] = None) -> datetime:
    """
    Get current datetime in the given timezone

    Returns:
        Timezone-aware datetime object
    """
    return datetime.now(get_timezone(tz_name))


def get_today_date(tz_name: Optional[str] = None) -> date:
    """Get today's date in the given timezone"""
    return get_now(tz_name).date()


def to_iso(day: date) -> str:
    """Format a date as YYYY-MM-DD"""
    return day.isoformat()


def parse_iso_date(value: str) -> date:
    """Parse a YYYY-MM-DD string (a trailing time part is ignored)"""
    return date.fromisoformat(value[:10])


def get_range_dates(days: int, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Compute the ISO date window ending today

    Args:
        days: Number of days in the window (today included)
        today: Last day of the window (defaults to today in APP_TIMEZONE)

    Returns:
        Dict with start_iso, end_iso and the contiguous list of ISO dates
    """
    end = today or get_today_date()
    start = end - timedelta(days=days - 1)
    dates: List[str] = [to_iso(start + timedelta(days=i)) for i in range(days)]
    return {"start_iso": to_iso(start), "end_iso": to_iso(end), "dates": dates}


def get_monday_iso(date_iso: str) -> str:
    """Get the Monday of the week containing date_iso"""
    day = parse_iso_date(date_iso)
    return to_iso(day - timedelta(days=day.weekday()))


def day_of_week_index(date_iso: str) -> int:
    """Day of week with Sunday=0 ... Saturday=6"""
    return (parse_iso_date(date_iso).weekday() + 1) % 7
