"""
Repository - Centralized database access layer
All Supabase queries for users, routines, check-ins, goals, badges and reminders
"""
from typing import List, Dict, Any, Optional
import logging

from postgrest.exceptions import APIError

from neoroutine.core.constants import (
    USERS_TABLE,
    ROUTINES_TABLE,
    CHECK_INS_TABLE,
    GOALS_TABLE,
    BADGES_TABLE,
    ROUTINE_TEMPLATES_TABLE,
    REMINDER_LOG_TABLE,
    UNIQUE_VIOLATION_CODE,
)
from neoroutine.core.dependencies import get_supabase_client
from neoroutine.core.exceptions import (
    DatabaseError,
    BadgeAlreadyExistsError,
    CheckInAlreadyExistsError,
)

logger = logging.getLogger(__name__)


def _is_unique_violation(error: Exception) -> bool:
    return isinstance(error, APIError) and error.code == UNIQUE_VIOLATION_CODE


# ============================================================================
# USERS TABLE
# ============================================================================

async def get_user(user_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a single user by ID

    Args:
        user_id: The user ID

    Returns:
        User dictionary or None if not found

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(USERS_TABLE)\
            .select("id, name, email, analytics, preferences, coaching")\
            .eq("id", user_id)\
            .execute()
        return result.data[0] if result.data else None
    except Exception as e:
        logger.error(f"Database error fetching user {user_id}: {e}")
        raise DatabaseError(f"Failed to fetch user: {e}")


async def get_all_users() -> List[Dict[str, Any]]:
    """
    Get every user with the fields the reminder sweep needs

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(USERS_TABLE)\
            .select("id, analytics, preferences")\
            .execute()
        return result.data
    except Exception as e:
        logger.error(f"Database error fetching users: {e}")
        raise DatabaseError(f"Failed to fetch users: {e}")


async def update_user_analytics_if_unchanged(user_id: str, expected_total: Optional[int],
                                             analytics: Dict[str, Any]) -> bool:
    """
    Replace the analytics sub-object only if total_check_ins still has the value it was read with

    total_check_ins only ever grows, so it serves as the row version.

    Args:
        user_id: The user ID
        expected_total: total_check_ins as read (None when the key was absent)
        analytics: Full analytics dict (total_check_ins, streaks, last_active_date)

    Returns:
        True if the row was updated, False if another write got there first

    Raises:
        DatabaseError: If update fails
    """
    try:
        supabase = await get_supabase_client()
        query = supabase.table(USERS_TABLE)\
            .update({"analytics": analytics})\
            .eq("id", user_id)
        if expected_total is None:
            query = query.is_("analytics->>total_check_ins", "null")
        else:
            query = query.eq("analytics->>total_check_ins", str(expected_total))
        result = await query.execute()
        return bool(result.data)
    except Exception as e:
        logger.error(f"Database error updating analytics for user {user_id}: {e}")
        raise DatabaseError(f"Failed to update user analytics: {e}")


async def get_coach_clients(coach_id: str) -> List[Dict[str, Any]]:
    """
    Get users actively coached by a coach

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(USERS_TABLE)\
            .select("id, name, email, analytics, coaching")\
            .eq("coaching->>coach_id", coach_id)\
            .eq("coaching->>status", "active")\
            .execute()
        return result.data
    except Exception as e:
        logger.error(f"Database error fetching clients for coach {coach_id}: {e}")
        raise DatabaseError(f"Failed to fetch coach clients: {e}")


# ============================================================================
# ROUTINES TABLE
# ============================================================================

async def get_active_routines(user_id: str) -> List[Dict[str, Any]]:
    """
    Get all non-archived routines of a user

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(ROUTINES_TABLE)\
            .select("*")\
            .eq("user_id", user_id)\
            .eq("is_archived", False)\
            .execute()
        return result.data
    except Exception as e:
        logger.error(f"Database error fetching routines for user {user_id}: {e}")
        raise DatabaseError(f"Failed to fetch routines: {e}")


async def get_active_routine(user_id: str, routine_id: str) -> Optional[Dict[str, Any]]:
    """
    Get one non-archived routine owned by the user

    Returns:
        Routine dictionary or None if not found

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(ROUTINES_TABLE)\
            .select("*")\
            .eq("id", routine_id)\
            .eq("user_id", user_id)\
            .eq("is_archived", False)\
            .execute()
        return result.data[0] if result.data else None
    except Exception as e:
        logger.error(f"Database error fetching routine {routine_id}: {e}")
        raise DatabaseError(f"Failed to fetch routine: {e}")


async def count_active_routines(user_id: str) -> int:
    """
    Count non-archived routines of a user

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(ROUTINES_TABLE)\
            .select("id", count="exact")\
            .eq("user_id", user_id)\
            .eq("is_archived", False)\
            .execute()
        return result.count or 0
    except Exception as e:
        logger.error(f"Database error counting routines for user {user_id}: {e}")
        raise DatabaseError(f"Failed to count routines: {e}")


# ============================================================================
# CHECK_INS TABLE
# ============================================================================

async def get_check_ins_in_range(user_ids: List[str], start_iso: str, end_iso: str) -> List[Dict[str, Any]]:
    """
    Get check-ins of one or more users between two ISO dates (inclusive)

    Args:
        user_ids: Users whose check-ins to fetch
        start_iso: First date (YYYY-MM-DD)
        end_iso: Last date (YYYY-MM-DD)

    Returns:
        List of check-in dictionaries

    Raises:
        DatabaseError: If query fails
    """
    if not user_ids:
        return []
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(CHECK_INS_TABLE)\
            .select("id, user_id, routine_id, task_id, date_iso, created_at")\
            .in_("user_id", user_ids)\
            .gte("date_iso", start_iso)\
            .lte("date_iso", end_iso)\
            .execute()
        return result.data
    except Exception as e:
        logger.error(f"Database error fetching check-ins {start_iso}..{end_iso}: {e}")
        raise DatabaseError(f"Failed to fetch check-ins: {e}")


async def get_check_in(user_id: str, routine_id: str, task_id: str, date_iso: str) -> Optional[Dict[str, Any]]:
    """
    Get the check-in for one task on one day

    Returns:
        Check-in dictionary or None if not found

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(CHECK_INS_TABLE)\
            .select("*")\
            .eq("user_id", user_id)\
            .eq("routine_id", routine_id)\
            .eq("task_id", task_id)\
            .eq("date_iso", date_iso)\
            .execute()
        return result.data[0] if result.data else None
    except Exception as e:
        logger.error(f"Database error fetching check-in for task {task_id} on {date_iso}: {e}")
        raise DatabaseError(f"Failed to fetch check-in: {e}")


async def create_check_in(user_id: str, routine_id: str, task_id: str, date_iso: str,
                          note: str = "") -> Dict[str, Any]:
    """
    Create a new check-in

    Returns:
        Created check-in data

    Raises:
        CheckInAlreadyExistsError: If the task is already checked for that day
        DatabaseError: If insert fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(CHECK_INS_TABLE).insert({
            "user_id": user_id,
            "routine_id": routine_id,
            "task_id": task_id,
            "date_iso": date_iso,
            "note": note,
        }).execute()
        return result.data[0] if result.data else {}
    except Exception as e:
        if _is_unique_violation(e):
            raise CheckInAlreadyExistsError("Task already completed for this day")
        logger.error(f"Database error creating check-in: {e}")
        raise DatabaseError(f"Failed to create check-in: {e}")


async def delete_check_in(user_id: str, routine_id: str, task_id: str, date_iso: str) -> int:
    """
    Delete the check-in for one task on one day

    Returns:
        Number of deleted rows

    Raises:
        DatabaseError: If delete fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(CHECK_INS_TABLE)\
            .delete()\
            .eq("user_id", user_id)\
            .eq("routine_id", routine_id)\
            .eq("task_id", task_id)\
            .eq("date_iso", date_iso)\
            .execute()
        return len(result.data or [])
    except Exception as e:
        logger.error(f"Database error deleting check-in for task {task_id} on {date_iso}: {e}")
        raise DatabaseError(f"Failed to delete check-in: {e}")


# ============================================================================
# GOALS TABLE
# ============================================================================

async def get_goals(user_id: str, statuses: List[str]) -> List[Dict[str, Any]]:
    """
    Get a user's goals in any of the given statuses

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(GOALS_TABLE)\
            .select("*")\
            .eq("user_id", user_id)\
            .in_("status", statuses)\
            .execute()
        return result.data
    except Exception as e:
        logger.error(f"Database error fetching goals for user {user_id}: {e}")
        raise DatabaseError(f"Failed to fetch goals: {e}")


async def count_goals(user_id: str, status: Optional[str] = None) -> int:
    """
    Count a user's goals, optionally only those in one status

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        query = supabase.table(GOALS_TABLE).select("id", count="exact").eq("user_id", user_id)
        if status:
            query = query.eq("status", status)
        result = await query.execute()
        return result.count or 0
    except Exception as e:
        logger.error(f"Database error counting goals for user {user_id}: {e}")
        raise DatabaseError(f"Failed to count goals: {e}")


# ============================================================================
# BADGES TABLE
# ============================================================================

async def insert_badge_if_absent(user_id: str, badge_id: str, context: Dict[str, Any],
                                 earned_at: str) -> Optional[Dict[str, Any]]:
    """
    Insert a badge unless (user_id, badge_id) already exists

    Returns:
        The new badge row, or None when the pair was already present

    Raises:
        BadgeAlreadyExistsError: If a concurrent insert won the unique index
        DatabaseError: If the upsert fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(BADGES_TABLE).upsert(
            {
                "user_id": user_id,
                "badge_id": badge_id,
                "context": context,
                "seen": False,
                "earned_at": earned_at,
            },
            on_conflict="user_id,badge_id",
            ignore_duplicates=True,
        ).execute()
        return result.data[0] if result.data else None
    except Exception as e:
        if _is_unique_violation(e):
            raise BadgeAlreadyExistsError(f"Badge {badge_id} already awarded")
        logger.error(f"Database error inserting badge {badge_id} for user {user_id}: {e}")
        raise DatabaseError(f"Failed to insert badge: {e}")


async def get_badges(user_id: str) -> List[Dict[str, Any]]:
    """
    Get a user's badges, newest first

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(BADGES_TABLE)\
            .select("*")\
            .eq("user_id", user_id)\
            .order("earned_at", desc=True)\
            .execute()
        return result.data
    except Exception as e:
        logger.error(f"Database error fetching badges for user {user_id}: {e}")
        raise DatabaseError(f"Failed to fetch badges: {e}")


async def mark_badges_seen(user_id: str, badge_ids: Optional[List[str]] = None) -> int:
    """
    Mark unseen badges as seen (all of them when badge_ids is empty)

    Returns:
        Number of badges updated

    Raises:
        DatabaseError: If update fails
    """
    try:
        supabase = await get_supabase_client()
        query = supabase.table(BADGES_TABLE)\
            .update({"seen": True})\
            .eq("user_id", user_id)\
            .eq("seen", False)
        if badge_ids:
            query = query.in_("badge_id", badge_ids)
        result = await query.execute()
        return len(result.data or [])
    except Exception as e:
        logger.error(f"Database error marking badges seen for user {user_id}: {e}")
        raise DatabaseError(f"Failed to update badges: {e}")


# ============================================================================
# ROUTINE_TEMPLATES TABLE
# ============================================================================

async def get_coach_templates(coach_id: str) -> List[Dict[str, Any]]:
    """
    Get the routine templates published by a coach

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(ROUTINE_TEMPLATES_TABLE)\
            .select("id, title, stats")\
            .eq("coach_id", coach_id)\
            .execute()
        return result.data
    except Exception as e:
        logger.error(f"Database error fetching templates for coach {coach_id}: {e}")
        raise DatabaseError(f"Failed to fetch templates: {e}")


# ============================================================================
# REMINDER_LOG TABLE
# ============================================================================

async def get_reminders_for_date(target_date: str, reminder_type: str) -> List[Dict[str, Any]]:
    """
    Get reminders of one type already logged for a date

    Raises:
        DatabaseError: If query fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(REMINDER_LOG_TABLE)\
            .select("*")\
            .eq("date", target_date)\
            .eq("reminder_type", reminder_type)\
            .execute()
        return result.data
    except Exception as e:
        logger.error(f"Database error fetching reminders for {target_date}: {e}")
        raise DatabaseError(f"Failed to fetch reminders: {e}")


async def create_reminder_log(user_id: str, target_date: str, reminder_type: str,
                              intensity: str, message: str) -> Dict[str, Any]:
    """
    Log a reminder prepared for a user

    Returns:
        Created reminder log entry

    Raises:
        DatabaseError: If insert fails
    """
    try:
        supabase = await get_supabase_client()
        result = await supabase.table(REMINDER_LOG_TABLE).insert({
            "user_id": user_id,
            "date": target_date,
            "reminder_type": reminder_type,
            "intensity": intensity,
            "message": message,
        }).execute()
        return result.data[0] if result.data else {}
    except Exception as e:
        logger.error(f"Database error creating reminder log: {e}")
        raise DatabaseError(f"Failed to create reminder log: {e}")
