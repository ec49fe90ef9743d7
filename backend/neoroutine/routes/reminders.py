"""
Reminder Routes - Gentle and adaptive messages
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from neoroutine.core.dependencies import get_current_user_id
from neoroutine.core.exceptions import DatabaseError
from neoroutine.models.envelope import ApiEnvelope
from neoroutine.services import reminders

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.get("/message")
async def gentle_message(
    today_percent: float = Query(0, ge=0),
    weekly_percent: float = Query(0, ge=0),
    days_since_active: Optional[int] = Query(None, ge=0)
):
    """Get a gentle micro-message for the given progress"""
    message = reminders.get_gentle_message(today_percent, weekly_percent, days_since_active)
    return ApiEnvelope(data={
        "message": message,
        "bucket": "recovery" if reminders.is_recovery(days_since_active)
        else reminders.get_progress_bucket(today_percent),
    })


@router.get("/adaptive")
async def adaptive_reminder(user_id: str = Depends(get_current_user_id)):
    """Get the adaptive reminder for the current user from the last 7 days"""
    try:
        return ApiEnvelope(data=await reminders.get_user_adaptive_reminder(user_id))
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))
