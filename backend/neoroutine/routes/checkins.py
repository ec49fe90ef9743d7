"""
Check-in Routes - Endpoints for checking and unchecking tasks
"""
import logging
from fastapi import APIRouter, Depends, HTTPException

from neoroutine.core.dependencies import get_current_user_id, get_insights_cache
from neoroutine.core.exceptions import (
    UserNotFoundError,
    RoutineNotFoundError,
    TaskNotFoundError,
    CheckInNotFoundError,
    CheckInAlreadyExistsError,
    InvalidCheckInDataError,
    DatabaseError
)
from neoroutine.models.checkin import CheckInRequest, UncheckRequest
from neoroutine.models.envelope import ApiEnvelope
from neoroutine.services import checkins as checkins_service
from neoroutine.utils.cache import TTLCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkins", tags=["checkins"])


def _invalidate_insights(cache: TTLCache, user_id: str) -> None:
    dropped = cache.invalidate_prefix(f"insights:{user_id}:")
    if dropped:
        logger.debug(f"[CheckIn] Dropped {dropped} cached insight(s) for user {user_id}")


@router.post("")
async def check_task(
    request: CheckInRequest,
    user_id: str = Depends(get_current_user_id),
    cache: TTLCache = Depends(get_insights_cache)
):
    """Mark a task as completed, update streaks and award any new badges"""
    try:
        result = await checkins_service.record_check_in(
            user_id,
            request.routine_id,
            request.task_id,
            date_iso=request.date_iso,
            note=request.note
        )
    except InvalidCheckInDataError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (UserNotFoundError, RoutineNotFoundError, TaskNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CheckInAlreadyExistsError:
        raise HTTPException(status_code=409, detail="Task already completed for this day")
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"[CheckIn] Unexpected error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Unexpected error: {str(e)}")

    if result["created"]:
        _invalidate_insights(cache, user_id)

    message = result.pop("message")
    return ApiEnvelope(message=message, data=result)


@router.delete("")
async def uncheck_task(
    request: UncheckRequest,
    user_id: str = Depends(get_current_user_id),
    cache: TTLCache = Depends(get_insights_cache)
):
    """Remove a check-in"""
    try:
        result = await checkins_service.remove_check_in(
            user_id,
            request.routine_id,
            request.task_id,
            date_iso=request.date_iso
        )
    except InvalidCheckInDataError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (UserNotFoundError, CheckInNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Unexpected error: {str(e)}")

    _invalidate_insights(cache, user_id)
    return ApiEnvelope(message=result["message"], data={"date": result["date"]})


@router.get("/today")
async def get_today(user_id: str = Depends(get_current_user_id)):
    """Get today's and this week's completion with a gentle message"""
    try:
        return ApiEnvelope(data=await checkins_service.get_today_progress(user_id))
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Unexpected error: {str(e)}")
