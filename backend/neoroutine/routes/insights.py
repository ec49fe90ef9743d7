"""
Insights Routes - Cached analytics summaries for users and coaches
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from neoroutine.core.config import settings
from neoroutine.core.constants import MAX_INSIGHTS_RANGE_DAYS
from neoroutine.core.dependencies import get_current_user_id, get_insights_cache
from neoroutine.core.exceptions import DatabaseError
from neoroutine.models.envelope import ApiEnvelope
from neoroutine.models.insights import UserInsights, CoachInsights
from neoroutine.services import analytics
from neoroutine.utils.cache import TTLCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("/user", response_model=ApiEnvelope[UserInsights])
async def user_insights(
    days: int = Query(settings.DEFAULT_INSIGHTS_RANGE, alias="range", ge=1, le=MAX_INSIGHTS_RANGE_DAYS),
    user_id: str = Depends(get_current_user_id),
    cache: TTLCache = Depends(get_insights_cache)
):
    """Get the user's insight summary over the last `range` days"""
    key = f"insights:{user_id}:{days}"
    cached = cache.get(key)
    if cached is not None:
        return ApiEnvelope(data=cached)

    try:
        data = await analytics.get_user_insights(user_id, days)
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"[Insights] Failed for user {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load insights")

    cache.set(key, data)
    return ApiEnvelope(data=data)


@router.get("/coach", response_model=ApiEnvelope[CoachInsights])
async def coach_insights(
    days: int = Query(settings.DEFAULT_INSIGHTS_RANGE, alias="range", ge=1, le=MAX_INSIGHTS_RANGE_DAYS),
    user_id: str = Depends(get_current_user_id),
    cache: TTLCache = Depends(get_insights_cache)
):
    """Get analytics across the clients coached by the current user"""
    key = f"insights:coach:{user_id}:{days}"
    cached = cache.get(key)
    if cached is not None:
        return ApiEnvelope(data=cached)

    try:
        data = await analytics.get_coach_insights(user_id, days)
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"[Insights] Coach insights failed for {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load coach insights")

    cache.set(key, data)
    return ApiEnvelope(data=data)
