"""
Badge Routes - Listing, claiming and acknowledging badges
"""
import logging
from fastapi import APIRouter, Depends, HTTPException

from neoroutine.core.dependencies import get_current_user_id
from neoroutine.core.exceptions import UnknownBadgeError, DatabaseError
from neoroutine.models.badge import AwardBadgeRequest, MarkSeenRequest
from neoroutine.models.envelope import ApiEnvelope
from neoroutine.services import repository
from neoroutine.services.badges import (
    BADGE_DEFINITIONS,
    MANUALLY_AWARDABLE,
    RARITY_COLORS,
    award_badge,
    get_celebration_for_badge,
    is_known_badge,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/badges", tags=["badges"])


def _check_awardable(badge_id: str) -> None:
    if not is_known_badge(badge_id):
        raise UnknownBadgeError(f"Unknown badge: {badge_id}")
    if badge_id not in MANUALLY_AWARDABLE:
        raise UnknownBadgeError(f"Badge {badge_id} is earned automatically")


@router.get("")
async def list_badges(user_id: str = Depends(get_current_user_id)):
    """Get the user's badges with their catalogue entries"""
    try:
        badges = await repository.get_badges(user_id)
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))

    enriched = [
        {**badge, "definition": BADGE_DEFINITIONS.get(badge["badge_id"])}
        for badge in badges
    ]
    return ApiEnvelope(data={
        "badges": enriched,
        "count": len(enriched),
        "unseen_count": sum(1 for b in enriched if not b.get("seen")),
        "definitions": BADGE_DEFINITIONS,
        "rarity_colors": RARITY_COLORS,
    })


@router.post("")
async def claim_badge(request: AwardBadgeRequest, user_id: str = Depends(get_current_user_id)):
    """Claim a badge that the client detects itself (e.g. explorer)"""
    try:
        _check_awardable(request.badge_id)
    except UnknownBadgeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = await award_badge(user_id, request.badge_id, request.context)
    if result.get("error"):
        raise HTTPException(status_code=500, detail=result["error"])

    if not result["awarded"]:
        return ApiEnvelope(message="Badge already earned", data={"awarded": False, "already_exists": True})

    return ApiEnvelope(
        message="Badge awarded",
        data={
            "awarded": True,
            "badge": result["badge"],
            "definition": BADGE_DEFINITIONS.get(request.badge_id),
            "celebration": get_celebration_for_badge(request.badge_id),
        }
    )


@router.patch("/seen")
async def mark_seen(request: MarkSeenRequest, user_id: str = Depends(get_current_user_id)):
    """Mark badges as seen (all unseen badges when no ids are given)"""
    try:
        updated = await repository.mark_badges_seen(user_id, request.badge_ids)
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return ApiEnvelope(message="Badges marked as seen", data={"updated": updated})
