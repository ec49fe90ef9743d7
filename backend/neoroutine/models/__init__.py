"""
Pydantic models for the application
"""
from neoroutine.models.envelope import ApiEnvelope, decode_envelope
from neoroutine.models.checkin import CheckInRequest, UncheckRequest
from neoroutine.models.badge import AwardBadgeRequest, MarkSeenRequest
from neoroutine.models.insights import UserInsights, CoachInsights

__all__ = [
    "ApiEnvelope",
    "decode_envelope",
    "CheckInRequest",
    "UncheckRequest",
    "AwardBadgeRequest",
    "MarkSeenRequest",
    "UserInsights",
    "CoachInsights"
]
