"""
Pydantic models for badges
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class AwardBadgeRequest(BaseModel):
    """Request model for claiming a badge directly"""
    badge_id: str = Field(..., min_length=1, description="Badge identifier")
    context: Optional[Dict[str, Any]] = Field(None, description="Optional context stored with the badge")


class MarkSeenRequest(BaseModel):
    """Request model for marking badges as seen (all unseen when empty)"""
    badge_ids: Optional[List[str]] = None
