"""
Health Routes - Health check endpoints
"""
from fastapi import APIRouter

from neoroutine.models.envelope import ApiEnvelope

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return ApiEnvelope(message="Server is alive", data={"status": "ok"})
