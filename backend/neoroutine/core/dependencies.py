"""
Dependency injection for shared clients and resources
"""
from typing import Optional

from fastapi import Header, HTTPException, Request
from supabase import AsyncClient, acreate_client

from neoroutine.core.config import settings
from neoroutine.utils.cache import TTLCache

# Created on first use so importing the app never needs database credentials
_supabase_client: Optional[AsyncClient] = None


async def get_supabase_client() -> AsyncClient:
    """Get the shared async Supabase client instance"""
    global _supabase_client
    if _supabase_client is None:
        _supabase_client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _supabase_client


def get_insights_cache(request: Request) -> TTLCache:
    """Get the insights cache owned by the running application"""
    return request.app.state.insights_cache


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """
    Resolve the current user id

    Session handling lives in front of this service; it forwards the
    authenticated user id in the X-User-Id header.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id
