"""Orphanage dashboard endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carelink.auth.context import CallerContext
from carelink.auth.dependencies import get_caller
from carelink.auth.service import require_orphanage
from carelink.config import get_settings
from carelink.dashboard.schemas import DashboardStats
from carelink.dashboard.service import get_dashboard_stats
from carelink.database import get_session
from carelink.redis_client import get_optional_redis

router = APIRouter(prefix="/api/v1/orphanage/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardStats)
async def dashboard_stats(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> DashboardStats:
    """Children and volunteer counts for the caller's orphanage (briefly cached in Redis)."""
    orphanage = await require_orphanage(db, caller)
    return await get_dashboard_stats(db, get_optional_redis(), orphanage, get_settings().dashboard_cache_ttl_seconds)
