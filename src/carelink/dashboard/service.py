"""Orphanage dashboard counts.

Computed with two aggregate queries and cached in Redis, when Redis is
available, for ``dashboard_cache_ttl_seconds``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from redis.exceptions import RedisError
from sqlalchemy import and_, case, func, select

from carelink.dashboard.schemas import DashboardStats
from carelink.db.models import Child, Orphanage, VolunteerProfile

if TYPE_CHECKING:
    import redis.asyncio as aioredis
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

DASHBOARD_CACHE_KEY = "dashboard:orphanage:{orphanage_id}"


def start_of_month(now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


async def compute_stats(session: AsyncSession, orphanage: Orphanage, now: datetime | None = None) -> DashboardStats:
    """Count the orphanage's children by adoption state, plus all volunteers."""
    month_start = start_of_month(now)
    children = (
        await session.execute(
            select(
                func.count(Child.id),
                func.coalesce(func.sum(case((Child.is_adopted.is_(False), 1), else_=0)), 0),
                func.coalesce(
                    func.sum(case((and_(Child.is_adopted.is_(True), Child.updated_at >= month_start), 1), else_=0)),
                    0,
                ),
            ).where(Child.orphanage_id == orphanage.id)
        )
    ).one()
    # Volunteers are not linked to orphanages, so every profile counts.
    volunteers = (await session.execute(select(func.count(VolunteerProfile.id)))).scalar_one()

    return DashboardStats(
        name=orphanage.name,
        total_children=int(children[0] or 0),
        available_for_adoption=int(children[1] or 0),
        adopted_this_month=int(children[2] or 0),
        active_volunteers=int(volunteers or 0),
    )


async def get_dashboard_stats(
    session: AsyncSession,
    redis: aioredis.Redis | None,
    orphanage: Orphanage,
    ttl_seconds: int,
) -> DashboardStats:
    """Cached dashboard stats. A missing or failing Redis only disables the cache."""
    cache_key = DASHBOARD_CACHE_KEY.format(orphanage_id=orphanage.id)

    if redis is not None:
        try:
            cached = await redis.get(cache_key)
        except RedisError:
            logger.warning("dashboard_cache_unavailable", orphanage_id=orphanage.id, exc_info=True)
            redis = None
        else:
            if cached:
                return DashboardStats.model_validate_json(cached)

    stats = await compute_stats(session, orphanage)

    if redis is not None and ttl_seconds > 0:
        try:
            await redis.set(cache_key, stats.model_dump_json(by_alias=True), ex=ttl_seconds)
        except RedisError:
            logger.warning("dashboard_cache_write_failed", orphanage_id=orphanage.id, exc_info=True)
    return stats


async def invalidate_dashboard_cache(redis: aioredis.Redis | None, orphanage_id: str) -> None:
    """Drop the cached stats after the orphanage's children change."""
    if redis is None:
        return
    try:
        await redis.delete(DASHBOARD_CACHE_KEY.format(orphanage_id=orphanage_id))
    except RedisError:
        logger.warning("dashboard_cache_invalidate_failed", orphanage_id=orphanage_id, exc_info=True)
