"""Orphanage registration and settings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from carelink.auth.service import ensure_user, get_orphanage_for, require_orphanage
from carelink.common.normalize import normalize_fields, stamp_timestamps, strip_server_owned
from carelink.common.schemas import validate_payload
from carelink.common.upsert import insert_once, update_owned
from carelink.db.models import Orphanage
from carelink.errors import AlreadyRegistered
from carelink.orphanages.schemas import OrphanageCreate, OrphanageUpdate

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from carelink.auth.context import CallerContext

logger = structlog.get_logger()

# Columns a settings patch may clear with null.
_NULLABLE_ON_PATCH = frozenset({"website"})


async def register_orphanage(db: AsyncSession, caller: CallerContext, raw: dict[str, Any]) -> Orphanage:
    """
    Register the caller's orphanage.

    The caller's User mirror is created after validation if needed. Registration fails
    when the caller already owns an orphanage, both on the pre-check and on
    the unique constraint if a concurrent registration wins.

    Raises:
        AlreadyRegistered: The caller already has an orphanage.
        ValidationFailed: The payload violates the registration schema.
    """
    if await get_orphanage_for(db, caller) is not None:
        raise AlreadyRegistered

    body = validate_payload(OrphanageCreate, normalize_fields(strip_server_owned(raw), date_fields=()))
    await ensure_user(db, caller)
    values = stamp_timestamps(body.model_dump(), inserting=True)
    values["user_id"] = caller.user_id
    values["is_approved"] = False

    orphanage = await insert_once(db, Orphanage, values, conflict_column=Orphanage.user_id)
    if orphanage is None:
        raise AlreadyRegistered

    logger.info("orphanage_registered", orphanage_id=orphanage.id, user_id=caller.user_id)
    return orphanage


async def update_orphanage(db: AsyncSession, caller: CallerContext, raw: dict[str, Any]) -> Orphanage:
    """Apply a validated settings patch to the caller's orphanage."""
    orphanage = await require_orphanage(db, caller)
    body = validate_payload(OrphanageUpdate, normalize_fields(strip_server_owned(raw), date_fields=()))

    changes = {
        key: value
        for key, value in body.model_dump(exclude_unset=True).items()
        if value is not None or key in _NULLABLE_ON_PATCH
    }
    values = stamp_timestamps(changes, inserting=False)
    updated = await update_owned(db, Orphanage, orphanage.id, Orphanage.user_id, caller.user_id, values)

    logger.info("orphanage_updated", orphanage_id=updated.id, fields=sorted(changes))
    return updated
