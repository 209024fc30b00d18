"""Child record management, scoped to the caller's orphanage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.orm import joinedload

from carelink.auth.service import get_orphanage_for, require_orphanage
from carelink.children.schemas import ChildCreate, ChildUpdate, PublicChild
from carelink.common.normalize import (
    normalize_fields,
    stamp_timestamps,
    strip_server_owned,
)
from carelink.common.schemas import validate_payload
from carelink.common.uploads import save_photo
from carelink.common.upsert import update_owned
from carelink.db.models import Child, Orphanage
from carelink.errors import NotFound

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from carelink.auth.context import CallerContext
    from carelink.config import Settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class PhotoUpload:
    content: bytes
    filename: str | None
    content_type: str | None


async def list_children(db: AsyncSession, caller: CallerContext) -> list[Child]:
    """All children of the caller's orphanage; empty when the caller has none."""
    orphanage = await get_orphanage_for(db, caller)
    if orphanage is None:
        return []
    result = await db.execute(
        select(Child).where(Child.orphanage_id == orphanage.id).order_by(Child.created_at.desc())
    )
    return list(result.scalars().all())


async def get_owned_child(db: AsyncSession, orphanage: Orphanage, child_id: str) -> Child:
    """Fetch a child restricted to ``orphanage``; foreign children look absent."""
    result = await db.execute(
        select(Child).where(Child.id == child_id, Child.orphanage_id == orphanage.id)
    )
    child = result.scalar_one_or_none()
    if child is None:
        raise NotFound("Child not found")
    return child


async def get_child(db: AsyncSession, caller: CallerContext, child_id: str) -> Child:
    orphanage = await require_orphanage(db, caller)
    return await get_owned_child(db, orphanage, child_id)


async def create_child(
    db: AsyncSession,
    caller: CallerContext,
    raw: dict[str, Any],
    photo: PhotoUpload | None,
    settings: Settings,
) -> Child:
    """
    Add a child to the caller's orphanage.

    The photo, if any, is written to storage before the row.

    Raises:
        NotFound: The caller has no orphanage.
        ValidationFailed: Missing/invalid fields or a rejected photo.
    """
    orphanage = await require_orphanage(db, caller)
    cleaned = normalize_fields(
        strip_server_owned(raw),
        policy=settings.date_parse_failure,
        wrap_scalar_lists=True,
    )
    body = validate_payload(ChildCreate, cleaned)

    photo_url: str | None = None
    if photo is not None and photo.content:
        photo_url = save_photo(
            photo.content,
            filename=photo.filename,
            content_type=photo.content_type,
            settings=settings,
        )

    values = stamp_timestamps(
        {**body.model_dump(), "orphanage_id": orphanage.id, "photo_url": photo_url, "is_adopted": False},
        inserting=True,
    )
    child = Child(**values)
    db.add(child)
    await db.flush()

    logger.info("child_created", child_id=child.id, orphanage_id=orphanage.id, has_photo=photo_url is not None)
    return child


async def update_child(
    db: AsyncSession,
    caller: CallerContext,
    child_id: str,
    raw: dict[str, Any],
    settings: Settings,
) -> Child:
    """
    Apply a partial update to an owned child.

    Server-owned keys from the client (``id``, ``orphanageId``, timestamps)
    are discarded before any parsing, so a child can never move to another
    orphanage through this path.
    """
    orphanage = await require_orphanage(db, caller)
    await get_owned_child(db, orphanage, child_id)

    cleaned = normalize_fields(
        strip_server_owned(raw),
        policy=settings.date_parse_failure,
        wrap_scalar_lists=True,
    )
    body = validate_payload(ChildUpdate, cleaned)
    changes = body.model_dump(exclude_unset=True)
    for key in ("first_name", "last_name", "date_of_birth", "gender", "is_adopted"):
        if key in changes and changes[key] is None:
            del changes[key]
    for key in ("needs", "interests"):
        if key in changes and changes[key] is None:
            changes[key] = []

    values = stamp_timestamps(changes, inserting=False)
    child = await update_owned(db, Child, child_id, Child.orphanage_id, orphanage.id, values)

    logger.info("child_updated", child_id=child_id, orphanage_id=orphanage.id, fields=sorted(changes))
    return child


async def delete_child(db: AsyncSession, caller: CallerContext, child_id: str) -> Child:
    """Remove an owned child and return the record as it was."""
    orphanage = await require_orphanage(db, caller)
    child = await get_owned_child(db, orphanage, child_id)
    await db.execute(delete(Child).where(Child.id == child_id, Child.orphanage_id == orphanage.id))
    logger.info("child_deleted", child_id=child_id, orphanage_id=orphanage.id)
    return child


async def list_available_children(db: AsyncSession) -> list[PublicChild]:
    """Every child not yet adopted, joined with a summary of their orphanage."""
    result = await db.execute(
        select(Child)
        .options(joinedload(Child.orphanage))
        .where(Child.is_adopted.is_(False))
        .order_by(Child.created_at.desc())
    )
    return [PublicChild.model_validate(child) for child in result.scalars().all()]
