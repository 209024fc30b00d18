"""Insert-or-update dispatch keyed by owner identity.

Single-row-per-owner entities (orphanages, volunteer profiles, user mirrors)
rely on a unique constraint on the owner column and a conflict-handling
INSERT, so two concurrent saves for the same owner cannot produce two rows.
Multi-row entities (children, activities) are updated with a compound
``id AND owner`` condition.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar

import structlog
from sqlalchemy import ColumnElement, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from carelink.db.base import Base
from carelink.errors import PersistenceError

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=Base)

# Never overwritten by the update branch of an upsert.
IMMUTABLE_COLUMNS = frozenset({"id", "created_at"})


def dialect_insert(db: AsyncSession, model: type[ModelT]) -> Any:  # noqa: ANN401
    """Return the dialect-specific INSERT construct that supports ON CONFLICT."""
    if db.get_bind().dialect.name == "sqlite":
        return sqlite_insert(model)
    return pg_insert(model)


async def insert_once(
    db: AsyncSession,
    model: type[ModelT],
    values: dict[str, Any],
    conflict_column: InstrumentedAttribute[Any] | None = None,
) -> ModelT | None:
    """
    Insert a row unless it conflicts with an existing one.

    Returns the new row, or None if a conflicting row already existed.
    Without ``conflict_column`` any unique constraint counts as a conflict.
    """
    stmt = dialect_insert(db, model).values(**values)
    index_elements = [conflict_column.key] if conflict_column is not None else None
    stmt = stmt.on_conflict_do_nothing(index_elements=index_elements).returning(model)
    result = await db.execute(stmt, execution_options={"populate_existing": True})
    return result.scalar_one_or_none()


async def upsert_owned_row(
    db: AsyncSession,
    model: type[ModelT],
    owner_column: InstrumentedAttribute[Any],
    values: dict[str, Any],
) -> ModelT:
    """
    Insert the owner's row, or update it in place when one already exists.

    On the update branch every supplied column except the id, the owner key
    and ``created_at`` is overwritten.
    """
    stmt = dialect_insert(db, model).values(**values)
    protected = IMMUTABLE_COLUMNS | {owner_column.key}
    set_ = {key: stmt.excluded[key] for key in values if key not in protected}
    stmt = stmt.on_conflict_do_update(index_elements=[owner_column.key], set_=set_).returning(model)
    result = await db.execute(stmt, execution_options={"populate_existing": True})
    return result.scalar_one()


async def update_owned(
    db: AsyncSession,
    model: type[ModelT],
    entity_id: Any,  # noqa: ANN401
    owner_column: InstrumentedAttribute[Any],
    owner_id: Any,  # noqa: ANN401
    values: dict[str, Any],
    conditions: Iterable[ColumnElement[bool]] = (),
) -> ModelT:
    """
    Update one row restricted by ``id AND owner`` and return it.

    ``conditions`` further restrict the row, e.g. to the state it was read in.

    Raises:
        PersistenceError: If no row was affected. The caller has already
            resolved the row, so this means it vanished, changed owner or no
            longer meets ``conditions``.
    """
    stmt = (
        update(model)
        .where(model.id == entity_id, owner_column == owner_id, *conditions)  # type: ignore[attr-defined]
        .values(**values)
        .returning(model)
    )
    result = await db.execute(
        stmt,
        execution_options={"synchronize_session": "fetch", "populate_existing": True},
    )
    row = result.scalar_one_or_none()
    if row is None:
        logger.error(
            "update_affected_no_rows",
            table=model.__tablename__,
            entity_id=entity_id,
            owner_id=owner_id,
        )
        msg = f"No rows were updated in {model.__tablename__}"
        raise PersistenceError(msg)
    return row
