"""Child endpoints: orphanage-scoped CRUD and the public listing."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from carelink.auth.context import CallerContext
from carelink.auth.dependencies import get_caller
from carelink.children.schemas import ChildList, ChildResponse, PublicChild
from carelink.children.service import (
    PhotoUpload,
    create_child,
    delete_child,
    get_child,
    list_available_children,
    list_children,
    update_child,
)
from carelink.config import get_settings
from carelink.dashboard.service import invalidate_dashboard_cache
from carelink.database import get_session
from carelink.errors import ValidationFailed
from carelink.redis_client import get_optional_redis

router = APIRouter(prefix="/api/v1/orphanage/children", tags=["Children"])
public_router = APIRouter(prefix="/api/v1/children", tags=["Children"])

_LIST_FORM_FIELDS = ("needs", "interests")


async def _read_child_form(request: Request) -> tuple[dict[str, Any], PhotoUpload | None]:
    """Split a multipart (or JSON) create request into fields and an optional photo."""
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise ValidationFailed({"_form": "Invalid request body"})
        return body, None

    form = await request.form()
    raw: dict[str, Any] = {}
    photo: PhotoUpload | None = None
    for key in form:
        if key == "image":
            upload = form.get("image")
            if isinstance(upload, UploadFile) and upload.filename:
                photo = PhotoUpload(
                    content=await upload.read(),
                    filename=upload.filename,
                    content_type=upload.content_type,
                )
        elif key in _LIST_FORM_FIELDS:
            values = [v for v in form.getlist(key) if isinstance(v, str)]
            raw[key] = values[0] if len(values) == 1 else values
        else:
            value = form.get(key)
            if isinstance(value, str):
                raw[key] = value
    return raw, photo


@router.get("", response_model=ChildList)
async def list_my_children(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> ChildList:
    """Children of the caller's orphanage."""
    children = await list_children(db, caller)
    return ChildList(data=[ChildResponse.model_validate(c) for c in children])


@router.post("", response_model=ChildResponse, status_code=201)
async def add_child(
    request: Request,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> ChildResponse:
    """Add a child. Accepts multipart form fields plus an optional ``image`` file."""
    raw, photo = await _read_child_form(request)
    child = await create_child(db, caller, raw, photo, get_settings())
    await db.commit()
    await invalidate_dashboard_cache(get_optional_redis(), child.orphanage_id)
    return ChildResponse.model_validate(child)


@router.get("/{child_id}", response_model=ChildResponse)
async def get_one_child(
    child_id: str,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> ChildResponse:
    child = await get_child(db, caller, child_id)
    return ChildResponse.model_validate(child)


@router.put("/{child_id}", response_model=ChildResponse)
async def edit_child(
    child_id: str,
    body: dict[str, Any] = Body(...),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> ChildResponse:
    """Update a child. Server-owned keys in the body are ignored."""
    child = await update_child(db, caller, child_id, body, get_settings())
    await db.commit()
    await invalidate_dashboard_cache(get_optional_redis(), child.orphanage_id)
    return ChildResponse.model_validate(child)


@router.delete("/{child_id}", status_code=204)
async def remove_child(
    child_id: str,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> Response:
    child = await delete_child(db, caller, child_id)
    await db.commit()
    await invalidate_dashboard_cache(get_optional_redis(), child.orphanage_id)
    return Response(status_code=204)


@public_router.get("", response_model=list[PublicChild])
async def available_children(
    db: AsyncSession = Depends(get_session),
) -> list[PublicChild]:
    """Children not yet adopted, with their orphanage. No sign-in required."""
    return await list_available_children(db)
