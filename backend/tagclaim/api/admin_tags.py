# backend/tagclaim/api/admin_tags.py
"""Administrative NFC tag management, gated by the shared admin password."""
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Query, status

from tagclaim.api.deps import AdminAccess, AppSettings, DBSession, Registry
from tagclaim.models.nfc_tag import TagStatus
from tagclaim.schemas.common import Pagination
from tagclaim.schemas.nfc_tag import (
    TagCreate, TagInjectUpdate, TagStatusUpdate,
    TagEnvelope, TagListEnvelope, DeletedTag, DeletedTagEnvelope,
)
from tagclaim.services.projection import project_admin_tags, project_tag

router = APIRouter(prefix="/nfc/admin", tags=["NFC Tag Administration"], dependencies=[AdminAccess])


@router.post("/create-tag", response_model=TagEnvelope, status_code=status.HTTP_201_CREATED)
def create_tag(
    registry: Registry,
    db: DBSession,
    tag_data: Annotated[Optional[TagCreate], Body()] = None,
):
    """Create an AVAILABLE tag. A random 16 character ID is generated unless one is given."""
    tag_id = tag_data.tag_id if tag_data else None
    tag = registry.create(tag_id)
    return TagEnvelope(
        message="NFC tag created successfully",
        data=project_tag(db, tag),
    )


@router.get("/tags", response_model=TagListEnvelope)
def list_tags(
    registry: Registry,
    db: DBSession,
    settings: AppSettings,
    tag_status: Annotated[Optional[TagStatus], Query(alias="status")] = None,
    user_id: Annotated[Optional[UUID], Query(alias="userId")] = None,
    is_injected: Annotated[Optional[bool], Query(alias="isInjected")] = None,
    limit: Annotated[int, Query(ge=1)] = 1000,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    limit = min(limit, settings.admin_list_max_limit)
    tags, total = registry.list(
        status=tag_status,
        owner_id=user_id,
        is_injected=is_injected,
        limit=limit,
        offset=offset,
    )
    return TagListEnvelope(
        data=project_admin_tags(db, tags),
        pagination=Pagination(total=total, limit=limit, offset=offset),
    )


@router.post("/{tag_id}/delete", response_model=DeletedTagEnvelope)
def delete_tag(tag_id: str, registry: Registry):
    """Hard delete. A claimed tag is deleted too; its owner simply no longer has a tag."""
    registry.delete(tag_id)
    return DeletedTagEnvelope(
        message="NFC tag deleted successfully",
        data=DeletedTag(tag_id=tag_id),
    )


@router.post("/{tag_id}/inject", response_model=TagEnvelope)
def set_injected(
    tag_id: str,
    registry: Registry,
    db: DBSession,
    update: Annotated[Optional[TagInjectUpdate], Body()] = None,
):
    is_injected = update.is_injected if update else True
    tag = registry.set_injected(tag_id, is_injected)
    return TagEnvelope(
        message=f"NFC tag {'marked as injected' if is_injected else 'marked as not injected'}",
        data=project_tag(db, tag),
    )


@router.post("/{tag_id}/status", response_model=TagEnvelope)
def set_status(tag_id: str, update: TagStatusUpdate, registry: Registry, db: DBSession):
    """Release or disable a tag. Moving a claimed tag here drops its owner."""
    tag = registry.set_status(tag_id, update.status)
    return TagEnvelope(
        message=f"NFC tag status set to {tag.status.value}",
        data=project_tag(db, tag),
    )
