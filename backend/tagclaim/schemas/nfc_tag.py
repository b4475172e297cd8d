# backend/tagclaim/schemas/nfc_tag.py
from datetime import datetime
from typing import Optional, List, Union
from uuid import UUID
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from tagclaim.models.nfc_tag import TagStatus
from tagclaim.schemas.common import Pagination
from tagclaim.schemas.user import OwnerBrief, OwnerSummary


class CamelModel(BaseModel):
    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class TagCreate(CamelModel):
    tag_id: Optional[str] = Field(None, min_length=1, max_length=255)


class TagInjectUpdate(CamelModel):
    is_injected: bool = True


class TagStatusUpdate(CamelModel):
    status: TagStatus


class TagRecord(CamelModel):
    id: UUID
    tag_id: str
    tag_url: str
    status: TagStatus
    owner_id: Optional[UUID] = None
    claimed_at: Optional[datetime] = None
    is_injected: bool
    viewed_count: int
    created_at: datetime
    updated_at: datetime


class TagResponse(TagRecord):
    owner: Optional[OwnerSummary] = None


class AdminTagResponse(TagRecord):
    owner: Optional[OwnerBrief] = None


class DisabledTagView(CamelModel):
    """What a scan of a disabled tag reveals: no owner data at all."""
    tag_id: str
    status: TagStatus
    viewed_count: int
    created_at: datetime


class TagEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: TagResponse


class OptionalTagEnvelope(BaseModel):
    success: bool = True
    data: Optional[TagResponse] = None


class PublicTagEnvelope(BaseModel):
    success: bool = True
    data: Union[TagResponse, DisabledTagView]


class TagListEnvelope(BaseModel):
    success: bool = True
    data: List[AdminTagResponse]
    pagination: Pagination


class DeletedTag(CamelModel):
    tag_id: str


class DeletedTagEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: DeletedTag
