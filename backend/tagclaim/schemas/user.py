# backend/tagclaim/schemas/user.py
from typing import Optional, Any
from uuid import UUID
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class OwnerBrief(BaseModel):
    """Owner as shown in the admin tag listing."""
    id: UUID
    username: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class OwnerSummary(BaseModel):
    """Public face of a tag owner. Only these fields ever leave the service."""
    id: UUID
    username: Optional[str] = None
    email: Optional[str] = None
    profile_image_type: Optional[str] = None
    profile_image_data: Optional[Any] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
