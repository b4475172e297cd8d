from tagclaim.schemas.common import ErrorBody, ErrorResponse, Pagination
from tagclaim.schemas.user import OwnerBrief, OwnerSummary
from tagclaim.schemas.nfc_tag import (
    TagCreate, TagInjectUpdate, TagStatusUpdate, TagResponse, AdminTagResponse, DisabledTagView,
    TagEnvelope, OptionalTagEnvelope, PublicTagEnvelope, TagListEnvelope,
    DeletedTag, DeletedTagEnvelope,
)

__all__ = [
    "ErrorBody", "ErrorResponse", "Pagination",
    "OwnerBrief", "OwnerSummary",
    "TagCreate", "TagInjectUpdate", "TagStatusUpdate", "TagResponse", "AdminTagResponse", "DisabledTagView",
    "TagEnvelope", "OptionalTagEnvelope", "PublicTagEnvelope", "TagListEnvelope",
    "DeletedTag", "DeletedTagEnvelope",
]
