# backend/tagclaim/services/projection.py
import logging
from typing import Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tagclaim.models.nfc_tag import NfcTag, TagStatus
from tagclaim.models.user import User
from tagclaim.schemas.nfc_tag import AdminTagResponse, DisabledTagView, TagResponse
from tagclaim.schemas.user import OwnerBrief, OwnerSummary
from tagclaim.services.errors import InvalidIdentifier
from tagclaim.services.ownership import OwnershipCoordinator
from tagclaim.services.tag_registry import TagRegistry

logger = logging.getLogger(__name__)

# Columns of User that may be embedded in a tag response
OWNER_SUMMARY_COLUMNS = (
    User.id,
    User.username,
    User.email,
    User.profile_image_type,
    User.profile_image_data,
)

# The admin listing only needs to identify the owner
OWNER_BRIEF_COLUMNS = (User.id, User.username, User.email)


def validate_public_tag_id(tag_id: str, min_length: int) -> None:
    """Reject identifiers too short to be a real tag before any database access."""
    if not tag_id or len(tag_id) < min_length:
        raise InvalidIdentifier(f"Invalid tag ID - must be at least {min_length} characters")


def load_owner_summaries(db: Session, owner_ids: List[UUID]) -> Dict[UUID, OwnerSummary]:
    ids = {owner_id for owner_id in owner_ids if owner_id is not None}
    if not ids:
        return {}
    rows = db.query(*OWNER_SUMMARY_COLUMNS).filter(User.id.in_(ids)).all()
    return {row.id: OwnerSummary.model_validate(row) for row in rows}


def to_tag_response(tag: NfcTag, owner: Optional[OwnerSummary] = None) -> TagResponse:
    response = TagResponse.model_validate(tag)
    response.owner = owner
    return response


def project_tag(db: Session, tag: NfcTag) -> TagResponse:
    owners = load_owner_summaries(db, [tag.owner_id])
    return to_tag_response(tag, owners.get(tag.owner_id))


def project_admin_tags(db: Session, tags: List[NfcTag]) -> List[AdminTagResponse]:
    ids = {tag.owner_id for tag in tags if tag.owner_id is not None}
    owners = {}
    if ids:
        rows = db.query(*OWNER_BRIEF_COLUMNS).filter(User.id.in_(ids)).all()
        owners = {row.id: OwnerBrief.model_validate(row) for row in rows}

    projected = []
    for tag in tags:
        response = AdminTagResponse.model_validate(tag)
        response.owner = owners.get(tag.owner_id)
        projected.append(response)
    return projected


class TagLookup:
    """Scan-triggered public lookup of a tag."""

    def __init__(
        self,
        db: Session,
        registry: TagRegistry,
        coordinator: OwnershipCoordinator,
        min_tag_id_length: int = 20,
    ):
        self.db = db
        self.registry = registry
        self.coordinator = coordinator
        self.min_tag_id_length = min_tag_id_length

    def lookup_public(self, tag_id: str) -> Union[TagResponse, DisabledTagView]:
        validate_public_tag_id(tag_id, self.min_tag_id_length)

        tag = self.coordinator.ensure(tag_id)
        self.db.commit()
        self.record_view(tag_id)

        # Expired by the commit above; this read includes our own increment
        if tag.status == TagStatus.DISABLED:
            return DisabledTagView.model_validate(tag)
        return project_tag(self.db, tag)

    def record_view(self, tag_id: str) -> None:
        try:
            self.registry.increment_view_count(tag_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Failed to record view of NFC tag {tag_id}: {e}")
