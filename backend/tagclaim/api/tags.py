# backend/tagclaim/api/tags.py
from fastapi import APIRouter

from tagclaim.api.deps import AppSettings, Coordinator, CurrentUser, DBSession, Lookup
from tagclaim.schemas.nfc_tag import TagEnvelope, OptionalTagEnvelope, PublicTagEnvelope
from tagclaim.services.projection import project_tag, validate_public_tag_id

router = APIRouter(prefix="/nfc", tags=["NFC Tags"])


@router.post("/{tag_id}/claim", response_model=TagEnvelope)
def claim_tag(
    tag_id: str,
    current_user: CurrentUser,
    coordinator: Coordinator,
    settings: AppSettings,
    db: DBSession,
):
    """
    Claim a tag for the current user.
    Any tag the user held before is released in the same transaction.
    """
    validate_public_tag_id(tag_id, settings.min_public_tag_id_length)
    tag = coordinator.claim(tag_id, current_user.id)
    return TagEnvelope(
        message="NFC tag claimed successfully",
        data=project_tag(db, tag),
    )


@router.get("/my-tag", response_model=OptionalTagEnvelope)
def get_my_tag(current_user: CurrentUser, coordinator: Coordinator, db: DBSession):
    tag = coordinator.lookup_own(current_user.id)
    return OptionalTagEnvelope(data=project_tag(db, tag) if tag else None)


@router.get("/{tag_id}", response_model=PublicTagEnvelope)
def get_tag(tag_id: str, lookup: Lookup):
    """Public lookup used when someone scans a tag. Counts one view per call."""
    return PublicTagEnvelope(data=lookup.lookup_public(tag_id))
