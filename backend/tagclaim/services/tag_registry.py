# backend/tagclaim/services/tag_registry.py
"""Data access for NFC tag records.

Methods that make a complete administrative change (create, delete, set_injected,
set_status) commit on their own. The claim primitives (``lock``, ``release_claim``,
``compare_and_claim``) only write inside the caller's open transaction; the
ownership coordinator decides when that transaction commits.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from sqlalchemy import desc, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tagclaim.models.nfc_tag import NfcTag, TagStatus
from tagclaim.services.errors import Conflict, Internal, InvalidStatusTransition, TagNotFound
from tagclaim.utils.ids import build_tag_url, generate_tag_id

logger = logging.getLogger(__name__)

MAX_GENERATION_ATTEMPTS = 5


class TagRegistry:
    def __init__(self, db: Session, base_url: str):
        self.db = db
        self.base_url = base_url

    def find(self, tag_id: str) -> Optional[NfcTag]:
        return self.db.query(NfcTag).filter(NfcTag.tag_id == tag_id).first()

    def get(self, tag_id: str) -> NfcTag:
        tag = self.find(tag_id)
        if tag is None:
            raise TagNotFound()
        return tag

    def try_insert(self, tag_id: str, is_injected: bool) -> Optional[NfcTag]:
        """Insert a new AVAILABLE tag inside a savepoint.

        Returns None when the tag_id is already taken; only the savepoint is rolled
        back, so the surrounding transaction stays usable.
        """
        tag = NfcTag(
            tag_id=tag_id,
            tag_url=build_tag_url(self.base_url, tag_id),
            status=TagStatus.AVAILABLE,
            is_injected=is_injected,
            viewed_count=0,
        )
        try:
            with self.db.begin_nested():
                self.db.add(tag)
        except IntegrityError:
            return None
        return tag

    def create(self, tag_id: Optional[str] = None, is_injected: bool = False) -> NfcTag:
        if tag_id is not None:
            if self.find(tag_id) is not None:
                raise Conflict()
            tag = self.try_insert(tag_id, is_injected)
            if tag is None:
                raise Conflict()
        else:
            tag = None
            for _ in range(MAX_GENERATION_ATTEMPTS):
                candidate = generate_tag_id()
                if self.find(candidate) is not None:
                    continue
                tag = self.try_insert(candidate, is_injected)
                if tag is not None:
                    break
            if tag is None:
                raise Internal("Could not generate a unique tag ID", "CREATE_TAG_ERROR")

        self.db.commit()
        self.db.refresh(tag)
        logger.info(f"Created NFC tag {tag.tag_id}")
        return tag

    def list(
        self,
        status: Optional[TagStatus] = None,
        owner_id: Optional[UUID] = None,
        is_injected: Optional[bool] = None,
        limit: int = 1000,
        offset: int = 0,
    ) -> tuple[List[NfcTag], int]:
        query = self.db.query(NfcTag)

        if status is not None:
            query = query.filter(NfcTag.status == status)
        if owner_id is not None:
            query = query.filter(NfcTag.owner_id == owner_id)
        if is_injected is not None:
            query = query.filter(NfcTag.is_injected == is_injected)

        total = query.count()
        tags = query.order_by(desc(NfcTag.created_at), desc(NfcTag.id)).offset(offset).limit(limit).all()

        return tags, total

    def delete(self, tag_id: str) -> None:
        tag = self.get(tag_id)
        if tag.is_claimed:
            logger.info(f"Deleting NFC tag {tag_id} claimed by user {tag.owner_id}")
        self.db.delete(tag)
        self.db.commit()
        logger.info(f"Deleted NFC tag {tag_id}")

    def set_injected(self, tag_id: str, flag: bool) -> NfcTag:
        tag = self.get(tag_id)
        tag.is_injected = flag
        self.db.commit()
        self.db.refresh(tag)
        logger.info(f"NFC tag {tag_id} injected={flag}")
        return tag

    def set_status(self, tag_id: str, status: TagStatus) -> NfcTag:
        """Move a tag to AVAILABLE or DISABLED, dropping any ownership in the same write."""
        if status == TagStatus.CLAIMED:
            raise InvalidStatusTransition()

        tag = self.lock(tag_id)
        previous_owner = tag.owner_id
        tag.status = status
        tag.owner_id = None
        tag.claimed_at = None
        self.db.commit()
        self.db.refresh(tag)

        if previous_owner is not None:
            logger.info(f"NFC tag {tag_id} released from user {previous_owner} and set to {status.value}")
        else:
            logger.info(f"NFC tag {tag_id} set to {status.value}")
        return tag

    def increment_view_count(self, tag_id: str) -> None:
        """Add one view in a transaction of its own."""
        self.db.execute(
            update(NfcTag)
            .where(NfcTag.tag_id == tag_id)
            .values(viewed_count=NfcTag.viewed_count + 1)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

    # Claim primitives, run inside the coordinator's transaction

    def lock(self, tag_id: str) -> NfcTag:
        tag = (
            self.db.query(NfcTag)
            .filter(NfcTag.tag_id == tag_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if tag is None:
            raise TagNotFound()
        return tag

    def find_claimed_by_owner(self, owner_id: UUID, for_update: bool = False) -> Optional[NfcTag]:
        query = self.db.query(NfcTag).filter(
            NfcTag.owner_id == owner_id,
            NfcTag.status == TagStatus.CLAIMED,
        )
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.order_by(desc(NfcTag.claimed_at)).first()

    def release_claim(self, tag: NfcTag, owner_id: UUID) -> bool:
        result = self.db.execute(
            update(NfcTag)
            .where(
                NfcTag.id == tag.id,
                NfcTag.owner_id == owner_id,
                NfcTag.status == TagStatus.CLAIMED,
            )
            .values(status=TagStatus.AVAILABLE, owner_id=None, claimed_at=None)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def compare_and_claim(self, tag: NfcTag, owner_id: UUID, claimed_at: datetime) -> bool:
        """Claim ``tag`` only if it is still AVAILABLE; False means another writer got there first."""
        result = self.db.execute(
            update(NfcTag)
            .where(NfcTag.id == tag.id, NfcTag.status == TagStatus.AVAILABLE)
            .values(status=TagStatus.CLAIMED, owner_id=owner_id, claimed_at=claimed_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
