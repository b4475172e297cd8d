# backend/tagclaim/services/ownership.py
"""Claim protocol for NFC tags.

A user holds at most one CLAIMED tag. Claiming a new tag releases the user's
previous one, and both writes commit together or not at all.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tagclaim.models.base import utcnow
from tagclaim.models.nfc_tag import NfcTag, TagStatus
from tagclaim.services.errors import (
    AlreadyClaimedBySelf, Internal, NotAvailable, TagNotFound,
)
from tagclaim.services.tag_registry import TagRegistry

logger = logging.getLogger(__name__)


class OwnershipCoordinator:
    def __init__(self, db: Session, registry: TagRegistry, auto_provision: bool = True):
        self.db = db
        self.registry = registry
        self.auto_provision = auto_provision

    def ensure(self, tag_id: str) -> NfcTag:
        """Return the tag, provisioning it on first reference.

        Provisioned tags start AVAILABLE and injected, since something already
        scanned them. Does not commit; a concurrent provision of the same id
        makes our insert fail and we read the winner's row instead.
        """
        tag = self.registry.find(tag_id)
        if tag is not None:
            return tag

        if not self.auto_provision:
            raise TagNotFound()

        tag = self.registry.try_insert(tag_id, is_injected=True)
        if tag is not None:
            logger.info(f"Provisioned NFC tag {tag_id} on first reference")
            return tag

        tag = self.registry.find(tag_id)
        if tag is None:
            raise Internal("NFC tag vanished while provisioning", "PROVISION_TAG_ERROR")
        return tag

    def claim(self, tag_id: str, user_id: UUID) -> NfcTag:
        """Bind ``tag_id`` to ``user_id`` as a single transaction.

        Raises AlreadyClaimedBySelf when the user already owns the tag and
        NotAvailable when it is claimed by someone else, disabled, or was taken by a
        concurrent claim. Nothing is written unless the whole claim commits.
        """
        try:
            self.ensure(tag_id)
            tag = self.registry.lock(tag_id)

            if tag.status == TagStatus.CLAIMED and tag.owner_id == user_id:
                raise AlreadyClaimedBySelf()
            if tag.status != TagStatus.AVAILABLE:
                raise NotAvailable()

            previous = self.registry.find_claimed_by_owner(user_id, for_update=True)
            released = None
            if previous is not None and previous.id != tag.id:
                if self.registry.release_claim(previous, user_id):
                    released = previous.tag_id

            if not self.registry.compare_and_claim(tag, user_id, utcnow()):
                logger.warning(f"NFC tag {tag_id} was claimed concurrently; rejecting claim by {user_id}")
                raise NotAvailable()

            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Claim of NFC tag {tag_id} by {user_id} lost a race with another writer")
            raise NotAvailable()
        except BaseException:
            self.db.rollback()
            raise

        if released:
            logger.info(f"User {user_id} claimed NFC tag {tag_id}, releasing {released}")
        else:
            logger.info(f"User {user_id} claimed NFC tag {tag_id}")

        self.db.refresh(tag)
        return tag

    def lookup_own(self, user_id: UUID) -> Optional[NfcTag]:
        return self.registry.find_claimed_by_owner(user_id)
