# backend/tagclaim/models/nfc_tag.py
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy import String, Boolean, Integer, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column

from tagclaim.models.base import Base, TimestampMixin, UUIDMixin


class TagStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    CLAIMED = "CLAIMED"
    DISABLED = "DISABLED"


class NfcTag(Base, UUIDMixin, TimestampMixin):
    """One physical NFC tag and its current owner.

    ``owner_id`` and ``claimed_at`` are set exactly when ``status`` is CLAIMED.
    """
    __tablename__ = "nfc_tags"

    tag_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    tag_url: Mapped[str] = mapped_column(String(512))
    status: Mapped[TagStatus] = mapped_column(default=TagStatus.AVAILABLE)

    owner_id: Mapped[Optional[UUID]] = mapped_column(ForeignKey("users.id"), nullable=True)
    claimed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    is_injected: Mapped[bool] = mapped_column(Boolean, default=False)
    viewed_count: Mapped[int] = mapped_column(Integer, default=0, server_default=text("0"))

    __table_args__ = (
        Index("ix_nfc_tags_owner_status", "owner_id", "status"),
        # At most one claimed tag per owner, enforced by the store
        Index(
            "uq_nfc_tags_one_claim_per_owner",
            "owner_id",
            unique=True,
            postgresql_where=text("status = 'CLAIMED'"),
            sqlite_where=text("status = 'CLAIMED'"),
        ),
    )

    @property
    def is_claimed(self) -> bool:
        return self.status == TagStatus.CLAIMED
