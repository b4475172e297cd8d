# backend/tagclaim/models/user.py
"""User accounts as written by the identity provider.

The tag service never creates or edits these rows. It reads them to resolve the
caller of an authenticated request and to embed an owner summary in tag responses.
"""
from typing import Any, Optional

from sqlalchemy import String, Boolean, JSON
from sqlalchemy.orm import Mapped, mapped_column

from tagclaim.models.base import Base, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "users"

    username: Mapped[Optional[str]] = mapped_column(String(50), unique=True, index=True, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    # 'EMOJI_AND_COLOR' or 'IMAGE'; data holds the emoji/colour pair or an image reference
    profile_image_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    profile_image_data: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    # Sensitive columns below are never projected into tag responses
    hashed_password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
