# backend/tagclaim/models/error_log.py
from typing import Optional
from uuid import UUID
from sqlalchemy import String, Text, Integer
from sqlalchemy.orm import Mapped, mapped_column

from tagclaim.models.base import Base, TimestampMixin, UUIDMixin


class ErrorLog(Base, UUIDMixin, TimestampMixin):
    """One row per failed request, written after the response is sent."""
    __tablename__ = "error_logs"

    error_code: Mapped[str] = mapped_column(String(100), index=True)
    message: Mapped[str] = mapped_column(Text)
    status_code: Mapped[int] = mapped_column(Integer)
    stack: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    context: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # JSON string for extra details
    # No foreign key: failures are recorded even for callers that no longer exist
    user_id: Mapped[Optional[UUID]] = mapped_column(nullable=True, index=True)
    method: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    path: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    ip: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
