# backend/tagclaim/services/error_log.py
"""Persistent record of request failures.

Each record is written through a session of its own, so a failure that aborted
the request's transaction can still be stored. Writing is best-effort: a record
that cannot be stored is logged and dropped.
"""
import json
import logging
import traceback
from typing import Any, Callable, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tagclaim.database import get_session_local
from tagclaim.models.error_log import ErrorLog

logger = logging.getLogger(__name__)


def format_stack(exc: Optional[BaseException]) -> Optional[str]:
    if exc is None:
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


class ErrorLogWriter:
    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        self.session_factory = session_factory

    def _open_session(self) -> Session:
        if self.session_factory is not None:
            return self.session_factory()
        return get_session_local()()

    def record(
        self,
        error_code: str,
        message: str,
        status_code: int,
        exc: Optional[BaseException] = None,
        context: Any = None,
        user_id: Optional[UUID] = None,
        method: Optional[str] = None,
        path: Optional[str] = None,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
    ) -> bool:
        """Store one failure. Returns False when the record could not be written."""
        entry = ErrorLog(
            error_code=error_code,
            message=message,
            status_code=status_code,
            stack=format_stack(exc),
            context=json.dumps(context, default=str) if context is not None else None,
            user_id=user_id,
            method=method,
            path=path,
            user_agent=user_agent,
            ip=ip,
        )

        db = self._open_session()
        try:
            db.add(entry)
            db.commit()
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"Failed to write error log entry for {error_code}: {e}")
            return False
        finally:
            db.close()
