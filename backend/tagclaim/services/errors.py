# backend/tagclaim/services/errors.py
"""Failure kinds raised by the tag services.

Every error carries a stable machine-readable ``code``, a human readable ``message``
and the HTTP status the API layer answers with.
"""
from typing import Optional


class TagServiceError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.message
        self.code = code or self.code
        super().__init__(self.message)


class InvalidIdentifier(TagServiceError):
    status_code = 400
    code = "INVALID_TAG_ID"
    message = "Invalid tag ID"


class TagNotFound(TagServiceError):
    status_code = 404
    code = "TAG_NOT_FOUND"
    message = "NFC tag not found"


class NotAvailable(TagServiceError):
    status_code = 409
    code = "TAG_NOT_AVAILABLE"
    message = "NFC tag is not available for claiming"


class AlreadyClaimedBySelf(TagServiceError):
    status_code = 409
    code = "TAG_ALREADY_CLAIMED_BY_USER"
    message = "You have already claimed this NFC tag"


class Conflict(TagServiceError):
    status_code = 409
    code = "TAG_ALREADY_EXISTS"
    message = "NFC tag already exists"


class InvalidStatusTransition(TagServiceError):
    status_code = 400
    code = "INVALID_STATUS"
    message = "Tags can only be claimed through the claim operation"


class Unauthorized(TagServiceError):
    status_code = 401
    code = "UNAUTHORIZED"
    message = "Unauthorized"


class Forbidden(TagServiceError):
    status_code = 403
    code = "FORBIDDEN"
    message = "Forbidden"


class Internal(TagServiceError):
    pass
