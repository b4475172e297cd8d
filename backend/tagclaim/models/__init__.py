from tagclaim.models.base import Base
from tagclaim.models.user import User
from tagclaim.models.nfc_tag import NfcTag, TagStatus
from tagclaim.models.error_log import ErrorLog

__all__ = [
    "Base",
    "User",
    "NfcTag", "TagStatus",
    "ErrorLog",
]
