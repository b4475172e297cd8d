# backend/tagclaim/utils/security.py
import hmac
from typing import Optional
from uuid import UUID

import jwt

from tagclaim.services.errors import Unauthorized


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> UUID:
    """Verify an identity-provider token and return the user id it was issued for.

    Raises Unauthorized with a code naming the reason the token was refused.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token has expired", "TOKEN_EXPIRED")
    except jwt.ImmatureSignatureError:
        raise Unauthorized("Token is not active yet", "TOKEN_NOT_ACTIVE")
    except jwt.InvalidTokenError:
        raise Unauthorized("Token is malformed", "TOKEN_MALFORMED")

    user_id = payload.get("id")
    if not user_id:
        raise Unauthorized("Invalid token payload", "TOKEN_PAYLOAD_INVALID")
    try:
        return UUID(str(user_id))
    except ValueError:
        raise Unauthorized("Invalid token payload", "TOKEN_PAYLOAD_INVALID")


def secrets_match(supplied: Optional[str], expected: str) -> bool:
    if supplied is None:
        return False
    return hmac.compare_digest(supplied.encode(), expected.encode())
