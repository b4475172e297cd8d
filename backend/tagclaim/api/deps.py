# backend/tagclaim/api/deps.py
import logging
from typing import Annotated, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from tagclaim.config import Settings
from tagclaim.database import get_db
from tagclaim.models.user import User
from tagclaim.services.errors import Internal, Unauthorized
from tagclaim.services.ownership import OwnershipCoordinator
from tagclaim.services.projection import TagLookup
from tagclaim.services.tag_registry import TagRegistry
from tagclaim.utils.security import decode_access_token, secrets_match

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


class AdminGate:
    """Shared-secret check for administrative routes.

    The secret is fixed when the app is built; ``None`` means the gate is not
    configured and every admin request fails.
    """

    def __init__(self, secret: Optional[str]):
        self.secret = secret

    def check(self, supplied: Optional[str]) -> None:
        if not supplied:
            raise Unauthorized("Admin password required", "ADMIN_PASS_MISSING")
        if not self.secret:
            raise Internal("Admin password not configured", "ADMIN_PASS_NOT_CONFIGURED")
        if not secrets_match(supplied, self.secret):
            logger.warning("Rejected admin request with an invalid password")
            raise Unauthorized("Invalid admin password", "ADMIN_PASS_INVALID")


def require_admin(
    request: Request,
    admin_pass: Annotated[Optional[str], Query(alias="pass")] = None,
) -> None:
    gate: AdminGate = request.app.state.admin_gate
    gate.check(admin_pass)


def get_current_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Resolve the caller from the identity provider's bearer token."""
    if request.headers.get("Authorization") is None:
        raise Unauthorized("Missing authorization header", "AUTH_HEADER_MISSING")
    if credentials is None:
        raise Unauthorized("Invalid authorization format", "AUTH_FORMAT_INVALID")

    settings = get_app_settings(request)
    if not settings.jwt_secret:
        raise Internal("JWT secret not configured", "JWT_SECRET_MISSING")

    user_id = decode_access_token(credentials.credentials, settings.jwt_secret, settings.jwt_algorithm)

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise Unauthorized("User not found", "USER_NOT_FOUND")

    request.state.user_id = user.id
    return user


def get_tag_registry(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TagRegistry:
    return TagRegistry(db, settings.tag_base_url)


def get_coordinator(
    db: Annotated[Session, Depends(get_db)],
    registry: Annotated[TagRegistry, Depends(get_tag_registry)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> OwnershipCoordinator:
    return OwnershipCoordinator(db, registry, auto_provision=settings.nfc_auto_create_enabled)


def get_tag_lookup(
    db: Annotated[Session, Depends(get_db)],
    registry: Annotated[TagRegistry, Depends(get_tag_registry)],
    coordinator: Annotated[OwnershipCoordinator, Depends(get_coordinator)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TagLookup:
    return TagLookup(db, registry, coordinator, min_tag_id_length=settings.min_public_tag_id_length)


# Type aliases for common dependencies
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminAccess = Depends(require_admin)
DBSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Registry = Annotated[TagRegistry, Depends(get_tag_registry)]
Coordinator = Annotated[OwnershipCoordinator, Depends(get_coordinator)]
Lookup = Annotated[TagLookup, Depends(get_tag_lookup)]
