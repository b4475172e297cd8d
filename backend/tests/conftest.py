# backend/tests/conftest.py
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tagclaim.config import Settings
from tagclaim.database import build_engine, get_db
from tagclaim.main import create_app
from tagclaim.models import Base, User
from tagclaim.services.ownership import OwnershipCoordinator
from tagclaim.services.tag_registry import TagRegistry

JWT_SECRET = "test-jwt-secret"
ADMIN_PASS = "test-admin-pass"
BASE_URL = "https://pivy.me/tag"


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite:///:memory:",
        jwt_secret=JWT_SECRET,
        admin_pass=ADMIN_PASS,
        tag_base_url=BASE_URL,
        nfc_auto_create_enabled=True,
        error_log_enabled=False,
    )


@pytest.fixture
def db_session():
    engine = build_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def registry(db_session):
    return TagRegistry(db_session, BASE_URL)


@pytest.fixture
def coordinator(db_session, registry):
    return OwnershipCoordinator(db_session, registry, auto_provision=True)


@pytest.fixture
def make_user(db_session):
    def _make_user(username: str, email: str = None) -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            profile_image_type="EMOJI_AND_COLOR",
            profile_image_data={"emoji": "🦊", "backgroundColor": "#ffaa00"},
            hashed_password="not-a-real-hash",
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


def encode_token(user_id, secret: str = JWT_SECRET, expires_in: timedelta = timedelta(hours=1), **claims) -> str:
    payload = {"id": str(user_id), "exp": datetime.now(timezone.utc) + expires_in}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def make_token():
    return encode_token


@pytest.fixture
def auth_headers_for():
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {encode_token(user.id)}"}
    return _headers


@pytest.fixture
def build_client(db_session):
    """Build a TestClient for an app configured with the given settings."""
    clients = []

    def _build(app_settings: Settings) -> TestClient:
        app = create_app(app_settings)

        def override_get_db():
            try:
                yield db_session
            finally:
                pass

        app.dependency_overrides[get_db] = override_get_db
        test_client = TestClient(app)
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _build
    for test_client in clients:
        test_client.__exit__(None, None, None)


@pytest.fixture
def client(build_client, settings):
    return build_client(settings)
