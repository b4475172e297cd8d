import pytest
from datetime import timedelta
from uuid import uuid4

CLAIM_URL = "/api/v1/nfc/IDENTITY-TAG-000000000001/claim"


def test_missing_authorization_header(client):
    response = client.get("/api/v1/nfc/my-tag")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_HEADER_MISSING"


def test_non_bearer_authorization(client):
    response = client.get("/api/v1/nfc/my-tag", headers={"Authorization": "Basic dXNlcjpwYXNz"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_FORMAT_INVALID"


def test_expired_token(client, make_user, make_token):
    user = make_user("alice")
    token = make_token(user.id, expires_in=timedelta(minutes=-5))

    response = client.post(CLAIM_URL, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_EXPIRED"


def test_token_signed_with_other_secret(client, make_user, make_token):
    user = make_user("alice")
    token = make_token(user.id, secret="someone-elses-secret")

    response = client.get("/api/v1/nfc/my-tag", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_MALFORMED"


def test_token_without_user_id(client, make_token):
    token = make_token("", walletId="w1")

    response = client.get("/api/v1/nfc/my-tag", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_PAYLOAD_INVALID"


def test_token_for_unknown_user(client, make_token):
    token = make_token(uuid4())

    response = client.get("/api/v1/nfc/my-tag", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "USER_NOT_FOUND"


def test_jwt_secret_not_configured(build_client, settings, make_user, auth_headers_for):
    client = build_client(settings.model_copy(update={"jwt_secret": None}))
    user = make_user("alice")

    response = client.get("/api/v1/nfc/my-tag", headers=auth_headers_for(user))

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "JWT_SECRET_MISSING"
