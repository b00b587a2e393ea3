"""
Tests for bearer token extraction and identity resolution
"""
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from app.core.auth import extract_bearer_token
from app.core.security import TokenService


@pytest.mark.parametrize("header,expected", [
    ("Bearer abc.def.ghi", "abc.def.ghi"),
    (None, None),
    ("", None),
    ("Bearer ", None),
    ("Bearer    ", None),
    ("bearer abc.def.ghi", None),
    ("Basic dXNlcjpwYXNz", None),
    ("Bearerabc", None),
])
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


def test_missing_header_is_unauthorized(client):
    r = client.get("/contact")
    assert r.status_code == 401
    assert r.json() == {"message": "Unauthorized"}


def test_wrong_scheme_is_unauthorized(client, make_user, token_service):
    user = make_user()
    token = token_service.issue(user.id, user.email)

    r = client.get("/contact", headers={"Authorization": f"Token {token}"})
    assert r.status_code == 401


def test_empty_token_is_unauthorized(client):
    r = client.get("/contact", headers={"Authorization": "Bearer "})
    assert r.status_code == 401
    assert r.json() == {"message": "Unauthorized"}


def test_valid_token_is_accepted(client, make_user, auth_headers):
    user = make_user()

    r = client.get("/contact", headers=auth_headers(user))
    assert r.status_code == 200


def test_malformed_token_is_unauthorized(client):
    r = client.get("/contact", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
    assert r.json() == {"message": "Unauthorized"}


def test_foreign_signature_is_unauthorized(client, make_user):
    user = make_user()
    token = TokenService(secret="someone-elses-secret").issue(user.id, user.email)

    r = client.get("/contact", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_token_accepted_until_expiry(client, make_user, token_service):
    user = make_user()
    now = datetime.now(timezone.utc)

    fresh = token_service.issue(user.id, user.email, issued_at=now - timedelta(hours=23, minutes=58))
    stale = token_service.issue(user.id, user.email, issued_at=now - timedelta(hours=24, seconds=5))

    assert client.get("/contact", headers={"Authorization": f"Bearer {fresh}"}).status_code == 200
    r = client.get("/contact", headers={"Authorization": f"Bearer {stale}"})
    assert r.status_code == 401
    assert r.json() == {"message": "Unauthorized"}


def test_token_for_deleted_user_is_not_found(client, token_service):
    token = token_service.issue(uuid4(), "gone@x.com")

    r = client.get("/contact", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 404
    assert r.json() == {"message": "User not found."}


def test_identity_attached_to_request(client, make_user, auth_headers):
    """Routes receive the identity asserted by the token"""
    user = make_user(email="who@x.com")
    r = client.post(
        "/contact",
        json={"email": "c@x.com", "firstName": "Jo", "lastName": "Do", "phone": "1234567890"},
        headers=auth_headers(user),
    )
    assert r.status_code == 201
    assert r.json()["contact"]["user_id"] == str(user.id)
