from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.core.errors import AuthError
from app.deps.auth import TokenAuthenticator
from services.account_service import hash_password, verify_password

SECRET = "unit-test-secret-0123456789abcdef0123"


def test_issue_and_verify_roundtrip():
    authenticator = TokenAuthenticator(secret=SECRET)
    token = authenticator.issue(7, "eve@example.com")

    user = authenticator.verify(token)

    assert user.user_id == 7
    assert user.email == "eve@example.com"


def test_wrong_secret_is_rejected():
    token = TokenAuthenticator(secret=SECRET).issue(7)
    with pytest.raises(AuthError):
        TokenAuthenticator(secret=SECRET + "-other").verify(token)


def test_expired_token_is_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "7", "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(AuthError):
        TokenAuthenticator(secret=SECRET).verify(token)


def test_non_numeric_subject_is_rejected():
    token = jwt.encode({"sub": "not-a-number"}, SECRET, algorithm="HS256")
    with pytest.raises(AuthError):
        TokenAuthenticator(secret=SECRET).verify(token)


def test_password_hashing():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)
    assert not verify_password("correct horse", "not-a-bcrypt-hash")
