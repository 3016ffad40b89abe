"""
Tests for password hashing and bearer tokens
"""

import jwt
import pytest

from app.core.config import settings
from app.core.errors import AuthenticationError
from app.utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

USER = {"id": 7, "first_name": "Ana", "last_name": "Lopez", "username": "ana@example.com", "password": "x"}


def test_password_hashing():
    hashed = hash_password("secret")
    assert hashed != "secret"
    assert verify_password("secret", hashed)
    assert not verify_password("Secret", hashed)


def test_token_carries_user_claims():
    token = create_access_token(USER)
    claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    assert "password" not in claims
    assert "exp" in claims

    user = decode_access_token(token)
    assert (user.id, user.first_name, user.last_name, user.username) == (7, "Ana", "Lopez", "ana@example.com")


def test_expired_token():
    token = create_access_token(USER, expires_minutes=-1)
    with pytest.raises(AuthenticationError, match="expired"):
        decode_access_token(token)


def test_tampered_token():
    token = jwt.encode({"id": 7}, "another-secret-key-with-at-least-32-bytes", algorithm="HS256")
    with pytest.raises(AuthenticationError, match="Invalid"):
        decode_access_token(token)


def test_token_missing_claims():
    token = jwt.encode({"id": 7}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(AuthenticationError, match="Invalid"):
        decode_access_token(token)
