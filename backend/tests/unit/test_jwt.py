"""Tests for JWT utilities."""
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from repairdesk.lib.jwt import TokenIdentity, create_access_token, verify_token
from repairdesk.lib.settings import settings


@pytest.mark.unit
def test_create_and_verify_token():
    """Test creating and verifying a valid token."""
    token = create_access_token("uid-123", "customer@example.com")

    assert isinstance(token, str)
    assert len(token) > 0

    identity = verify_token(token)
    assert identity.uid == "uid-123"
    assert identity.email == "customer@example.com"
    assert identity.is_admin is False


@pytest.mark.unit
def test_admin_is_decided_by_email_domain():
    """Test that accounts on the shop domain are admins."""
    assert TokenIdentity("a1", "owner@satisfied.com").is_admin is True
    assert TokenIdentity("a2", "Owner@SATISFIED.com").is_admin is True
    assert TokenIdentity("c1", "owner@satisfied.com.evil.org").is_admin is False
    assert TokenIdentity("c2", None).is_admin is False


@pytest.mark.unit
def test_token_without_email():
    """Test that a token may omit the email claim."""
    identity = verify_token(create_access_token("uid-456"))

    assert identity.uid == "uid-456"
    assert identity.email is None


@pytest.mark.unit
def test_expired_token():
    """Test that expired tokens are rejected."""
    token = create_access_token("uid-123", expires_delta=timedelta(seconds=-1))

    with pytest.raises(ExpiredSignatureError):
        verify_token(token)


@pytest.mark.unit
def test_invalid_token():
    """Test that malformed tokens are rejected."""
    with pytest.raises(InvalidTokenError):
        verify_token("not.a.valid.token")


@pytest.mark.unit
def test_tampered_token():
    """Test that tampered tokens are rejected."""
    token = create_access_token("uid-123", "customer@example.com")

    # Tamper with the token by modifying a character
    tampered_token = token[:-5] + "XXXXX"

    with pytest.raises(InvalidTokenError):
        verify_token(tampered_token)


@pytest.mark.unit
def test_token_without_subject_is_rejected():
    """Test that a validly signed token with no subject is rejected."""
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"email": "x@satisfied.com", "iat": now, "exp": now + timedelta(hours=1)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(InvalidTokenError):
        verify_token(token)


@pytest.mark.unit
def test_custom_expiry():
    """Test creating token with custom expiration time."""
    token = create_access_token("uid-123", expires_delta=timedelta(hours=1))

    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])

    # Should be close to 3600 seconds (1 hour)
    assert 3590 < payload["exp"] - payload["iat"] < 3610
