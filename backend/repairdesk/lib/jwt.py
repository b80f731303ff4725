"""JWT token generation and validation utilities.

Tokens are issued by the identity provider for a user id (`sub`) and carry
the account email, which decides admin access. `create_access_token` exists
for local tooling and tests.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError

from repairdesk.lib.settings import settings


# Token expiration time (24 hours by default)
TOKEN_EXPIRY_HOURS = 24


@dataclass(frozen=True)
class TokenIdentity:
    """Who a verified token belongs to."""
    uid: str
    email: Optional[str]

    @property
    def is_admin(self) -> bool:
        return bool(self.email) and self.email.lower().endswith(
            settings.admin_email_domain.lower()
        )


def create_access_token(
    uid: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT access token for a user.

    Args:
        uid: Identity-provider subject id (stored in 'sub' claim)
        email: Account email (stored in 'email' claim)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(hours=TOKEN_EXPIRY_HOURS)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": uid,
        "iat": now,
        "exp": now + expires_delta,
    }
    if email:
        payload["email"] = email

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> TokenIdentity:
    """Verify a JWT token and return the identity it carries.

    Raises:
        InvalidTokenError: If token is invalid, expired, signed with another
            key, or has no subject
    """
    payload = jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
    )
    uid = payload.get("sub")
    if not uid:
        raise InvalidTokenError("Token has no subject")
    return TokenIdentity(uid=str(uid), email=payload.get("email"))
