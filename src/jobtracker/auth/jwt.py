"""JWT token creation and verification.

Tokens are stateless: the server keeps no session table and no
revocation list. A token carries the user id (sub) and email, and
expires 7 days after issue. Logout is the client discarding it.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from jobtracker.config import settings

TOKEN_LIFETIME = timedelta(days=7)


class TokenError(Exception):
    """Raised when token verification fails."""


@dataclass(frozen=True)
class TokenClaims:
    user_id: uuid.UUID
    email: str


def issue_token(user_id: uuid.UUID | str, email: str) -> str:
    """Create a signed JWT for a user."""
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + TOKEN_LIFETIME,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> TokenClaims:
    """Verify and decode a JWT token.

    Returns the claims on success.
    Raises TokenError on bad signature, expiry, or malformed payload.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")

    email = payload.get("email")
    if not isinstance(email, str) or not email:
        raise TokenError("Invalid token: missing email claim")
    try:
        user_id = uuid.UUID(payload["sub"])
    except (ValueError, TypeError, AttributeError):
        raise TokenError("Invalid token: malformed subject")

    return TokenClaims(user_id=user_id, email=email)
