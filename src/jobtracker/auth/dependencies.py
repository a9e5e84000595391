"""FastAPI auth dependencies.

Used as Depends() in route handlers to turn the Authorization header
into a verified identity. Two states only: no usable token → 401,
valid token → CurrentUser. Nothing is remembered between requests.
"""

import uuid
from typing import Optional

import structlog
from fastapi import Header, HTTPException

from jobtracker.auth.jwt import TokenError, verify_token

logger = structlog.get_logger()

# Same response for every failure cause (missing, malformed, expired, forged)
UNAUTHORIZED_DETAIL = "Authentication required"


class CurrentUser:
    """The authenticated user making the request.

    All job queries are scoped by user_id taken from here, never
    from the request body.
    """

    def __init__(self, user_id: uuid.UUID, email: str):
        self.user_id = user_id
        self.email = email


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=UNAUTHORIZED_DETAIL,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    authorization: Optional[str] = Header(None),
) -> CurrentUser:
    """Resolve the bearer token to a CurrentUser (401 if absent or invalid)."""
    if not authorization:
        raise _unauthorized()

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise _unauthorized()

    try:
        claims = verify_token(token)
    except TokenError as e:
        logger.info("jobtracker.auth_rejected", reason=str(e))
        raise _unauthorized()

    return CurrentUser(user_id=claims.user_id, email=claims.email)
