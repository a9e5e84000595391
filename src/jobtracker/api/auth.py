"""Auth API — registration, login, current user.

- POST /auth/register → create account, return a token right away
- POST /auth/login → email/password → token
- GET /auth/me → current user info

Tokens are 7-day bearer JWTs. There is no refresh or logout endpoint:
the client drops the token to log out.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker.auth.dependencies import (
    UNAUTHORIZED_DETAIL,
    CurrentUser,
    get_current_user,
)
from jobtracker.auth.jwt import issue_token
from jobtracker.db.engine import get_db
from jobtracker.db.models import User
from jobtracker.schemas.common import CamelModel
from jobtracker.services.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    ValidationError,
)
from jobtracker.services.user_service import UserService

router = APIRouter(prefix="/auth")


# ─── Schemas ─────────────────────────────────────────────


class RegisterRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(CamelModel):
    message: str
    user_id: uuid.UUID
    email: str
    name: str
    token: str


class UserRead(CamelModel):
    user_id: uuid.UUID
    email: str
    name: str


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def _auth_response(user: User, message: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        user_id=user.id,
        email=user.email,
        name=user.name,
        token=issue_token(user.id, user.email),
    )


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, svc: UserService = Depends(_svc)):
    """Create a new user account and log it in."""
    try:
        user = await svc.register(
            name=body.name,
            email=body.email,
            password=body.password,
            confirm_password=body.confirm_password,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateEmailError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return _auth_response(user, "User registered successfully")


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, svc: UserService = Depends(_svc)):
    """Login with email and password → bearer token."""
    try:
        user = await svc.authenticate(body.email, body.password)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))

    return _auth_response(user, "Login successful")


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's info."""
    user = await db.get(User, identity.user_id)
    if not user:
        # Token outlived its account
        raise HTTPException(
            status_code=401,
            detail=UNAUTHORIZED_DETAIL,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return UserRead(user_id=user.id, email=user.email, name=user.name)
