"""User service — credential storage and login.

Owns the users table. Password hashes are created and checked here
and never leave this module: callers get User rows back, and API
schemas never include password_hash.

bcrypt is CPU-bound (~100ms), so hashing and checking run in a worker
thread via asyncio.to_thread to keep the event loop responsive.
"""

import asyncio
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker.auth.password import DUMMY_HASH, hash_password, verify_password
from jobtracker.db.models import User
from jobtracker.services.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    ValidationError,
)

logger = structlog.get_logger()

MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Invalid email or password"


class UserService:
    """Business logic for registration and authentication."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        confirm_password: Optional[str] = None,
    ) -> User:
        """Create a user with a bcrypt-hashed password.

        confirm_password is optional; when given it must equal password.
        Email uniqueness is checked up front and again by the unique
        constraint on commit, so two concurrent registrations for the
        same email can't both succeed.
        """
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email or not password:
            raise ValidationError("Name, email, and password are required")
        if confirm_password is not None and password != confirm_password:
            raise ValidationError("Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        if await self.find_by_email(email):
            raise DuplicateEmailError("Email already registered")

        password_hash = await asyncio.to_thread(hash_password, password)
        user = User(name=name, email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateEmailError("Email already registered")

        logger.info("jobtracker.user_registered", user_id=str(user.id))
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def authenticate(self, email: Optional[str], password: Optional[str]) -> User:
        """Check email/password and return the user.

        Unknown email and wrong password raise the same error, and both
        paths run one bcrypt check.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.find_by_email(email.strip())
        stored_hash = user.password_hash if user else DUMMY_HASH
        matches = await asyncio.to_thread(verify_password, password, stored_hash)

        if not user or not matches:
            logger.info("jobtracker.login_failed")
            raise InvalidCredentialsError(INVALID_CREDENTIALS)

        logger.info("jobtracker.login_succeeded", user_id=str(user.id))
        return user
