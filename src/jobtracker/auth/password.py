"""Password hashing utilities.

Uses bcrypt for password hashing. bcrypt generates and embeds a random
salt in every hash and is deliberately slow (work factor from settings,
12 rounds ≈ 100ms on modern hardware).
"""

import bcrypt

from jobtracker.config import settings


def hash_password(password: str) -> str:
    """Hash a password with bcrypt.

    bcrypt produces hashes starting with "$2b$". Passwords are
    truncated to 72 bytes (bcrypt's limit).
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash.

    Malformed or non-bcrypt hashes never match.
    """
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


# Compared against when the email is unknown, so a failed login costs
# one bcrypt check whether or not the account exists.
DUMMY_HASH = hash_password("jobtracker-dummy-password")
