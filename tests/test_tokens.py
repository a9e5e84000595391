"""Token service and password hashing tests."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from jobtracker.auth.jwt import TOKEN_LIFETIME, TokenError, issue_token, verify_token
from jobtracker.auth.password import hash_password, verify_password
from jobtracker.config import settings


def _encode(payload: dict, secret: str | None = None) -> str:
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


def test_issue_and_verify_roundtrip():
    user_id = uuid.uuid4()
    claims = verify_token(issue_token(user_id, "a@x.com"))
    assert claims.user_id == user_id
    assert claims.email == "a@x.com"


def test_token_expires_after_seven_days():
    token = issue_token(uuid.uuid4(), "a@x.com")
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert payload["exp"] - payload["iat"] == int(TOKEN_LIFETIME.total_seconds())
    assert TOKEN_LIFETIME == timedelta(days=7)


def test_expired_token_rejected():
    past = datetime.now(timezone.utc) - timedelta(days=8)
    token = _encode({"sub": str(uuid.uuid4()), "email": "a@x.com",
                     "iat": past, "exp": past + TOKEN_LIFETIME})
    with pytest.raises(TokenError):
        verify_token(token)


def test_wrong_secret_rejected():
    now = datetime.now(timezone.utc)
    token = _encode(
        {"sub": str(uuid.uuid4()), "email": "a@x.com", "iat": now, "exp": now + TOKEN_LIFETIME},
        secret="some-other-secret-that-is-long-enough-for-hs256",
    )
    with pytest.raises(TokenError):
        verify_token(token)


def test_tampered_token_rejected():
    token = issue_token(uuid.uuid4(), "a@x.com")
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])
    with pytest.raises(TokenError):
        verify_token(tampered)


@pytest.mark.parametrize("payload", [
    {"email": "a@x.com"},                       # no sub
    {"sub": "not-a-uuid", "email": "a@x.com"},  # bad sub
    {"sub": str(uuid.uuid4())},                 # no email
])
def test_incomplete_claims_rejected(payload):
    now = datetime.now(timezone.utc)
    token = _encode({**payload, "iat": now, "exp": now + TOKEN_LIFETIME})
    with pytest.raises(TokenError):
        verify_token(token)


def test_missing_expiry_rejected():
    token = _encode({"sub": str(uuid.uuid4()), "email": "a@x.com",
                     "iat": datetime.now(timezone.utc)})
    with pytest.raises(TokenError):
        verify_token(token)


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c"])
def test_malformed_token_rejected(garbage):
    with pytest.raises(TokenError):
        verify_token(garbage)


# ─── Passwords ───────────────────────────────────────────


def test_password_hash_is_salted():
    h1 = hash_password("secret1")
    h2 = hash_password("secret1")
    assert h1 != h2
    assert h1.startswith("$2")
    assert verify_password("secret1", h1)
    assert verify_password("secret1", h2)


def test_wrong_password_fails():
    assert not verify_password("secret2", hash_password("secret1"))


def test_malformed_hash_never_matches():
    assert not verify_password("secret1", "not-a-bcrypt-hash")
    assert not verify_password("secret1", "")
