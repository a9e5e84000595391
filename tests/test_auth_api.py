"""Auth API tests.

Covers:
1. Registration + validation + duplicate prevention
2. Login → bearer token, with identical errors for bad email/password
3. Protected /me endpoint through the real token pipeline
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from sqlalchemy import func, select

from jobtracker.auth.jwt import verify_token
from jobtracker.config import settings
from jobtracker.db.models import User


def _email(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


# ═══════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_user(client):
    """Register returns the user and a verifiable token."""
    email = _email("reg")
    r = await client.post(
        "/api/auth/register",
        json={
            "name": "Ana",
            "email": email,
            "password": "secret1",
            "confirmPassword": "secret1",
        },
    )
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == email
    assert body["name"] == "Ana"
    assert body["message"] == "User registered successfully"
    assert "passwordHash" not in body and "password" not in body

    claims = verify_token(body["token"])
    assert str(claims.user_id) == body["userId"]
    assert claims.email == email


@pytest.mark.asyncio
async def test_register_stores_bcrypt_hash(client, db_session):
    email = _email("hash")
    await client.post(
        "/api/auth/register",
        json={"name": "H", "email": email, "password": "secret1", "confirmPassword": "secret1"},
    )
    user = (await db_session.execute(select(User).where(User.email == email))).scalar_one()
    assert user.password_hash.startswith("$2")
    assert "secret1" not in user.password_hash


@pytest.mark.asyncio
async def test_register_duplicate_email(client, db_session):
    """Second registration with the same email → 409, one stored user."""
    email = _email("dup")
    body = {"name": "User 1", "email": email, "password": "secret1", "confirmPassword": "secret1"}

    r1 = await client.post("/api/auth/register", json=body)
    assert r1.status_code == 201

    r2 = await client.post("/api/auth/register", json={**body, "name": "User 2"})
    assert r2.status_code == 409
    assert r2.json()["detail"] == "Email already registered"

    count = await db_session.scalar(
        select(func.count()).select_from(User).where(User.email == email)
    )
    assert count == 1


@pytest.mark.asyncio
async def test_register_email_is_case_sensitive(client):
    email = _email("case")
    body = {"name": "U", "password": "secret1", "confirmPassword": "secret1"}
    r1 = await client.post("/api/auth/register", json={**body, "email": email})
    r2 = await client.post("/api/auth/register", json={**body, "email": email.upper()})
    assert r1.status_code == 201
    assert r2.status_code == 201


@pytest.mark.asyncio
async def test_register_short_password(client):
    """Password must be at least 6 characters."""
    r = await client.post(
        "/api/auth/register",
        json={"name": "Short", "email": _email("short"), "password": "abc", "confirmPassword": "abc"},
    )
    assert r.status_code == 400
    assert "at least 6" in r.json()["detail"]


@pytest.mark.asyncio
async def test_register_password_mismatch(client):
    r = await client.post(
        "/api/auth/register",
        json={"name": "M", "email": _email("mm"), "password": "secret1", "confirmPassword": "secret2"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Passwords do not match"


@pytest.mark.asyncio
async def test_register_without_confirmation(client):
    """confirmPassword is only checked when supplied."""
    r = await client.post(
        "/api/auth/register",
        json={"name": "NoConfirm", "email": _email("nc"), "password": "secret1"},
    )
    assert r.status_code == 201


@pytest.mark.asyncio
async def test_register_long_name(client, db_session):
    """Names have no length cap beyond what the client sends."""
    name = "N" * 300
    r = await client.post(
        "/api/auth/register",
        json={"name": name, "email": _email("long"), "password": "secret1"},
    )
    assert r.status_code == 201, r.text
    assert r.json()["name"] == name

    stored = await db_session.scalar(select(User).where(User.email == r.json()["email"]))
    assert stored.name == name


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["name", "email", "password"])
async def test_register_missing_field(client, missing):
    body = {"name": "X", "email": _email("miss"), "password": "secret1"}
    body.pop(missing)
    r = await client.post("/api/auth/register", json=body)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_register_malformed_body(client):
    """Wrong JSON types are a 400, not FastAPI's default 422."""
    r = await client.post("/api/auth/register", json={"name": ["x"], "email": 5})
    assert r.status_code == 400


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_success(client, make_user):
    """Login with valid credentials returns a token for the same user."""
    email = _email("login")
    registered, _ = await make_user(name="Login User", email=email, password="my_password")

    r = await client.post("/api/auth/login", json={"email": email, "password": "my_password"})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Login successful"
    assert body["userId"] == registered["userId"]
    assert body["name"] == "Login User"
    assert str(verify_token(body["token"]).user_id) == registered["userId"]


@pytest.mark.asyncio
async def test_login_wrong_password_same_as_unknown_email(client, make_user):
    """Wrong password and unknown email are indistinguishable."""
    email = _email("wrong")
    await make_user(email=email, password="correct_password")

    wrong_pw = await client.post("/api/auth/login", json={"email": email, "password": "nope-nope"})
    no_user = await client.post(
        "/api/auth/login", json={"email": _email("ghost"), "password": "nope-nope"}
    )

    assert wrong_pw.status_code == 401
    assert no_user.status_code == 401
    assert wrong_pw.json() == no_user.json() == {"detail": "Invalid email or password"}


@pytest.mark.asyncio
async def test_login_missing_fields(client):
    r = await client.post("/api/auth/login", json={"email": "a@x.com"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Email and password are required"


# ═══════════════════════════════════════════════════════════
# Protected Endpoint (/me)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_me_with_token(client, make_user):
    body, headers = await make_user(name="Me User")
    r = await client.get("/api/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json() == {"userId": body["userId"], "email": body["email"], "name": "Me User"}


@pytest.mark.asyncio
async def test_me_without_token(client):
    r = await client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
@pytest.mark.parametrize("header", [
    "Bearer invalid_token_here",
    "Bearer",
    "Basic dXNlcjpwYXNz",
    "invalid",
])
async def test_me_with_bad_authorization(client, header):
    r = await client.get("/api/auth/me", headers={"Authorization": header})
    assert r.status_code == 401
    assert r.json() == {"detail": "Authentication required"}


@pytest.mark.asyncio
async def test_expired_token_rejected_like_any_other(client, make_user):
    """Expired tokens get exactly the same 401 as garbage tokens."""
    body, _ = await make_user()
    past = datetime.now(timezone.utc) - timedelta(days=8)
    expired = jwt.encode(
        {"sub": body["userId"], "email": body["email"], "iat": past, "exp": past + timedelta(days=7)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json() == {"detail": "Authentication required"}


@pytest.mark.asyncio
async def test_token_for_deleted_user_rejected(client, make_user, db_session):
    body, headers = await make_user()
    user = await db_session.get(User, uuid.UUID(body["userId"]))
    await db_session.delete(user)
    await db_session.commit()

    r = await client.get("/api/auth/me", headers=headers)
    assert r.status_code == 401
