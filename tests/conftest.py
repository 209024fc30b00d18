"""Shared test fixtures.

Tests run against an in-memory SQLite database (schema created from the ORM
metadata) with Redis left uninitialized, so the rate limiter and the
dashboard cache are bypassed. Session tokens are signed with a throwaway RSA
key whose public half is configured as the provider key.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

_TMP = Path(tempfile.mkdtemp(prefix="carelink_test_"))
_PRIVATE_KEY = rsa.generate_private_key(public_exponent=65537, key_size=2048)
PRIVATE_PEM = _PRIVATE_KEY.private_bytes(
    encoding=serialization.Encoding.PEM,
    format=serialization.PrivateFormat.PKCS8,
    encryption_algorithm=serialization.NoEncryption(),
)
_PUBLIC_KEY_PATH = _TMP / "auth_public.pem"
_PUBLIC_KEY_PATH.write_bytes(
    _PRIVATE_KEY.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
)

os.environ["CARELINK_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["CARELINK_REDIS_URL"] = ""
os.environ["CARELINK_UPLOAD_DIR"] = str(_TMP / "uploads")
os.environ["CARELINK_AUTH_PUBLIC_KEY_PATH"] = str(_PUBLIC_KEY_PATH)
os.environ["CARELINK_AUTH_JWKS_URL"] = ""
os.environ["CARELINK_AUTH_ISSUER"] = ""
os.environ["CARELINK_AUTH_AUDIENCE"] = ""
os.environ["CARELINK_LOG_FORMAT"] = "console"

import jwt  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from carelink.auth.jwt import reset_keys  # noqa: E402
from carelink.config import get_settings  # noqa: E402
from carelink.database import close_db, get_engine, get_session, init_db  # noqa: E402
from carelink.db.base import Base  # noqa: E402

ORPHANAGE_USER = "user_orphanage_1"
OTHER_ORPHANAGE_USER = "user_orphanage_2"
VOLUNTEER_USER = "user_volunteer_1"


def make_token(
    user_id: str,
    email: str | None = None,
    *,
    expires_in: timedelta = timedelta(hours=1),
    **claims: Any,  # noqa: ANN401
) -> str:
    """Sign a provider-style session token with the test key."""
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {"sub": user_id, "iat": now, "exp": now + expires_in, **claims}
    if email is not None:
        payload["email"] = email
    return jwt.encode(payload, PRIVATE_PEM, algorithm="RS256")


def auth_headers(user_id: str, email: str | None = None, **claims: Any) -> dict[str, str]:  # noqa: ANN401
    email = email if email is not None else f"{user_id}@example.com"
    return {"Authorization": f"Bearer {make_token(user_id, email, **claims)}"}


ORPHANAGE_PAYLOAD: dict[str, Any] = {
    "name": "Sunrise Children's Home",
    "email": "contact@sunrise.example.org",
    "phone": "+1 (555) 010-2030",
    "address": "12 Harbor Road",
    "city": "Portland",
    "state": "Oregon",
    "country": "USA",
    "postalCode": "97201",
    "description": "A family-style home caring for children aged 3 to 17.",
    "capacity": 40,
    "website": "https://sunrise.example.org",
    "registrationNumber": "ORG-12345",
}

VOLUNTEER_PAYLOAD: dict[str, Any] = {
    "firstName": "Maya",
    "lastName": "Lindqvist",
    "phoneNumber": "(555) 123-4567",
    "address": "48 Elm Street",
    "city": "Portland",
    "zipCode": "97205-1234",
    "dateOfBirth": "1992-06-15",
    "emergencyContactPhone": "555.987.6543",
    "skills": ["Tutoring", "Music"],
    "availability": ["Weekends"],
    "about": "Teacher by day, guitarist by night. Happy to help with homework.",
    "profileComplete": True,
}


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """An HTTP client bound to a fresh app and a fresh in-memory database."""
    get_settings.cache_clear()
    reset_keys()

    from carelink.main import create_app

    app = create_app()
    settings = get_settings()
    await init_db(settings.database_url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await close_db()


@pytest_asyncio.fixture
async def db_session(client: AsyncClient) -> AsyncGenerator[AsyncSession, None]:
    """A direct session on the client's database, for assertions."""
    async for session in get_session():
        yield session
        break


@pytest_asyncio.fixture
async def orphanage_headers(client: AsyncClient) -> dict[str, str]:
    """Headers for a user who has registered an orphanage."""
    headers = auth_headers(ORPHANAGE_USER, first_name="Grace", last_name="Okafor")
    response = await client.post("/api/v1/orphanage/register", json=ORPHANAGE_PAYLOAD, headers=headers)
    assert response.status_code == 201, response.text
    return headers


@pytest_asyncio.fixture
async def volunteer(client: AsyncClient) -> dict[str, Any]:
    """A volunteer with a complete profile. Returns headers and the saved profile."""
    headers = auth_headers(VOLUNTEER_USER, picture="https://img.example.com/maya.png")
    response = await client.post("/api/v1/volunteer-profile", json=VOLUNTEER_PAYLOAD, headers=headers)
    assert response.status_code == 200, response.text
    return {"headers": headers, "profile": response.json()["profile"]}
