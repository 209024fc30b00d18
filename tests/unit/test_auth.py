"""Unit tests for provider token verification and caller context."""

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
from conftest import make_token

from carelink.auth.context import CallerContext
from carelink.auth.jwt import reset_keys, verify_token
from carelink.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_keys():
    get_settings.cache_clear()
    reset_keys()
    yield
    reset_keys()


@pytest.mark.asyncio
async def test_valid_token_claims():
    claims = await verify_token(make_token("user_abc", "abc@example.com", given_name="Ada"))
    assert claims["sub"] == "user_abc"
    assert claims["email"] == "abc@example.com"


@pytest.mark.asyncio
async def test_expired_token_rejected():
    token = make_token("user_abc", expires_in=timedelta(minutes=-5))
    with pytest.raises(jwt.ExpiredSignatureError):
        await verify_token(token)


@pytest.mark.asyncio
async def test_token_signed_with_other_key_rejected():
    token = jwt.encode({"sub": "user_abc", "exp": 9999999999}, "not-the-key", algorithm="HS256")
    with pytest.raises(jwt.InvalidTokenError):
        await verify_token(token)


@pytest.mark.asyncio
async def test_missing_key_file_is_invalid_token(monkeypatch):
    monkeypatch.setenv("CARELINK_AUTH_PUBLIC_KEY_PATH", "/nonexistent/auth_public.pem")
    get_settings.cache_clear()
    reset_keys()
    with pytest.raises(jwt.InvalidTokenError, match="Unable to load verification key"):
        await verify_token(make_token("user_abc"))
    get_settings.cache_clear()


def test_caller_from_provider_claims():
    caller = CallerContext.from_claims(
        {"sub": "user_1", "email": "a@b.org", "first_name": "Ada", "last_name": "Obi", "image_url": "https://i/x"}
    )
    assert caller == CallerContext("user_1", "a@b.org", "Ada", "Obi", "https://i/x")


def test_caller_from_oidc_claims():
    caller = CallerContext.from_claims({"sub": 42, "given_name": "Ada", "family_name": "Obi", "picture": "p"})
    assert caller.user_id == "42"
    assert caller.first_name == "Ada"
    assert caller.last_name == "Obi"
    assert caller.image_url == "p"
    assert caller.email is None
