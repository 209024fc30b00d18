"""
Verification of session tokens issued by the external identity provider.

The provider signs short-lived JWTs (RS256 by default). The verification key
comes either from a JWKS endpoint (keys rotated by the provider) or from a
static PEM file. Only verification happens here; this service never issues
tokens.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import jwt

from carelink.config import get_settings

_public_key: str | None = None
_jwks_client: jwt.PyJWKClient | None = None


def _load_public_key() -> str:
    """Load the PEM public key from disk (cached after first call)."""
    global _public_key  # noqa: PLW0603
    if _public_key is None:
        _public_key = Path(get_settings().auth_public_key_path).read_text()
    return _public_key


def _get_jwks_client(url: str) -> jwt.PyJWKClient:
    global _jwks_client  # noqa: PLW0603
    if _jwks_client is None:
        _jwks_client = jwt.PyJWKClient(url, cache_keys=True)
    return _jwks_client


def reset_keys() -> None:
    """Reset cached keys (useful for testing)."""
    global _public_key, _jwks_client  # noqa: PLW0603
    _public_key = None
    _jwks_client = None


async def _signing_key(token: str) -> Any:  # noqa: ANN401
    settings = get_settings()
    if settings.auth_jwks_url:
        client = _get_jwks_client(settings.auth_jwks_url)
        # PyJWKClient fetches over blocking urllib
        signing_key = await asyncio.to_thread(client.get_signing_key_from_jwt, token)
        return signing_key.key
    return _load_public_key()


async def verify_token(token: str) -> dict[str, Any]:
    """
    Verify a provider session token and return its claims.

    Raises:
        jwt.InvalidTokenError: On bad signature, expiry, issuer/audience
            mismatch, or a missing ``sub`` claim.
    """
    settings = get_settings()
    try:
        key = await _signing_key(token)
    except (OSError, jwt.PyJWKClientError) as e:
        msg = f"Unable to load verification key: {e}"
        raise jwt.InvalidTokenError(msg) from e

    options: dict[str, Any] = {"require": ["exp", "sub"]}
    kwargs: dict[str, Any] = {}
    if settings.auth_issuer:
        kwargs["issuer"] = settings.auth_issuer
    if settings.auth_audience:
        kwargs["audience"] = settings.auth_audience
    else:
        options["verify_aud"] = False

    return jwt.decode(
        token,
        key,
        algorithms=[settings.auth_algorithm],
        options=options,
        **kwargs,
    )
