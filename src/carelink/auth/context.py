"""Caller identity resolved once per request and passed explicitly to services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CallerContext:
    """Who is making the request, as asserted by the identity provider."""

    user_id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    image_url: str | None = None

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> CallerContext:
        """Build from token claims, accepting both provider-style and OIDC claim names."""
        return cls(
            user_id=str(claims["sub"]),
            email=claims.get("email"),
            first_name=claims.get("first_name") or claims.get("given_name"),
            last_name=claims.get("last_name") or claims.get("family_name"),
            image_url=claims.get("image_url") or claims.get("picture"),
        )
