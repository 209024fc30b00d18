"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
import structlog
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from carelink.auth.context import CallerContext
from carelink.auth.jwt import verify_token
from carelink.errors import Unauthorized

logger = structlog.get_logger()

_bearer = HTTPBearer(auto_error=False)


async def get_caller(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
) -> CallerContext:
    """
    Verify the provider session token and return the caller context.

    Raises 401 when the token is missing or invalid.
    """
    if credentials is None:
        raise Unauthorized("Unauthorized: Please sign in to continue")
    try:
        claims = await verify_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        logger.info("token_rejected", reason=str(e))
        raise Unauthorized(f"Invalid session: {e}") from e

    caller = CallerContext.from_claims(claims)
    structlog.contextvars.bind_contextvars(user_id=caller.user_id)
    return caller
