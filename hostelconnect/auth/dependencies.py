"""FastAPI authentication dependencies.

The bearer token is resolved to a ``User`` exactly once per request, here.
Every route that needs the caller depends on ``get_current_user`` (or
``get_optional_user`` for public routes) instead of decoding tokens itself.
"""

import logging
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hostelconnect.auth.jwt import decode_token
from hostelconnect.database import get_db
from hostelconnect.models.user import User

logger = logging.getLogger(__name__)

# Strict bearer: rejects requests without a token
_bearer_scheme = HTTPBearer()

# Optional bearer: returns None if no token provided
_bearer_scheme_optional = HTTPBearer(auto_error=False)


class _InvalidCredentials(Exception):
    """Internal signal carrying the 401 detail message."""


async def _resolve_user(token: str, db: AsyncSession) -> User:
    """Decode an access token and load its active user.

    Raises:
        _InvalidCredentials: with a client-facing detail message.
    """
    try:
        payload = decode_token(token)
    except JWTError:
        raise _InvalidCredentials("Could not validate credentials") from None

    # Only accept access tokens, not refresh tokens
    if payload.get("type") != "access":
        raise _InvalidCredentials("Invalid token type")

    sub: str | None = payload.get("sub")
    if sub is None:
        raise _InvalidCredentials("Could not validate credentials")

    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise _InvalidCredentials("Could not validate credentials") from None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise _InvalidCredentials("Could not validate credentials")
    if not user.is_active:
        raise _InvalidCredentials("User account is inactive")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Return the authenticated, active user for the Bearer token.

    Raises:
        HTTPException 401: If the token is invalid, expired, of the wrong
            type, or its user is missing or inactive.
    """
    try:
        return await _resolve_user(credentials.credentials, db)
    except _InvalidCredentials as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from None


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme_optional),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Optionally authenticate a user from a Bearer token.

    Returns ``None`` instead of raising when no token is provided or the
    token does not resolve to an active user. Used by public endpoints
    (search, chat, navigation) that behave differently for signed-in users.
    """
    if credentials is None:
        return None
    try:
        return await _resolve_user(credentials.credentials, db)
    except _InvalidCredentials as exc:
        logger.debug("Ignoring unusable bearer token on public route: %s", exc)
        return None
