"""Request dependencies: resolve the acting user from the bearer token."""

from __future__ import annotations

import uuid

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.core.errors import AuthenticationError
from gymlog.core.security import decode_access_token
from gymlog.db.session import get_db
from gymlog.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


async def _user_from_token(db: AsyncSession, token: str) -> User:
    try:
        claims = decode_access_token(token)
        user_id = uuid.UUID(claims["sub"])
    except (jwt.InvalidTokenError, ValueError) as exc:
        raise AuthenticationError("Invalid token") from exc
    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationError("Invalid token: user no longer exists")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Authenticated user; 401 when the token is missing or invalid."""
    if credentials is None:
        raise AuthenticationError("Access denied. No token provided.")
    return await _user_from_token(db, credentials.credentials)


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Authenticated user, or None for anonymous requests (public reads)."""
    if credentials is None:
        return None
    return await _user_from_token(db, credentials.credentials)
