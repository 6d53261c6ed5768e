"""Security utilities (passwords, JWT)."""

import secrets
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from gymlog.core.config import Settings, get_settings

password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Development without JWT_SECRET: tokens are valid for this process only
_ephemeral_secret = secrets.token_urlsafe(32)


def hash_password(plain: str) -> str:
    return password_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return password_context.verify(plain, hashed)


def check_jwt_secret(settings: Settings) -> None:
    """Raise RuntimeError when no signing secret is configured outside development."""
    if not settings.jwt_secret and settings.environment != "development":
        raise RuntimeError("JWT_SECRET must be set when ENVIRONMENT is not 'development'")


def _signing_key(settings: Settings) -> str:
    check_jwt_secret(settings)
    return settings.jwt_secret or _ephemeral_secret


def create_access_token(user_id: str, email: str) -> str:
    """Signed token identifying the user; expiry from settings."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expires_minutes),
    }
    return jwt.encode(payload, _signing_key(settings), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and verify a token. Raises jwt.InvalidTokenError on any problem."""
    settings = get_settings()
    return jwt.decode(
        token,
        _signing_key(settings),
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "exp"]},
    )
