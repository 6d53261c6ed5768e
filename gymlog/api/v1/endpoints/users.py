"""User endpoints: registration, login and account management."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.api.deps import get_current_user
from gymlog.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from gymlog.core.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from gymlog.core.security import create_access_token, hash_password, verify_password
from gymlog.db.session import get_db
from gymlog.models.user import User
from gymlog.schemas.common import AuthEnvelope, Envelope, PaginatedEnvelope, Pagination, page_offset
from gymlog.schemas.user import UserCreate, UserLogin, UserRead, UserUpdate
from gymlog.services.access_policy import Operation, Resource, ensure_access

router = APIRouter()
logger = logging.getLogger(__name__)


async def _email_taken(db: AsyncSession, email: str, exclude_id: uuid.UUID | None = None) -> bool:
    stmt = select(User.id).where(func.lower(User.email) == email.lower())
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return await db.scalar(stmt) is not None


@router.post("/register", response_model=AuthEnvelope[UserRead], status_code=201)
async def register(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create an account and return it with an access token."""
    if await _email_taken(db, payload.email):
        raise ConflictError("User already exists with this email")
    user = User(email=payload.email, name=payload.name, password=hash_password(payload.password))
    db.add(user)
    await db.flush()
    logger.info("Registered user %s", user.id)
    return AuthEnvelope[UserRead](
        message="User created successfully",
        data=UserRead.model_validate(user),
        token=create_access_token(str(user.id), user.email),
    )


@router.post("/login", response_model=AuthEnvelope[UserRead])
async def login(
    payload: UserLogin,
    db: AsyncSession = Depends(get_db),
):
    user = await db.scalar(select(User).where(func.lower(User.email) == payload.email.lower()))
    if user is None or not verify_password(payload.password, user.password):
        raise AuthenticationError("Invalid credentials")
    return AuthEnvelope[UserRead](
        message="Login successful",
        data=UserRead.model_validate(user),
        token=create_access_token(str(user.id), user.email),
    )


@router.get("", response_model=PaginatedEnvelope[UserRead])
async def list_users(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: str | None = None,
):
    """List users, optionally searching name and email (case-insensitive)."""
    stmt = select(User)
    if search:
        stmt = stmt.where(or_(User.name.ilike(f"%{search}%"), User.email.ilike(f"%{search}%")))
    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
    result = await db.execute(
        stmt.order_by(User.created_at.desc()).offset(page_offset(page, limit)).limit(limit)
    )
    return PaginatedEnvelope[UserRead](
        data=[UserRead.model_validate(u) for u in result.scalars().all()],
        pagination=Pagination.build(total or 0, page, limit),
    )


@router.get("/{user_id}", response_model=Envelope[UserRead])
async def get_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = await db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return Envelope[UserRead](data=UserRead.model_validate(user))


@router.put("/{user_id}", response_model=Envelope[UserRead])
async def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update name and/or email of your own account."""
    user = await db.get(User, user_id)
    ensure_access(
        current_user.id,
        Resource(owner_id=user.id) if user else None,
        Operation.UPDATE,
        label="User",
        forbidden_message="You can only update your own account",
    )
    data = payload.model_dump(exclude_unset=True)
    if not data:
        raise ValidationError(details=["At least one of name, email must be provided"])
    if "email" in data and await _email_taken(db, data["email"], exclude_id=user.id):
        raise ConflictError("User already exists with this email")
    for k, v in data.items():
        setattr(user, k, v)
    await db.flush()
    return Envelope[UserRead](message="User updated successfully", data=UserRead.model_validate(user))


@router.delete("/{user_id}", response_model=Envelope[None])
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete your own account together with its gym logs and workout plans."""
    user = await db.get(User, user_id)
    ensure_access(
        current_user.id,
        Resource(owner_id=user.id) if user else None,
        Operation.DELETE,
        label="User",
        forbidden_message="You can only delete your own account",
    )
    await db.delete(user)
    await db.flush()
    logger.info("Deleted user %s", user_id)
    return Envelope[None](message="User deleted successfully")
