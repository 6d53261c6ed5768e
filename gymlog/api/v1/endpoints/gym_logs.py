"""Gym log CRUD endpoints. Logs are private to their owner."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.api.deps import get_current_user
from gymlog.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, RECENT_LOG_DAYS
from gymlog.core.errors import ValidationError
from gymlog.db.session import get_db
from gymlog.models.gym_log import GymLog
from gymlog.models.user import User
from gymlog.schemas.common import Envelope, PaginatedEnvelope, Pagination, page_offset
from gymlog.schemas.gym_log import GymLogCreate, GymLogRead, GymLogStats, GymLogUpdate
from gymlog.services.access_policy import Operation, Resource, ensure_access

router = APIRouter()


async def _get_owned_log(db: AsyncSession, log_id: uuid.UUID, actor: User, operation: Operation) -> GymLog:
    log = await db.get(GymLog, log_id)
    ensure_access(
        actor.id,
        Resource(owner_id=log.user_id) if log else None,
        operation,
        label="Gym log",
        hide_forbidden=operation == Operation.READ,
        forbidden_message=f"You can only {operation.value} your own gym logs",
    )
    return log


@router.post("", response_model=Envelope[GymLogRead], status_code=201)
async def create_gym_log(
    payload: GymLogCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    log = GymLog(user_id=current_user.id, **payload.model_dump())
    db.add(log)
    await db.flush()
    return Envelope[GymLogRead](message="Gym log created successfully", data=GymLogRead.model_validate(log))


@router.get("", response_model=PaginatedEnvelope[GymLogRead])
async def list_gym_logs(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    exercise: str | None = None,
):
    """Your logs, newest first, optionally filtered by exercise name (substring, case-insensitive)."""
    stmt = select(GymLog).where(GymLog.user_id == current_user.id)
    if exercise:
        stmt = stmt.where(GymLog.exercise.ilike(f"%{exercise}%"))
    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
    result = await db.execute(
        stmt.order_by(GymLog.created_at.desc()).offset(page_offset(page, limit)).limit(limit)
    )
    return PaginatedEnvelope[GymLogRead](
        data=[GymLogRead.model_validate(log) for log in result.scalars().all()],
        pagination=Pagination.build(total or 0, page, limit),
    )


@router.get("/stats/{user_id}", response_model=Envelope[GymLogStats])
async def gym_log_stats(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Total logs, distinct exercises and logs in the last week for a user (yourself only)."""
    ensure_access(
        current_user.id,
        Resource(owner_id=user_id),
        Operation.READ,
        label="User",
        forbidden_message="You can only view your own statistics",
    )
    since = datetime.now(timezone.utc) - timedelta(days=RECENT_LOG_DAYS)
    row = (
        await db.execute(
            select(
                func.count(GymLog.id).label("total"),
                func.count(distinct(GymLog.exercise)).label("unique_exercises"),
            ).where(GymLog.user_id == user_id)
        )
    ).one()
    recent = await db.scalar(
        select(func.count(GymLog.id)).where(GymLog.user_id == user_id, GymLog.created_at >= since)
    )
    return Envelope[GymLogStats](
        data=GymLogStats(
            total_logs=row.total or 0,
            unique_exercises=row.unique_exercises or 0,
            recent_logs=recent or 0,
        )
    )


@router.get("/{log_id}", response_model=Envelope[GymLogRead])
async def get_gym_log(
    log_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    log = await _get_owned_log(db, log_id, current_user, Operation.READ)
    return Envelope[GymLogRead](data=GymLogRead.model_validate(log))


@router.put("/{log_id}", response_model=Envelope[GymLogRead])
async def update_gym_log(
    log_id: uuid.UUID,
    payload: GymLogUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Partial update; an explicit null clears notes."""
    log = await _get_owned_log(db, log_id, current_user, Operation.UPDATE)
    data = payload.model_dump(exclude_unset=True)
    if not data:
        raise ValidationError(details=["At least one field must be provided"])
    for k, v in data.items():
        setattr(log, k, v)
    await db.flush()
    return Envelope[GymLogRead](message="Gym log updated successfully", data=GymLogRead.model_validate(log))


@router.delete("/{log_id}", response_model=Envelope[None])
async def delete_gym_log(
    log_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    log = await _get_owned_log(db, log_id, current_user, Operation.DELETE)
    await db.delete(log)
    await db.flush()
    return Envelope[None](message="Gym log deleted successfully")
