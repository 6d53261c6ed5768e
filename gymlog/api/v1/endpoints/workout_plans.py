"""Workout plan endpoints: plans with ordered exercises, public or private."""

from __future__ import annotations

import uuid
from collections import Counter

from fastapi import APIRouter, Depends, Query
from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gymlog.api.deps import get_current_user, get_optional_user
from gymlog.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from gymlog.core.enums import BodyPart, DifficultyLevel
from gymlog.core.errors import ValidationError
from gymlog.db.session import get_db
from gymlog.models.user import User
from gymlog.models.workout_plan import WorkoutPlan
from gymlog.schemas.common import Envelope, PaginatedEnvelope, Pagination, page_offset
from gymlog.schemas.workout_plan import (
    PlanExerciseCreate,
    PlanExerciseRead,
    PlanExerciseUpdate,
    WorkoutPlanCreate,
    WorkoutPlanRead,
    WorkoutPlanStats,
    WorkoutPlanSummary,
    WorkoutPlanUpdate,
)
from gymlog.services.access_policy import Operation, Resource, ensure_access
from gymlog.services.plan_writer import PLAN_LABEL, PlanAggregateWriter, load_plan

router = APIRouter()


def visible_plans_statement(
    actor_id: uuid.UUID | None,
    *,
    muscle_type: BodyPart | None = None,
    difficulty_level: DifficultyLevel | None = None,
    created_by: uuid.UUID | None = None,
    is_public: bool | None = None,
    search: str | None = None,
) -> Select:
    stmt = select(WorkoutPlan)
    if actor_id is not None:
        stmt = stmt.where(or_(WorkoutPlan.created_by == actor_id, WorkoutPlan.is_public.is_(True)))
    else:
        stmt = stmt.where(WorkoutPlan.is_public.is_(True))
    if muscle_type:
        # text[] @> ARRAY[...] on PostgreSQL
        stmt = stmt.where(WorkoutPlan.muscle_types.contains([muscle_type.value]))
    if difficulty_level:
        stmt = stmt.where(WorkoutPlan.difficulty_level == difficulty_level)
    if created_by:
        stmt = stmt.where(WorkoutPlan.created_by == created_by)
    if is_public is not None:
        stmt = stmt.where(WorkoutPlan.is_public.is_(is_public))
    if search:
        stmt = stmt.where(
            or_(WorkoutPlan.name.ilike(f"%{search}%"), WorkoutPlan.description.ilike(f"%{search}%"))
        )
    return stmt


@router.post("", response_model=Envelope[WorkoutPlanRead], status_code=201)
async def create_workout_plan(
    payload: WorkoutPlanCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a plan with its exercises. Either everything is saved or nothing is."""
    plan = await PlanAggregateWriter(db).create(current_user.id, payload)
    return Envelope[WorkoutPlanRead](
        message="Workout plan created successfully", data=WorkoutPlanRead.from_plan(plan)
    )


@router.get("", response_model=PaginatedEnvelope[WorkoutPlanSummary])
async def list_workout_plans(
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    muscle_type: BodyPart | None = None,
    difficulty_level: DifficultyLevel | None = None,
    created_by: uuid.UUID | None = None,
    is_public: bool | None = None,
    search: str | None = None,
):
    """Plans visible to the caller (own and public; public only when anonymous), newest first."""
    stmt = visible_plans_statement(
        current_user.id if current_user else None,
        muscle_type=muscle_type,
        difficulty_level=difficulty_level,
        created_by=created_by,
        is_public=is_public,
        search=search,
    )
    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
    result = await db.execute(
        stmt.options(selectinload(WorkoutPlan.creator))
        .order_by(WorkoutPlan.created_at.desc())
        .offset(page_offset(page, limit))
        .limit(limit)
    )
    return PaginatedEnvelope[WorkoutPlanSummary](
        data=[WorkoutPlanSummary.model_validate(p) for p in result.scalars().all()],
        pagination=Pagination.build(total or 0, page, limit),
    )


@router.get("/stats", response_model=Envelope[WorkoutPlanStats])
async def workout_plan_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Counts of your plans by visibility, difficulty and muscle type."""
    rows = (
        await db.execute(
            select(WorkoutPlan.is_public, WorkoutPlan.difficulty_level, WorkoutPlan.muscle_types).where(
                WorkoutPlan.created_by == current_user.id
            )
        )
    ).all()
    public = sum(1 for r in rows if r.is_public)
    return Envelope[WorkoutPlanStats](
        data=WorkoutPlanStats(
            total_plans=len(rows),
            public_plans=public,
            private_plans=len(rows) - public,
            by_difficulty=dict(Counter(r.difficulty_level.value for r in rows if r.difficulty_level)),
            muscle_type_usage=dict(Counter(m for r in rows for m in (r.muscle_types or []))),
        )
    )


@router.get("/{plan_id}", response_model=Envelope[WorkoutPlanRead])
async def get_workout_plan(
    plan_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
):
    """A plan with its exercises. Private plans of other users are reported as not found."""
    plan = await load_plan(db, plan_id)
    ensure_access(
        current_user.id if current_user else None,
        Resource(owner_id=plan.created_by, is_public=plan.is_public) if plan else None,
        Operation.READ,
        label=PLAN_LABEL,
        hide_forbidden=True,
    )
    return Envelope[WorkoutPlanRead](data=WorkoutPlanRead.from_plan(plan))


@router.put("/{plan_id}", response_model=Envelope[WorkoutPlanRead])
async def update_workout_plan(
    plan_id: uuid.UUID,
    payload: WorkoutPlanUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Partial update. Supplying `exercises` replaces the plan's exercise list."""
    if not payload.model_fields_set - {"expected_revision"}:
        raise ValidationError(details=["At least one field must be provided"])
    plan = await PlanAggregateWriter(db).update(plan_id, current_user.id, payload)
    return Envelope[WorkoutPlanRead](
        message="Workout plan updated successfully", data=WorkoutPlanRead.from_plan(plan)
    )


@router.delete("/{plan_id}", response_model=Envelope[None])
async def delete_workout_plan(
    plan_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await PlanAggregateWriter(db).delete(plan_id, current_user.id)
    return Envelope[None](message="Workout plan deleted successfully")


@router.post("/{plan_id}/exercises", response_model=Envelope[PlanExerciseRead], status_code=201)
async def add_exercise_to_plan(
    plan_id: uuid.UUID,
    payload: PlanExerciseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Append an exercise; without order_index it goes after the current last one."""
    entry = await PlanAggregateWriter(db).add_exercise(plan_id, current_user.id, payload)
    return Envelope[PlanExerciseRead](
        message="Exercise added to workout plan successfully", data=PlanExerciseRead.from_entry(entry)
    )


@router.put("/{plan_id}/exercises/{entry_id}", response_model=Envelope[PlanExerciseRead])
async def update_exercise_in_plan(
    plan_id: uuid.UUID,
    entry_id: uuid.UUID,
    payload: PlanExerciseUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not payload.model_fields_set:
        raise ValidationError(details=["At least one field must be provided"])
    entry = await PlanAggregateWriter(db).update_exercise(plan_id, entry_id, current_user.id, payload)
    return Envelope[PlanExerciseRead](message="Exercise updated successfully", data=PlanExerciseRead.from_entry(entry))


@router.delete("/{plan_id}/exercises/{entry_id}", response_model=Envelope[None])
async def remove_exercise_from_plan(
    plan_id: uuid.UUID,
    entry_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await PlanAggregateWriter(db).remove_exercise(plan_id, entry_id, current_user.id)
    return Envelope[None](message="Exercise removed from workout plan successfully")
