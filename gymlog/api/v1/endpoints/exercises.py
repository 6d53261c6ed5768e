"""Exercise catalog endpoints (no delete: entries are referenced by plans)."""

from collections import Counter, defaultdict

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.api.deps import get_current_user
from gymlog.core.constants import COMMON_EQUIPMENT, DEFAULT_EXERCISE_PAGE_SIZE, MAX_PAGE_SIZE
from gymlog.core.enums import BodyPart, DifficultyLevel, ExerciseType, enum_values
from gymlog.core.errors import ConflictError, NotFoundError, ValidationError
from gymlog.db.session import get_db
from gymlog.models.exercise import Exercise
from gymlog.models.user import User
from gymlog.schemas.common import Envelope, PaginatedEnvelope, Pagination, page_offset
from gymlog.schemas.exercise import (
    ExerciseConstants,
    ExerciseCreate,
    ExerciseFilters,
    ExerciseRead,
    ExerciseStats,
    ExerciseUpdate,
)

router = APIRouter()


async def _name_taken(db: AsyncSession, name: str, exclude_id: str | None = None) -> bool:
    stmt = select(Exercise.id).where(Exercise.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Exercise.id != exclude_id)
    return await db.scalar(stmt) is not None


@router.post("", response_model=Envelope[ExerciseRead], status_code=201)
async def create_exercise(
    payload: ExerciseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if await db.get(Exercise, payload.id) is not None:
        raise ConflictError("Exercise with this id already exists")
    if await _name_taken(db, payload.name):
        raise ConflictError("Exercise with this name already exists")
    exercise = Exercise(**payload.model_dump())
    db.add(exercise)
    await db.flush()
    return Envelope[ExerciseRead](message="Exercise created successfully", data=ExerciseRead.model_validate(exercise))


@router.get("", response_model=PaginatedEnvelope[ExerciseRead])
async def list_exercises(
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_EXERCISE_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    body_part: BodyPart | None = None,
    exercise_type: ExerciseType | None = None,
    difficulty: DifficultyLevel | None = None,
    search: str | None = None,
):
    """List exercises ordered by name; search matches name or description."""
    stmt = select(Exercise)
    if body_part:
        stmt = stmt.where(Exercise.body_part == body_part)
    if exercise_type:
        stmt = stmt.where(Exercise.exercise_type == exercise_type)
    if difficulty:
        stmt = stmt.where(Exercise.difficulty == difficulty)
    if search:
        stmt = stmt.where(or_(Exercise.name.ilike(f"%{search}%"), Exercise.description.ilike(f"%{search}%")))
    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
    result = await db.execute(stmt.order_by(Exercise.name).offset(page_offset(page, limit)).limit(limit))
    return PaginatedEnvelope[ExerciseRead](
        data=[ExerciseRead.model_validate(e) for e in result.scalars().all()],
        pagination=Pagination.build(total or 0, page, limit),
    )


@router.get("/constants", response_model=Envelope[ExerciseConstants])
async def exercise_constants():
    """Allowed values for forms and client-side validation."""
    return Envelope[ExerciseConstants](
        data=ExerciseConstants(
            body_parts=enum_values(BodyPart),
            exercise_types=enum_values(ExerciseType),
            difficulty_levels=enum_values(DifficultyLevel),
            common_equipment=COMMON_EQUIPMENT,
        )
    )


@router.get("/filters", response_model=Envelope[ExerciseFilters])
async def exercise_filters(db: AsyncSession = Depends(get_db)):
    """Distinct body parts, types and difficulties present in the catalog."""
    rows = (await db.execute(select(Exercise.body_part, Exercise.exercise_type, Exercise.difficulty))).all()
    return Envelope[ExerciseFilters](
        data=ExerciseFilters(
            body_parts=sorted({r.body_part.value for r in rows}),
            exercise_types=sorted({r.exercise_type.value for r in rows}),
            difficulties=sorted({r.difficulty.value for r in rows if r.difficulty}),
        )
    )


@router.get("/stats", response_model=Envelope[ExerciseStats])
async def exercise_stats(db: AsyncSession = Depends(get_db)):
    rows = (await db.execute(select(Exercise.body_part, Exercise.exercise_type))).all()
    return Envelope[ExerciseStats](
        data=ExerciseStats(
            total_exercises=len(rows),
            by_body_part=dict(Counter(r.body_part.value for r in rows)),
            by_exercise_type=dict(Counter(r.exercise_type.value for r in rows)),
        )
    )


@router.get("/by-body-part", response_model=Envelope[dict[str, list[ExerciseRead]]])
async def exercises_by_body_part(db: AsyncSession = Depends(get_db)):
    """All exercises grouped by body part, each group ordered by name."""
    result = await db.execute(select(Exercise).order_by(Exercise.body_part, Exercise.name))
    grouped: dict[str, list[ExerciseRead]] = defaultdict(list)
    for exercise in result.scalars().all():
        grouped[exercise.body_part.value].append(ExerciseRead.model_validate(exercise))
    return Envelope[dict[str, list[ExerciseRead]]](data=dict(grouped))


@router.get("/{exercise_id}", response_model=Envelope[ExerciseRead])
async def get_exercise(
    exercise_id: str,
    db: AsyncSession = Depends(get_db),
):
    exercise = await db.get(Exercise, exercise_id)
    if not exercise:
        raise NotFoundError("Exercise not found")
    return Envelope[ExerciseRead](data=ExerciseRead.model_validate(exercise))


@router.put("/{exercise_id}", response_model=Envelope[ExerciseRead])
async def update_exercise(
    exercise_id: str,
    payload: ExerciseUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update an exercise (partial). Equipment may be cleared with null."""
    exercise = await db.get(Exercise, exercise_id)
    if not exercise:
        raise NotFoundError("Exercise not found")
    data = payload.model_dump(exclude_unset=True)
    if not data:
        raise ValidationError(details=["At least one field must be provided"])
    if "name" in data and await _name_taken(db, data["name"], exclude_id=exercise_id):
        raise ConflictError("Exercise with this name already exists")
    for k, v in data.items():
        setattr(exercise, k, v)
    await db.flush()
    return Envelope[ExerciseRead](message="Exercise updated successfully", data=ExerciseRead.model_validate(exercise))
