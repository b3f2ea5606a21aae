"""Workout session CRUD, exercise sessions, and set logging (with personal record detection)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gymtracker.api.deps import get_timer_controls
from gymtracker.core.dates import as_utc
from gymtracker.db.session import get_db
from gymtracker.models.workout_session import ExerciseSession, SetLog, WorkoutSession
from gymtracker.schemas.personal_record import PersonalRecordRead
from gymtracker.schemas.workout_session import (
    ExerciseSessionCreate,
    ExerciseSessionRead,
    SetLogCreate,
    SetLogged,
    SetLogRead,
    WorkoutSessionCreate,
    WorkoutSessionRead,
    WorkoutSessionReadWithExercises,
    WorkoutSessionUpdate,
)
from gymtracker.services.app_settings import get_or_create_settings
from gymtracker.services.control_events import RestTimerControls
from gymtracker.services.progression import is_dumbbell, warmup_ramp
from gymtracker.services.record_ledger import RecordLedger

router = APIRouter()


async def _get_session(db: AsyncSession, session_id: uuid.UUID) -> WorkoutSession:
    result = await db.execute(
        select(WorkoutSession)
        .where(WorkoutSession.id == session_id)
        .options(selectinload(WorkoutSession.exercise_sessions).selectinload(ExerciseSession.set_logs))
        .execution_options(populate_existing=True)
    )
    session = result.scalar_one_or_none()
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _get_exercise(session: WorkoutSession, exercise_session_id: uuid.UUID) -> ExerciseSession:
    exercise = next((e for e in session.exercise_sessions if e.id == exercise_session_id), None)
    if exercise is None:
        raise HTTPException(status_code=404, detail="Exercise session not found")
    return exercise


@router.get("", response_model=list[WorkoutSessionRead])
async def list_sessions(
    db: AsyncSession = Depends(get_db),
    skip: int = 0,
    limit: int = 50,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
):
    """List sessions (without exercises), newest first, optionally filtered by date range."""
    stmt = select(WorkoutSession)
    if from_date:
        stmt = stmt.where(WorkoutSession.date >= as_utc(from_date))
    if to_date:
        stmt = stmt.where(WorkoutSession.date <= as_utc(to_date))
    stmt = stmt.order_by(WorkoutSession.date.desc()).offset(skip).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.post("", response_model=WorkoutSessionReadWithExercises, status_code=201)
async def create_session(payload: WorkoutSessionCreate, db: AsyncSession = Depends(get_db)):
    """Start a session. Dates without a zone are taken as UTC; no date means now."""
    data = payload.model_dump(exclude={"date", "exercise_names"})
    session = WorkoutSession(
        **data,
        date=as_utc(payload.date) if payload.date else datetime.now(timezone.utc),
        exercise_sessions=[ExerciseSession(exercise_name=name, set_logs=[]) for name in payload.exercise_names],
    )
    db.add(session)
    await db.flush()
    return await _get_session(db, session.id)


@router.get("/{session_id}", response_model=WorkoutSessionReadWithExercises)
async def get_session(session_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """A session with its exercises and sets, in logging order."""
    return await _get_session(db, session_id)


@router.patch("/{session_id}", response_model=WorkoutSessionReadWithExercises)
async def update_session(
    session_id: uuid.UUID,
    payload: WorkoutSessionUpdate,
    db: AsyncSession = Depends(get_db),
):
    session = await _get_session(db, session_id)
    for k, v in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(session, k, as_utc(v) if k == "date" else v)
    await db.flush()
    return await _get_session(db, session_id)


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Delete a session with its exercises and sets. Personal records stay in the ledger."""
    session = await _get_session(db, session_id)
    await db.delete(session)
    return None


@router.post("/{session_id}/exercises", response_model=ExerciseSessionRead, status_code=201)
async def add_exercise_session(
    session_id: uuid.UUID,
    payload: ExerciseSessionCreate,
    db: AsyncSession = Depends(get_db),
):
    session = await _get_session(db, session_id)
    if any(e.exercise_name == payload.exercise_name for e in session.exercise_sessions):
        raise HTTPException(status_code=409, detail="Exercise already in session")
    exercise = ExerciseSession(exercise_name=payload.exercise_name, set_logs=[])
    session.exercise_sessions.append(exercise)
    await db.flush()
    return exercise


@router.delete("/{session_id}/exercises/{exercise_session_id}", status_code=204)
async def remove_exercise_session(
    session_id: uuid.UUID,
    exercise_session_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    session = await _get_session(db, session_id)
    exercise = _get_exercise(session, exercise_session_id)
    session.exercise_sessions.remove(exercise)
    session.exercise_sessions.reorder()
    await db.flush()
    return None


@router.post(
    "/{session_id}/exercises/{exercise_session_id}/sets",
    response_model=SetLogged,
    status_code=201,
)
async def log_set(
    session_id: uuid.UUID,
    exercise_session_id: uuid.UUID,
    payload: SetLogCreate,
    db: AsyncSession = Depends(get_db),
    controls: RestTimerControls = Depends(get_timer_controls),
):
    """
    Append a set to the exercise and check it against the record ledger.
    The response carries the new personal record when the set beat its (exercise, reps) bucket.
    """
    session = await _get_session(db, session_id)
    exercise = _get_exercise(session, exercise_session_id)
    set_log = SetLog(**payload.model_dump())
    exercise.set_logs.append(set_log)
    await db.flush()

    record = await RecordLedger(db).evaluate(set_log, exercise.exercise_name)
    # An externally started rest belongs to the exercise that was just logged
    controls.set_context(exercise.exercise_name, session.workout_label)

    return SetLogged(
        set=SetLogRead.model_validate(set_log),
        personal_record=PersonalRecordRead.model_validate(record) if record is not None else None,
    )


@router.delete("/{session_id}/exercises/{exercise_session_id}/sets/{set_id}", status_code=204)
async def delete_set(
    session_id: uuid.UUID,
    exercise_session_id: uuid.UUID,
    set_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Remove a set. Ledger entries it produced are kept."""
    session = await _get_session(db, session_id)
    exercise = _get_exercise(session, exercise_session_id)
    set_log = next((s for s in exercise.set_logs if s.id == set_id), None)
    if set_log is None:
        raise HTTPException(status_code=404, detail="Set not found")
    exercise.set_logs.remove(set_log)
    exercise.set_logs.reorder()
    await db.flush()
    return None


@router.post(
    "/{session_id}/exercises/{exercise_session_id}/warmup-ramp",
    response_model=list[SetLogRead],
)
async def add_warmup_ramp(
    session_id: uuid.UUID,
    exercise_session_id: uuid.UUID,
    equipment: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Insert a warm-up ramp before the first loaded set. Empty list when nothing was added."""
    session = await _get_session(db, session_id)
    exercise = _get_exercise(session, exercise_session_id)
    settings = await get_or_create_settings(db)
    ramp = warmup_ramp(exercise, settings, is_dumbbell(equipment))
    if not ramp:
        return []
    await db.flush()
    return [SetLogRead.model_validate(s) for s in ramp]
