"""Workout plans: exercises, weekly schedule, and set suggestions from history."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gymtracker.db.session import get_db
from gymtracker.models.plan import Exercise, Plan
from gymtracker.models.workout_session import ExerciseSession, WorkoutSession
from gymtracker.schemas.plan import ExerciseCreate, ExerciseRead, PlanCreate, PlanRead, PlanUpdate, PlannedDay, schedule_problems
from gymtracker.schemas.workout_session import SuggestedSet
from gymtracker.services.app_settings import get_or_create_settings
from gymtracker.services.progression import is_dumbbell, suggest_sets

router = APIRouter()

# Sessions of the same plan/label looked at when suggesting sets
SUGGESTION_HISTORY_SESSIONS = 3


async def _get_plan(db: AsyncSession, plan_id: uuid.UUID) -> Plan:
    result = await db.execute(
        select(Plan)
        .where(Plan.id == plan_id)
        .options(selectinload(Plan.exercises))
        .execution_options(populate_existing=True)
    )
    plan = result.scalar_one_or_none()
    if not plan:
        raise HTTPException(status_code=404, detail="Plan not found")
    return plan


@router.get("", response_model=list[PlanRead])
async def list_plans(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Plan).options(selectinload(Plan.exercises)).order_by(Plan.name))
    return list(result.scalars().all())


@router.post("", response_model=PlanRead, status_code=201)
async def create_plan(payload: PlanCreate, db: AsyncSession = Depends(get_db)):
    plan = Plan(
        name=payload.name,
        plan_type=payload.plan_type,
        schedule=[d.model_dump() for d in payload.schedule],
        exercises=[Exercise(**e.model_dump()) for e in payload.exercises],
    )
    db.add(plan)
    await db.flush()
    return await _get_plan(db, plan.id)


@router.get("/{plan_id}", response_model=PlanRead)
async def get_plan(plan_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await _get_plan(db, plan_id)


@router.patch("/{plan_id}", response_model=PlanRead)
async def update_plan(plan_id: uuid.UUID, payload: PlanUpdate, db: AsyncSession = Depends(get_db)):
    """Rename, change type or replace the schedule. The schedule must fit the (new) plan type."""
    plan = await _get_plan(db, plan_id)
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    plan_type = data.get("plan_type", plan.plan_type)
    schedule = payload.schedule if payload.schedule is not None else [PlannedDay(**d) for d in plan.schedule]
    problems = schedule_problems(plan_type, schedule)
    if problems:
        raise HTTPException(status_code=400, detail="; ".join(problems))
    if "name" in data:
        plan.name = data["name"]
    plan.plan_type = plan_type
    plan.schedule = [d.model_dump() for d in schedule]
    await db.flush()
    return await _get_plan(db, plan_id)


@router.delete("/{plan_id}", status_code=204)
async def delete_plan(plan_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Delete a plan and its exercises. Logged sessions keep their plan name snapshot."""
    plan = await _get_plan(db, plan_id)
    await db.delete(plan)
    return None


@router.post("/{plan_id}/exercises", response_model=ExerciseRead, status_code=201)
async def add_exercise(plan_id: uuid.UUID, payload: ExerciseCreate, db: AsyncSession = Depends(get_db)):
    plan = await _get_plan(db, plan_id)
    if any(e.name == payload.name for e in plan.exercises):
        raise HTTPException(status_code=409, detail="Exercise already in plan")
    exercise = Exercise(**payload.model_dump())
    plan.exercises.append(exercise)
    await db.flush()
    await db.refresh(exercise)
    return exercise


@router.delete("/{plan_id}/exercises/{exercise_id}", status_code=204)
async def remove_exercise(plan_id: uuid.UUID, exercise_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    plan = await _get_plan(db, plan_id)
    exercise = next((e for e in plan.exercises if e.id == exercise_id), None)
    if exercise is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    plan.exercises.remove(exercise)
    plan.exercises.reorder()
    await db.flush()
    return None


@router.get("/{plan_id}/exercises/{exercise_id}/suggestions", response_model=list[SuggestedSet])
async def suggest_exercise_sets(plan_id: uuid.UUID, exercise_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """
    Pre-filled sets for an exercise, progressed from the last few sessions of the
    same plan and workout label (mode and increments from settings).
    """
    plan = await _get_plan(db, plan_id)
    exercise = next((e for e in plan.exercises if e.id == exercise_id), None)
    if exercise is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    label = exercise.label or plan.plan_type.workout_labels[0]

    result = await db.execute(
        select(WorkoutSession)
        .where(WorkoutSession.plan_name == plan.name, WorkoutSession.workout_label == label)
        .options(selectinload(WorkoutSession.exercise_sessions).selectinload(ExerciseSession.set_logs))
        .order_by(WorkoutSession.date.desc())
        .limit(SUGGESTION_HISTORY_SESSIONS)
    )
    wanted = exercise.name.casefold()
    history = [
        s
        for session in result.scalars().all()
        for ex in session.exercise_sessions
        if ex.exercise_name.casefold() == wanted
        for s in ex.set_logs
    ]
    settings = await get_or_create_settings(db)
    return suggest_sets(history, exercise.planned_sets, exercise.planned_reps, settings, is_dumbbell(exercise.equipment))
