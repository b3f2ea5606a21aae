"""Set suggestions for the logging screen: next top set, back-off sets, warm-up ramp.

All weights in and out are kg; rounding happens on the display unit's
increment so suggestions land on loadable plates.
"""

from __future__ import annotations

from typing import Iterable

from gymtracker.core.constants import (
    BACKOFF_FACTOR,
    DEFAULT_PLANNED_REPS,
    REP_WINDOW,
    WARMUP_PERCENTS,
    WARMUP_REPS,
    WARMUP_REST_MAX_SECONDS,
    WARMUP_REST_MIN_SECONDS,
)
from gymtracker.core.enums import ProgressionMode, WeightUnit
from gymtracker.core.units import to_display, to_kg
from gymtracker.models.app_settings import AppSettings
from gymtracker.models.workout_session import ExerciseSession, SetLog


def is_dumbbell(equipment: str | None) -> bool:
    e = (equipment or "").casefold()
    return "dumbbell" in e or "דאמ" in e


def increment(settings: AppSettings, dumbbell: bool) -> float:
    """Step size in the display unit."""
    if dumbbell:
        return settings.dumbbell_increment_kg if settings.weight_unit == WeightUnit.KG else settings.dumbbell_increment_lb
    return settings.weight_increment_kg if settings.weight_unit == WeightUnit.KG else settings.weight_increment_lb


def round_to_increment(weight_kg: float, settings: AppSettings, dumbbell: bool = False) -> float:
    step = increment(settings, dumbbell)
    if step <= 0:
        return weight_kg
    display = to_display(weight_kg, settings.weight_unit)
    return to_kg(round(display / step) * step, settings.weight_unit)


def rep_window(planned_reps: int) -> tuple[int, int]:
    return max(1, planned_reps - REP_WINDOW), planned_reps + REP_WINDOW


def _suggested(reps: int, weight: float, settings: AppSettings, rpe: float | None = None) -> SetLog:
    return SetLog(
        reps=reps,
        weight=weight,
        rpe=rpe,
        rest_seconds=settings.default_rest_seconds,
        is_warmup=False,
    )


def next_top_set(top: SetLog, planned_reps: int, settings: AppSettings, dumbbell: bool = False) -> SetLog:
    """Progress from last time's top set according to the configured mode."""
    if settings.progression_mode == ProgressionMode.PERCENT:
        progressed = top.weight * (1.0 + settings.progression_percent / 100.0)
        return _suggested(planned_reps, round_to_increment(progressed, settings, dumbbell), settings, top.rpe)

    reps_min, reps_max = rep_window(planned_reps)
    if top.reps < reps_max:
        return _suggested(min(reps_max, top.reps + 1), top.weight, settings, top.rpe)
    heavier = round_to_increment(top.weight + to_kg(increment(settings, dumbbell), settings.weight_unit), settings, dumbbell)
    return _suggested(reps_min, heavier, settings, top.rpe)


def suggest_sets(
    history: Iterable[SetLog],
    planned_sets: int,
    planned_reps: int | None,
    settings: AppSettings,
    dumbbell: bool = False,
) -> list[SetLog]:
    """
    Sets to pre-fill for an exercise from its recent history.
    Top set is the heaviest working set inside the rep window; the rest are 97.5% back-offs.
    With no usable history: planned sets of planned reps at 0 kg.
    """
    reps = planned_reps or DEFAULT_PLANNED_REPS
    target_sets = max(1, planned_sets)
    reps_min, reps_max = rep_window(reps)

    top = None
    for s in history:
        if s.warmup or not (reps_min <= s.reps <= reps_max):
            continue
        if top is None or s.weight > top.weight:
            top = s

    if top is None:
        return [_suggested(reps, 0.0, settings) for _ in range(target_sets)]

    first = next_top_set(top, reps, settings, dumbbell)
    backoff = round_to_increment(max(0.0, first.weight * BACKOFF_FACTOR), settings, dumbbell)
    return [first] + [_suggested(first.reps, backoff, settings) for _ in range(target_sets - 1)]


def warmup_ramp(exercise_session: ExerciseSession, settings: AppSettings, dumbbell: bool = False) -> list[SetLog]:
    """
    Put a five-step warm-up ramp at the head of the exercise's sets.
    Skipped when warm-ups already exist or there is no loaded working set.
    Returns the inserted sets.
    """
    if any(s.warmup for s in exercise_session.set_logs):
        return []
    first_work = next((s for s in exercise_session.set_logs if s.weight > 0), None)
    if first_work is None:
        return []

    rest = max(WARMUP_REST_MIN_SECONDS, min(WARMUP_REST_MAX_SECONDS, settings.default_rest_seconds))
    ramp = [
        SetLog(
            reps=reps,
            weight=round_to_increment(first_work.weight * pct, settings, dumbbell),
            rest_seconds=rest,
            is_warmup=True,
        )
        for pct, reps in zip(WARMUP_PERCENTS, WARMUP_REPS)
    ]
    for i, s in enumerate(ramp):
        exercise_session.set_logs.insert(i, s)
    return ramp

