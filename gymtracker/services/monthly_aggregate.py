"""Monthly aggregation of logged sets into per-exercise summaries and a day x exercise table.

Pure functions over already-loaded sessions, plus one store helper that loads
the sessions of a calendar month. Warm-up sets never count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo
from typing import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gymtracker.core.dates import as_utc
from gymtracker.models.workout_session import ExerciseSession, SetLog, WorkoutSession

logger = logging.getLogger(__name__)


@dataclass
class ExerciseSummary:
    total_sets: int = 0
    max_weight: float = 0.0
    total_volume: float = 0.0


@dataclass(frozen=True)
class MonthlyAggregate:
    """Result of aggregating one month.

    days: calendar days (local) with at least one session, ascending.
    exercises: distinct exercise names, ascending.
    cells: (day, exercise) -> "100.0 × 5"; missing key means not performed that day.
    """

    days: list[date] = field(default_factory=list)
    exercises: list[str] = field(default_factory=list)
    cells: dict[tuple[date, str], str] = field(default_factory=dict)
    summaries: dict[str, ExerciseSummary] = field(default_factory=dict)
    total_sets: int = 0
    total_volume: float = 0.0
    distinct_exercises: int = 0

    def cell(self, day: date, exercise_name: str) -> str:
        return self.cells.get((day, exercise_name), "")


def month_bounds(month: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Half-open [start of month, start of next month) in the given zone."""
    start = datetime(month.year, month.month, 1, tzinfo=tz)
    if month.month == 12:
        end = datetime(month.year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(month.year, month.month + 1, 1, tzinfo=tz)
    return start, end


def local_day(value: datetime, tz: tzinfo) -> date:
    """Calendar day of a timestamp in the given zone. Naive timestamps are UTC."""
    return as_utc(value).astimezone(tz).date()


def format_cell(set_log: SetLog) -> str:
    return f"{set_log.weight:.1f} × {set_log.reps}"


def best_working_set(exercise_session: ExerciseSession) -> SetLog | None:
    """Heaviest working set; the first one wins on ties."""
    best = None
    for s in exercise_session.working_sets:
        if best is None or s.weight > best.weight:
            best = s
    return best


def summarize_exercises(sessions: Iterable[WorkoutSession]) -> dict[str, ExerciseSummary]:
    """Per exercise name: working-set count, heaviest weight, sum of weight * reps."""
    summary: dict[str, ExerciseSummary] = {}
    for session in sessions:
        for ex in session.exercise_sessions:
            working = ex.working_sets
            if not working:
                continue
            entry = summary.setdefault(ex.exercise_name, ExerciseSummary())
            entry.total_sets += len(working)
            entry.max_weight = max(entry.max_weight, max(s.weight for s in working))
            entry.total_volume += sum(s.weight * s.reps for s in working)
    return summary


def aggregate_month(sessions: Sequence[WorkoutSession], month: date, tz: tzinfo = timezone.utc) -> MonthlyAggregate:
    """
    Aggregate sessions already filtered to the month (see fetch_sessions_for_month).
    `month` is kept in the signature for callers that label the result; only the
    supplied sessions are read.
    """
    summaries = summarize_exercises(sessions)

    by_day: dict[date, list[WorkoutSession]] = {}
    for session in sessions:
        by_day.setdefault(local_day(session.date, tz), []).append(session)

    days = sorted(by_day)
    exercises = sorted({ex.exercise_name for s in sessions for ex in s.exercise_sessions})

    cells: dict[tuple[date, str], str] = {}
    for day in days:
        for name in exercises:
            # First session of the day with a working set of this exercise; later sessions that day are ignored
            for session in by_day[day]:
                ex = next((e for e in session.exercise_sessions if e.exercise_name == name), None)
                best = best_working_set(ex) if ex is not None else None
                if best is not None:
                    cells[(day, name)] = format_cell(best)
                    break

    return MonthlyAggregate(
        days=days,
        exercises=exercises,
        cells=cells,
        summaries=summaries,
        total_sets=sum(s.total_sets for s in summaries.values()),
        total_volume=sum(s.total_volume for s in summaries.values()),
        distinct_exercises=len(summaries),
    )


async def fetch_sessions_for_month(db: AsyncSession, month: date, tz: tzinfo) -> list[WorkoutSession]:
    """Sessions dated inside the local calendar month, ascending by date. Store errors give []."""
    start, end = month_bounds(month, tz)
    try:
        result = await db.execute(
            select(WorkoutSession)
            .where(
                WorkoutSession.date >= start.astimezone(timezone.utc),
                WorkoutSession.date < end.astimezone(timezone.utc),
            )
            .options(selectinload(WorkoutSession.exercise_sessions).selectinload(ExerciseSession.set_logs))
            .order_by(WorkoutSession.date.asc())
        )
        return list(result.scalars().all())
    except SQLAlchemyError:
        logger.exception("Failed to fetch sessions for %04d-%02d", month.year, month.month)
        return []
