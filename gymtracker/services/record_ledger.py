"""Personal record ledger: per (exercise, reps) best-weight tracking.

A set is a record when it is not a warm-up and its weight is strictly greater
than the heaviest ledger entry for the same exercise name and exact rep count
(or no entry exists yet). Equal weight is not a record. Buckets are keyed by
the literal rep count; a heavy triple never affects the five-rep bucket.

The ledger is append-only. The "current record" of a bucket is always derived
as the heaviest entry, never stored separately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.core.constants import OVERALL_RECENT_RECORDS, RECENT_RECORDS_LIMIT
from gymtracker.core.dates import as_utc
from gymtracker.models.personal_record import PersonalRecord
from gymtracker.models.workout_session import SetLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExerciseRecordStats:
    exercise_name: str
    max_weight: float
    total_records: int
    most_recent: PersonalRecord
    least_recent: PersonalRecord
    records: list[PersonalRecord] = field(default_factory=list)


@dataclass(frozen=True)
class OverallRecordStats:
    total_records: int
    unique_exercises: int
    total_weight: float  # sum of weight * reps over every entry
    recent: list[PersonalRecord] = field(default_factory=list)


class RecordLedger:
    """Detects and queries personal records over one DB session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def evaluate(self, set_log: SetLog, exercise_name: str) -> PersonalRecord | None:
        """
        Append a ledger entry if this set beats its bucket, and return it.
        Returns None for warm-ups and for sets at or below the current record.
        If the write fails the detected record is still returned (and the failure logged).
        """
        if set_log.warmup:
            return None

        current = await self.current_record(exercise_name, set_log.reps)
        if current is not None and not set_log.weight > current.weight:
            return None

        record = PersonalRecord(
            exercise_name=exercise_name,
            weight=float(set_log.weight),
            reps=int(set_log.reps),
            achieved_at=datetime.now(timezone.utc),
            is_warmup=False,
            notes=set_log.notes,
        )
        # Savepoint: a failed ledger write must not undo the caller's set
        try:
            async with self.db.begin_nested():
                self.db.add(record)
            logger.info("New personal record: %s - %.1fkg x %d", exercise_name, record.weight, record.reps)
        except SQLAlchemyError:
            logger.exception("Failed to save personal record for %s (%d reps)", exercise_name, record.reps)
        return record

    async def current_record(self, exercise_name: str, reps: int) -> PersonalRecord | None:
        """Heaviest entry in the (exercise, reps) bucket."""
        try:
            result = await self.db.execute(
                select(PersonalRecord)
                .where(PersonalRecord.exercise_name == exercise_name, PersonalRecord.reps == reps)
                .order_by(PersonalRecord.weight.desc())
                .limit(1)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError:
            logger.exception("Failed to fetch personal records for %s (%d reps)", exercise_name, reps)
            return None

    async def records_for_exercise(self, exercise_name: str) -> list[PersonalRecord]:
        """Every entry for an exercise, reps ascending then weight descending."""
        return await self._fetch(
            select(PersonalRecord)
            .where(PersonalRecord.exercise_name == exercise_name)
            .order_by(PersonalRecord.reps.asc(), PersonalRecord.weight.desc())
        )

    async def all_records(self) -> list[PersonalRecord]:
        """Every entry, newest first."""
        return await self._fetch(select(PersonalRecord).order_by(PersonalRecord.achieved_at.desc()))

    async def recent_records(self, limit: int = RECENT_RECORDS_LIMIT) -> list[PersonalRecord]:
        return await self._fetch(
            select(PersonalRecord).order_by(PersonalRecord.achieved_at.desc()).limit(max(0, limit))
        )

    async def exercise_stats(self, exercise_name: str) -> ExerciseRecordStats | None:
        records = await self.records_for_exercise(exercise_name)
        if not records:
            return None
        by_time = sorted(records, key=lambda r: as_utc(r.achieved_at))
        return ExerciseRecordStats(
            exercise_name=exercise_name,
            max_weight=max(r.weight for r in records),
            total_records=len(records),
            most_recent=by_time[-1],
            least_recent=by_time[0],
            records=records,
        )

    async def overall_stats(self) -> OverallRecordStats:
        records = await self.all_records()
        return OverallRecordStats(
            total_records=len(records),
            unique_exercises=len({r.exercise_name for r in records}),
            total_weight=sum(r.volume for r in records),
            recent=records[:OVERALL_RECENT_RECORDS],
        )

    async def _fetch(self, stmt) -> list[PersonalRecord]:
        try:
            result = await self.db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError:
            logger.exception("Failed to fetch personal records")
            return []
