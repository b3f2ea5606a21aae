"""Personal records: ledger queries and stats."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.core.constants import RECENT_RECORDS_LIMIT
from gymtracker.db.session import get_db
from gymtracker.schemas.personal_record import (
    ExerciseRecordStatsRead,
    OverallRecordStatsRead,
    PersonalRecordRead,
)
from gymtracker.services.record_ledger import RecordLedger

router = APIRouter()


def get_ledger(db: AsyncSession = Depends(get_db)) -> RecordLedger:
    return RecordLedger(db)


@router.get("", response_model=list[PersonalRecordRead])
async def list_records(ledger: RecordLedger = Depends(get_ledger)):
    """Every ledger entry, newest first."""
    return await ledger.all_records()


@router.get("/recent", response_model=list[PersonalRecordRead])
async def recent_records(
    limit: int = Query(RECENT_RECORDS_LIMIT, ge=1, le=100),
    ledger: RecordLedger = Depends(get_ledger),
):
    return await ledger.recent_records(limit)


@router.get("/stats", response_model=OverallRecordStatsRead)
async def overall_stats(ledger: RecordLedger = Depends(get_ledger)):
    """Total records, distinct exercises, five most recent, and sum of weight x reps over all entries."""
    return await ledger.overall_stats()


@router.get("/exercises/{exercise_name}", response_model=list[PersonalRecordRead])
async def exercise_records(exercise_name: str, ledger: RecordLedger = Depends(get_ledger)):
    """Entries for one exercise, by reps ascending then weight descending."""
    return await ledger.records_for_exercise(exercise_name)


@router.get("/exercises/{exercise_name}/stats", response_model=ExerciseRecordStatsRead)
async def exercise_stats(exercise_name: str, ledger: RecordLedger = Depends(get_ledger)):
    stats = await ledger.exercise_stats(exercise_name)
    if stats is None:
        raise HTTPException(status_code=404, detail="No records for this exercise")
    return stats


@router.get("/exercises/{exercise_name}/current", response_model=PersonalRecordRead | None)
async def current_record(
    exercise_name: str,
    reps: int = Query(..., ge=0),
    ledger: RecordLedger = Depends(get_ledger),
):
    """Best entry for the (exercise, reps) bucket; null if the bucket is empty."""
    return await ledger.current_record(exercise_name, reps)
