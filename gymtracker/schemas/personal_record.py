"""Personal record schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PersonalRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID | None = None  # None when the entry could not be saved
    exercise_name: str
    weight: float
    reps: int
    achieved_at: datetime
    is_warmup: bool = False
    notes: str | None = None


class ExerciseRecordStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    exercise_name: str
    max_weight: float
    total_records: int
    most_recent: PersonalRecordRead
    least_recent: PersonalRecordRead
    records: list[PersonalRecordRead] = []


class OverallRecordStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    total_records: int
    unique_exercises: int
    total_weight: float
    recent: list[PersonalRecordRead] = []
