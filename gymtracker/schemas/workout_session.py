"""Workout session, exercise session and set schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gymtracker.schemas.personal_record import PersonalRecordRead


class SetLogBase(BaseModel):
    reps: int = Field(..., ge=0)
    weight: float = Field(..., ge=0)  # kg
    rpe: float | None = Field(None, ge=0, le=10)
    notes: str | None = Field(None, max_length=500)
    rest_seconds: int | None = Field(None, ge=0)
    is_warmup: bool = False


class SetLogCreate(SetLogBase):
    pass


class SetLogRead(SetLogBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    exercise_session_id: UUID
    position: int
    is_warmup: bool | None = False


class SetLogged(BaseModel):
    """A logged set and the personal record it set, if any."""

    set: SetLogRead
    personal_record: PersonalRecordRead | None = None


class ExerciseSessionCreate(BaseModel):
    exercise_name: str = Field(..., min_length=1, max_length=255)


class ExerciseSessionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    session_id: UUID
    position: int
    exercise_name: str
    set_logs: list[SetLogRead] = []


class WorkoutSessionBase(BaseModel):
    plan_name: str | None = None
    workout_label: str | None = None
    duration_seconds: int | None = Field(None, ge=0)
    is_completed: bool = False
    notes: str | None = None


class WorkoutSessionCreate(WorkoutSessionBase):
    date: datetime | None = None
    exercise_names: list[str] = []

    @model_validator(mode="after")
    def unique_exercises(self):
        if len(set(self.exercise_names)) != len(self.exercise_names):
            raise ValueError("an exercise can appear only once per session")
        return self


class WorkoutSessionUpdate(BaseModel):
    date: datetime | None = None
    duration_seconds: int | None = Field(None, ge=0)
    is_completed: bool | None = None
    notes: str | None = None


class WorkoutSessionRead(WorkoutSessionBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    date: datetime


class WorkoutSessionReadWithExercises(WorkoutSessionRead):
    exercise_sessions: list[ExerciseSessionRead] = []


class SuggestedSet(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    reps: int
    weight: float
    rpe: float | None = None
    rest_seconds: int | None = None
    is_warmup: bool | None = False
