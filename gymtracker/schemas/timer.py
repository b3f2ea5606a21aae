"""Rest timer schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from gymtracker.core.enums import TimerState


class TimerStart(BaseModel):
    duration_seconds: int | None = None  # settings default when omitted
    exercise_name: str | None = None
    workout_label: str | None = None


class TimerTick(BaseModel):
    remaining_seconds: int


class TimerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    state: TimerState
    remaining_seconds: int
    exercise_name: str | None = None
    workout_label: str | None = None
    started_at: datetime | None = None
    ends_at: datetime | None = None


class TimerTransition(BaseModel):
    """Result of a transition call; applied=False means it was a no-op."""

    applied: bool
    timer: TimerRead


class LiveStatusRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    remaining_seconds: int
    exercise_name: str | None = None
    started_at: datetime
    ends_at: datetime
    workout_label: str | None = None
