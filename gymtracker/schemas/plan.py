"""Plan, exercise and schedule schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gymtracker.core.enums import PlanType


class PlannedDay(BaseModel):
    weekday: int = Field(..., ge=1, le=7)  # 1 = Sunday
    label: str


def schedule_problems(plan_type: PlanType, schedule: list[PlannedDay]) -> list[str]:
    """Labels in the schedule that the plan type cannot schedule."""
    labels = plan_type.workout_labels
    return [
        f"label {day.label!r} on weekday {day.weekday} is not one of {', '.join(labels)}"
        for day in schedule
        if day.label not in labels
    ]


class ExerciseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    planned_sets: int = Field(3, ge=1)
    planned_reps: int | None = Field(None, ge=1)
    notes: str | None = None
    label: str | None = None
    muscle_group: str | None = None
    equipment: str | None = None
    is_bodyweight: bool = False
    is_favorite: bool = False


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    position: int


class PlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    plan_type: PlanType = PlanType.FULL_BODY


class PlanCreate(PlanBase):
    exercises: list[ExerciseCreate] = []
    schedule: list[PlannedDay] = []

    @model_validator(mode="after")
    def check_plan(self):
        problems = schedule_problems(self.plan_type, self.schedule)
        names = [e.name for e in self.exercises]
        if len(set(names)) != len(names):
            problems.append("exercise names must be unique within a plan")
        if problems:
            raise ValueError("; ".join(problems))
        return self


class PlanUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    plan_type: PlanType | None = None
    schedule: list[PlannedDay] | None = None


class PlanRead(PlanBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    schedule: list[PlannedDay] = []
    exercises: list[ExerciseRead] = []
