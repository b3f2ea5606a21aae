"""ORM models - import all so Base.metadata is complete for migrations."""

from gymtracker.models.app_settings import AppSettings
from gymtracker.models.personal_record import PersonalRecord
from gymtracker.models.plan import Exercise, Plan
from gymtracker.models.workout_session import ExerciseSession, SetLog, WorkoutSession

__all__ = [
    "AppSettings",
    "Exercise",
    "ExerciseSession",
    "PersonalRecord",
    "Plan",
    "SetLog",
    "WorkoutSession",
]
