"""Shared enums for models and API."""

from enum import Enum


class PlanType(str, Enum):
    """Plan split; determines which workout labels a plan can schedule."""

    FULL_BODY = "Full Body"
    AB = "AB"
    ABC = "ABC"

    @property
    def workout_labels(self) -> list[str]:
        if self is PlanType.FULL_BODY:
            return ["Full"]
        if self is PlanType.AB:
            return ["A", "B"]
        return ["A", "B", "C"]


class WeightUnit(str, Enum):
    """Display unit. Storage is always kg."""

    KG = "kg"
    LB = "lb"


class ProgressionMode(str, Enum):
    """How the next top set is suggested."""

    PERCENT = "percent"  # Add a percentage to the last top set
    REP_CYCLE = "repCycle"  # Climb reps inside a window, then add weight


class TimerState(str, Enum):
    """Rest timer states."""

    IDLE = "idle"
    RUNNING = "running"
