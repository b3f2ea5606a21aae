"""Workout plan and its exercises."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymtracker.core.enums import PlanType
from gymtracker.db.base import Base


class Plan(Base):
    """A named plan: ordered exercises plus a weekly schedule of (weekday, label) pairs."""

    __tablename__ = "plans"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    plan_type: Mapped[PlanType] = mapped_column(Enum(PlanType), default=PlanType.FULL_BODY, nullable=False)
    # [{"weekday": 1..7, "label": "A"}, ...]; weekday 1 = Sunday
    schedule: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    exercises: Mapped[list["Exercise"]] = relationship(
        "Exercise",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="Exercise.position",
        collection_class=ordering_list("position"),
    )


class Exercise(Base):
    """Exercise inside a plan. Name is unique within its plan."""

    __tablename__ = "exercises"
    __table_args__ = (UniqueConstraint("plan_id", "name", name="uq_exercises_plan_id_name"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    plan_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    planned_sets: Mapped[int] = mapped_column(Integer, default=3, nullable=False)
    planned_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    label: Mapped[str | None] = mapped_column(String(20), nullable=True)  # Workout label (A/B/C/Full)
    muscle_group: Mapped[str | None] = mapped_column(String(100), nullable=True)
    equipment: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_bodyweight: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_favorite: Mapped[bool] = mapped_column(default=False, nullable=False)

    plan: Mapped["Plan"] = relationship("Plan", back_populates="exercises")
