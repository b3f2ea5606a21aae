"""Workout session tree: WorkoutSession -> ExerciseSession -> SetLog."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymtracker.db.base import Base


class WorkoutSession(Base):
    """A single workout occurrence. Plan name and label are snapshots, not links, so history survives plan edits."""

    __tablename__ = "workout_sessions"
    __table_args__ = (Index("ix_workout_sessions_date", "date"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    plan_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    workout_label: Mapped[str | None] = mapped_column(String(20), nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_completed: Mapped[bool] = mapped_column(default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    exercise_sessions: Mapped[list["ExerciseSession"]] = relationship(
        "ExerciseSession",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ExerciseSession.position",
        collection_class=ordering_list("position"),
    )


class ExerciseSession(Base):
    """One exercise inside a session. The name is a copy so it survives exercise rename/deletion."""

    __tablename__ = "exercise_sessions"
    __table_args__ = (
        UniqueConstraint("session_id", "exercise_name", name="uq_exercise_sessions_session_id_exercise_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0)
    exercise_name: Mapped[str] = mapped_column(String(255), nullable=False)

    session: Mapped["WorkoutSession"] = relationship("WorkoutSession", back_populates="exercise_sessions")
    set_logs: Mapped[list["SetLog"]] = relationship(
        "SetLog",
        back_populates="exercise_session",
        cascade="all, delete-orphan",
        order_by="SetLog.position",
        collection_class=ordering_list("position"),
    )

    @property
    def working_sets(self) -> list["SetLog"]:
        return [s for s in self.set_logs if not s.warmup]


class SetLog(Base):
    """One set. Weight is always kg. A missing warm-up flag means a working set."""

    __tablename__ = "set_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    exercise_session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("exercise_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    rpe: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)  # rest actually taken
    is_warmup: Mapped[bool | None] = mapped_column(nullable=True)

    exercise_session: Mapped["ExerciseSession"] = relationship("ExerciseSession", back_populates="set_logs")

    @property
    def warmup(self) -> bool:
        return bool(self.is_warmup)
