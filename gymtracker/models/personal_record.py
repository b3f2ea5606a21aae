"""Personal record ledger entry (append-only)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from gymtracker.db.base import Base


class PersonalRecord(Base):
    """A new best weight for an (exercise name, reps) bucket.

    No foreign keys: entries reference exercises by name only and outlive the
    session and exercise that produced them. Rows are never updated or deleted.
    """

    __tablename__ = "personal_records"
    __table_args__ = (
        Index("ix_personal_records_bucket", "exercise_name", "reps"),
        Index("ix_personal_records_achieved_at", "achieved_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    exercise_name: Mapped[str] = mapped_column(String(255), nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    achieved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    is_warmup: Mapped[bool] = mapped_column(default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    @property
    def volume(self) -> float:
        return self.weight * self.reps
