"""Process-wide user settings (one logical row, created lazily)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, Float, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from gymtracker.core.constants import (
    DEFAULT_DUMBBELL_INCREMENT_KG,
    DEFAULT_DUMBBELL_INCREMENT_LB,
    DEFAULT_PROGRESSION_PERCENT,
    DEFAULT_REST_SECONDS,
    DEFAULT_WEIGHT_INCREMENT_KG,
    DEFAULT_WEIGHT_INCREMENT_LB,
)
from gymtracker.core.enums import ProgressionMode, WeightUnit
from gymtracker.db.base import Base


class AppSettings(Base):
    """Display unit, rest default, increment steps and auto-progression mode."""

    __tablename__ = "app_settings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    weight_unit: Mapped[WeightUnit] = mapped_column(Enum(WeightUnit), default=WeightUnit.KG, nullable=False)
    default_rest_seconds: Mapped[int] = mapped_column(Integer, default=DEFAULT_REST_SECONDS, nullable=False)
    weight_increment_kg: Mapped[float] = mapped_column(Float, default=DEFAULT_WEIGHT_INCREMENT_KG, nullable=False)
    weight_increment_lb: Mapped[float] = mapped_column(Float, default=DEFAULT_WEIGHT_INCREMENT_LB, nullable=False)
    dumbbell_increment_kg: Mapped[float] = mapped_column(Float, default=DEFAULT_DUMBBELL_INCREMENT_KG, nullable=False)
    dumbbell_increment_lb: Mapped[float] = mapped_column(Float, default=DEFAULT_DUMBBELL_INCREMENT_LB, nullable=False)
    progression_mode: Mapped[ProgressionMode] = mapped_column(
        Enum(ProgressionMode), default=ProgressionMode.PERCENT, nullable=False
    )
    progression_percent: Mapped[float] = mapped_column(Float, default=DEFAULT_PROGRESSION_PERCENT, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    @classmethod
    def with_defaults(cls) -> "AppSettings":
        """Build an unsaved instance with every default filled in (column defaults only apply on INSERT)."""
        return cls(
            weight_unit=WeightUnit.KG,
            default_rest_seconds=DEFAULT_REST_SECONDS,
            weight_increment_kg=DEFAULT_WEIGHT_INCREMENT_KG,
            weight_increment_lb=DEFAULT_WEIGHT_INCREMENT_LB,
            dumbbell_increment_kg=DEFAULT_DUMBBELL_INCREMENT_KG,
            dumbbell_increment_lb=DEFAULT_DUMBBELL_INCREMENT_LB,
            progression_mode=ProgressionMode.PERCENT,
            progression_percent=DEFAULT_PROGRESSION_PERCENT,
        )
