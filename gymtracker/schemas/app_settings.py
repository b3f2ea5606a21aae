"""Settings schemas."""

from pydantic import BaseModel, ConfigDict, Field

from gymtracker.core.enums import ProgressionMode, WeightUnit


class AppSettingsBase(BaseModel):
    weight_unit: WeightUnit = WeightUnit.KG
    default_rest_seconds: int = Field(..., gt=0)
    weight_increment_kg: float = Field(..., gt=0)
    weight_increment_lb: float = Field(..., gt=0)
    dumbbell_increment_kg: float = Field(..., gt=0)
    dumbbell_increment_lb: float = Field(..., gt=0)
    progression_mode: ProgressionMode = ProgressionMode.PERCENT
    progression_percent: float = Field(..., ge=0, le=100)


class AppSettingsRead(AppSettingsBase):
    model_config = ConfigDict(from_attributes=True)


class AppSettingsUpdate(BaseModel):
    weight_unit: WeightUnit | None = None
    default_rest_seconds: int | None = Field(None, gt=0)
    weight_increment_kg: float | None = Field(None, gt=0)
    weight_increment_lb: float | None = Field(None, gt=0)
    dumbbell_increment_kg: float | None = Field(None, gt=0)
    dumbbell_increment_lb: float | None = Field(None, gt=0)
    progression_mode: ProgressionMode | None = None
    progression_percent: float | None = Field(None, ge=0, le=100)
