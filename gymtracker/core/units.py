"""Weight unit helpers. Everything is stored and computed in kg; convert only for display."""

from gymtracker.core.constants import KG_TO_LB
from gymtracker.core.enums import WeightUnit


def to_display(value_kg: float, unit: WeightUnit) -> float:
    return value_kg if unit == WeightUnit.KG else value_kg * KG_TO_LB


def to_kg(value: float, unit: WeightUnit) -> float:
    return value if unit == WeightUnit.KG else value / KG_TO_LB
