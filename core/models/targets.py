from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

SourceOfTruth = Literal["macros", "calories"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CalorieRangeOut(_CamelModel):
    min: int
    max: int


class MacrosOut(_CamelModel):
    protein_grams: int
    carb_grams: int
    fat_grams: int


class MacroCaloriesOut(_CamelModel):
    protein_calories: int
    carb_calories: int
    fat_calories: int


class TargetsOut(_CamelModel):
    """What the preferences API and the meal-prompt builder receive."""

    calorie_target: int
    calorie_range: CalorieRangeOut
    macros: MacrosOut
    macro_calories: MacroCaloriesOut
    source_of_truth: SourceOfTruth
