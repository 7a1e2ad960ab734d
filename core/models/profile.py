from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from core.nutrition_calc import AthleteProfile, Gender, Goal, TrainingLevel, UserProfile


class ProfileIn(BaseModel):
    """Onboarding answers as the host sends them (camelCase or snake_case)."""

    age: int | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    gender: Gender | None = Field(None, description="male or female, case-insensitive")
    goals: list[Goal] = []
    is_athlete: bool = False
    training_level: TrainingLevel | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("age", "height_cm", "weight_kg", mode="before")
    @classmethod
    def _nan_is_missing(cls, v):
        if isinstance(v, float) and math.isnan(v):
            return None
        return v

    @field_validator("gender", "training_level", "goals", mode="before")
    @classmethod
    def _lower(cls, v):
        if isinstance(v, list):
            return [g.lower() if isinstance(g, str) else g for g in v]
        return v.lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _level_needs_athlete(self) -> "ProfileIn":
        if not self.is_athlete:
            self.training_level = None
        return self

    # -------------------------------- engine inputs ----------------
    def user_profile(self) -> UserProfile:
        return UserProfile(
            age=self.age,
            height_cm=self.height_cm,
            weight_kg=self.weight_kg,
            gender=self.gender,
        )

    def athlete_profile(self) -> AthleteProfile:
        return AthleteProfile(is_athlete=self.is_athlete, training_level=self.training_level)
