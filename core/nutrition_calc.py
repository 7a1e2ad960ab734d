"""
core/nutrition_calc.py
────────────────────────────────────────────────────────────────────────
Daily calorie recommendation:

1. BMR  (Mifflin–St Jeor)
2. Maintenance (activity multiplier, athlete training level)
3. Flat goal offset from the *primary* goal
4. Athlete safety floor (kcal per kg bodyweight)
5. Global clamp [1200, 4000] + round to the nearest 10 kcal

plus the safe ``[min, max]`` range the user may move the target within,
and the "snap to fresh recommendation" rule applied when inputs change.

Missing biometrics are a normal onboarding state: every public method
returns ``None`` rather than raising.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

Logger = logging.getLogger(__name__)

MIN_CALORIES = 1200
MAX_CALORIES = 4000


# ──────────────────────────────────────────────────────────────────────
#  Enums
# ──────────────────────────────────────────────────────────────────────
class Gender(str, Enum):
    male = "male"
    female = "female"


class Goal(str, Enum):
    lose_weight = "lose-weight"
    weight_gain = "weight-gain"
    muscle_gain = "muscle-gain"
    balanced = "balanced"
    leaner = "leaner"


class TrainingLevel(str, Enum):
    light = "light"
    casual = "casual"
    intense = "intense"


# ──────────────────────────────────────────────────────────────────────
#  Input dataclasses
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class UserProfile:
    age: int | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    gender: Gender | None = None

    @property
    def complete(self) -> bool:
        """True once every field is present and numeric."""
        if self.gender is None:
            return False
        return all(_is_number(v) for v in (self.age, self.height_cm, self.weight_kg))


@dataclass(frozen=True)
class AthleteProfile:
    is_athlete: bool = False
    training_level: TrainingLevel | None = None

    @property
    def intense(self) -> bool:
        return self.is_athlete and self.training_level is TrainingLevel.intense

    def floor_kcal_per_kg(self) -> int | None:
        """Minimum kcal per kg bodyweight, ``None`` for non-athletes."""
        if not self.is_athlete:
            return None
        return 35 if self.intense else 30


@dataclass(frozen=True)
class CalorieRange:
    min: int
    max: int


def _is_number(v: object) -> bool:
    if v is None or isinstance(v, bool):
        return False
    try:
        return not math.isnan(float(v))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return False


# ──────────────────────────────────────────────────────────────────────
#  Small numeric helpers (shared with the macro modules)
# ──────────────────────────────────────────────────────────────────────
def round_half_up(x: float) -> int:
    """Round .5 away from zero for positives (``round()`` would bank)."""
    return int(math.floor(x + 0.5))


def clamp_calories(value: float, bounds: CalorieRange) -> int:
    return int(min(max(value, bounds.min), bounds.max))


def primary_goal(goals: Iterable[Goal | str] | None) -> Goal:
    """First goal that is not ``balanced``; ``balanced`` otherwise."""
    for g in goals or ():
        goal = Goal(g)
        if goal is not Goal.balanced:
            return goal
    return Goal.balanced


# ──────────────────────────────────────────────────────────────────────
#  Calculator
# ──────────────────────────────────────────────────────────────────────
class NutritionalCalculator:
    """Source-of-truth for the recommended kcal and its safe range."""

    _NON_ATHLETE_MULTIPLIER = 1.35
    _ATHLETE_MULTIPLIER = {
        TrainingLevel.light: 1.55,
        TrainingLevel.casual: 1.70,
        TrainingLevel.intense: 1.90,
    }
    _GOAL_OFFSET = {
        Goal.lose_weight: -400,
        Goal.leaner: -200,
        Goal.muscle_gain: 300,
        Goal.weight_gain: 500,
        Goal.balanced: 0,
    }

    # --------------- BMR / maintenance ------------------------------
    def bmr(self, u: UserProfile) -> float | None:
        if not u.complete:
            return None
        base = 10 * u.weight_kg + 6.25 * u.height_cm - 5 * u.age  # type: ignore[operator]
        return base + (5 if u.gender is Gender.male else -161)

    def activity_multiplier(self, athlete: AthleteProfile) -> float:
        if not athlete.is_athlete:
            return self._NON_ATHLETE_MULTIPLIER
        # an athlete who has not picked a level yet trains "light"
        level = athlete.training_level or TrainingLevel.light
        return self._ATHLETE_MULTIPLIER[level]

    def maintenance(self, u: UserProfile, athlete: AthleteProfile) -> float | None:
        bmr = self.bmr(u)
        if bmr is None:
            return None
        return bmr * self.activity_multiplier(athlete)

    # --------------- public entrypoints ------------------------------
    def recommended_calories(
        self,
        u: UserProfile,
        goals: Iterable[Goal | str] | None = None,
        athlete: AthleteProfile | None = None,
    ) -> int | None:
        athlete = athlete or AthleteProfile()
        maintenance = self.maintenance(u, athlete)
        if maintenance is None:
            Logger.debug("profile incomplete – no calorie recommendation yet")
            return None

        goal = primary_goal(goals)
        target = maintenance + self._GOAL_OFFSET[goal]

        per_kg = athlete.floor_kcal_per_kg()
        if per_kg is not None:
            floor = u.weight_kg * per_kg  # type: ignore[operator]
            if target < floor:
                Logger.debug("athlete floor %.0f kcal overrides %.0f", floor, target)
                target = floor

        bounded = min(max(target, MIN_CALORIES), MAX_CALORIES)
        return round_half_up(bounded / 10) * 10

    def calorie_bounds(
        self,
        recommended: int | None,
        u: UserProfile,
        athlete: AthleteProfile | None = None,
    ) -> CalorieRange | None:
        if recommended is None:
            return None
        athlete = athlete or AthleteProfile()
        base_min = MIN_CALORIES
        per_kg = athlete.floor_kcal_per_kg()
        if per_kg is not None and _is_number(u.weight_kg):
            base_min = round_half_up(u.weight_kg * per_kg)  # type: ignore[operator]
        # heavy intense athletes would otherwise get min > max
        lo = min(max(base_min, MIN_CALORIES), MAX_CALORIES)
        return CalorieRange(min=lo, max=MAX_CALORIES)


def reconcile_calorie_target(
    current: int | None,
    recommended: int,
    previous_recommended: int | None,
    bounds: CalorieRange,
) -> int:
    """
    Keep *current* only while it is still honest: set, inside *bounds*,
    and the recommendation it was derived from has not moved.
    """
    fresh = clamp_calories(recommended, bounds)
    if current is None or current <= 0:
        return fresh
    if not bounds.min <= current <= bounds.max:
        Logger.debug("target %s outside [%s, %s] – snapping", current, bounds.min, bounds.max)
        return fresh
    if previous_recommended is not None and previous_recommended != recommended:
        Logger.debug("recommendation %s → %s – snapping", previous_recommended, recommended)
        return fresh
    return current
