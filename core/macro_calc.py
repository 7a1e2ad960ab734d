"""
core/macro_calc.py
────────────────────────────────────────────────────────────────────────
Two ways of turning a calorie target into protein / carbs / fat grams:

* ``initial_macros()``  – fixed 30 / 40 / 30 % calorie split.
* ``priority_macros()`` – protein by bodyweight first, fat by goal
  percentage (with a per-kg floor) second, carbs take the remainder.
  When the target is too small for all three, fat is walked down in
  3-point steps for at most five passes before giving up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from core.nutrition_calc import (
    AthleteProfile,
    Goal,
    TrainingLevel,
    round_half_up,
)

_LOG = logging.getLogger(__name__)


class MacroKind(str, Enum):
    protein = "protein"
    carbs = "carbs"
    fat = "fat"


KCAL_PER_GRAM = {MacroKind.protein: 4, MacroKind.carbs: 4, MacroKind.fat: 9}
DEFAULT_SPLIT = {MacroKind.protein: 0.30, MacroKind.carbs: 0.40, MacroKind.fat: 0.30}


# ──────────────────────────────────────────────────────────────────────
#  MacroSet
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class MacroSet:
    protein_g: int = 0
    carb_g: int = 0
    fat_g: int = 0

    @classmethod
    def from_grams(cls, grams: dict[MacroKind, int]) -> "MacroSet":
        return cls(
            protein_g=grams.get(MacroKind.protein, 0),
            carb_g=grams.get(MacroKind.carbs, 0),
            fat_g=grams.get(MacroKind.fat, 0),
        )

    def grams(self) -> dict[MacroKind, int]:
        return {
            MacroKind.protein: self.protein_g,
            MacroKind.carbs: self.carb_g,
            MacroKind.fat: self.fat_g,
        }

    def kcal_by_macro(self) -> dict[MacroKind, int]:
        return {k: g * KCAL_PER_GRAM[k] for k, g in self.grams().items()}

    @property
    def calories(self) -> int:
        return sum(self.kcal_by_macro().values())

    @property
    def empty(self) -> bool:
        return self.calories == 0


def macro_shares(macros: MacroSet) -> dict[MacroKind, float] | None:
    """Each macro's fraction of the implied calories (``None`` if empty)."""
    total = macros.calories
    if total <= 0:
        return None
    return {k: kcal / total for k, kcal in macros.kcal_by_macro().items()}


# ──────────────────────────────────────────────────────────────────────
#  Default split
# ──────────────────────────────────────────────────────────────────────
def initial_macros(calories: float) -> MacroSet:
    if calories <= 0:
        return MacroSet()
    return MacroSet.from_grams(
        {k: round_half_up(calories * pct / KCAL_PER_GRAM[k]) for k, pct in DEFAULT_SPLIT.items()}
    )


# ──────────────────────────────────────────────────────────────────────
#  Priority-based calculator
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class PriorityMacros:
    protein_g: int
    carbs_g: int
    fat_g: int
    protein_calories: float
    carb_calories: float
    fat_calories: float

    def as_macro_set(self) -> MacroSet:
        return MacroSet(protein_g=self.protein_g, carb_g=self.carbs_g, fat_g=self.fat_g)


_PROTEIN_G_PER_KG = {
    TrainingLevel.light: 2.0,
    TrainingLevel.casual: 2.2,
    TrainingLevel.intense: 2.4,
}
_FAT_PCT = {
    Goal.lose_weight: 0.22,
    Goal.leaner: 0.24,
    Goal.balanced: 0.25,
    Goal.muscle_gain: 0.27,
    Goal.weight_gain: 0.30,
}
_MIN_FAT_G_PER_KG = 0.8
_ATHLETE_MIN_CARBS_G = 50
_FAT_STEP = 0.03
_MAX_FAT_REDUCTIONS = 5


def protein_multiplier(athlete: AthleteProfile, goal: Goal) -> float:
    mult = 1.8
    if athlete.is_athlete:
        mult = _PROTEIN_G_PER_KG[athlete.training_level or TrainingLevel.light]
    if goal in (Goal.muscle_gain, Goal.weight_gain):
        mult += 0.2
    return mult


def priority_macros(
    total_calories: float,
    weight_kg: float,
    athlete: AthleteProfile | None = None,
    goal: Goal = Goal.balanced,
) -> PriorityMacros:
    """
    Protein → fat → carbs, in that order of priority.

    Athletes get at least 50 g carbs even if the target cannot pay for
    them; in that case the result overshoots *total_calories*.
    """
    athlete = athlete or AthleteProfile()

    # (1) protein, bodyweight based
    protein_g = round_half_up(protein_multiplier(athlete, goal) * weight_kg)
    protein_kcal = protein_g * 4

    # (2) fat, goal percentage with a per-kg floor
    min_fat_g = round_half_up(_MIN_FAT_G_PER_KG * weight_kg)

    def _fat(pct: float) -> tuple[int, float]:
        fat_g = round_half_up(total_calories * pct / 9)
        if fat_g < min_fat_g:
            return min_fat_g, min_fat_g * 9
        return fat_g, total_calories * pct

    fat_pct = _FAT_PCT[goal]
    fat_g, fat_kcal = _fat(fat_pct)

    # (3) carbs, whatever is left
    min_carbs = _ATHLETE_MIN_CARBS_G if athlete.is_athlete else 0
    carb_kcal = total_calories - protein_kcal - fat_kcal
    carbs_g = round_half_up(carb_kcal / 4)

    # (4) degrade fat while carbs are short
    passes = 0
    while (carb_kcal < 0 or carbs_g < min_carbs) and passes < _MAX_FAT_REDUCTIONS:
        fat_pct -= _FAT_STEP
        fat_g, fat_kcal = _fat(fat_pct)
        carb_kcal = total_calories - protein_kcal - fat_kcal
        carbs_g = round_half_up(carb_kcal / 4)
        passes += 1
    if passes:
        _LOG.debug("fat lowered to %.0f%% after %d pass(es)", fat_pct * 100, passes)

    if carbs_g < 0:
        _LOG.warning("%.0f kcal cannot cover protein + minimum fat; carbs set to 0", total_calories)
        carbs_g, carb_kcal = 0, 0
    if carbs_g < min_carbs:
        _LOG.warning("athlete carb floor forces %d g carbs above the %.0f kcal target", min_carbs, total_calories)
        carbs_g, carb_kcal = min_carbs, min_carbs * 4

    return PriorityMacros(
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        protein_calories=protein_kcal,
        carb_calories=carb_kcal,
        fat_calories=fat_kcal,
    )
