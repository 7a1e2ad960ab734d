# tests/test_macro_calc.py
from __future__ import annotations

import pytest

from core.macro_calc import (
    MacroKind,
    MacroSet,
    initial_macros,
    macro_shares,
    priority_macros,
    protein_multiplier,
)
from core.nutrition_calc import AthleteProfile, Goal, TrainingLevel

LIGHT = AthleteProfile(is_athlete=True, training_level=TrainingLevel.light)
INTENSE = AthleteProfile(is_athlete=True, training_level=TrainingLevel.intense)


# ── default 30/40/30 split ──────────────────────────────────────────
def test_initial_macros_2400():
    m = initial_macros(2400)
    assert (m.protein_g, m.carb_g, m.fat_g) == (180, 240, 80)
    assert m.calories == 2400


def test_initial_macros_is_idempotent():
    assert initial_macros(2390) == initial_macros(2390)


def test_initial_macros_non_positive():
    assert initial_macros(0) == MacroSet()
    assert initial_macros(-50).empty


def test_initial_macros_close_to_target():
    for kcal in range(1200, 4001, 10):
        m = initial_macros(kcal)
        # independent rounding drifts a few kcal at most
        assert abs(m.calories - kcal) <= 9


def test_macro_shares():
    shares = macro_shares(MacroSet(180, 240, 80))
    assert shares[MacroKind.protein] == pytest.approx(0.30)
    assert shares[MacroKind.carbs] == pytest.approx(0.40)
    assert shares[MacroKind.fat] == pytest.approx(0.30)
    assert macro_shares(MacroSet()) is None


# ── priority calculator ─────────────────────────────────────────────
@pytest.mark.parametrize(
    "athlete, goal, mult",
    [
        (AthleteProfile(), Goal.balanced, 1.8),
        (AthleteProfile(), Goal.muscle_gain, 2.0),
        (LIGHT, Goal.balanced, 2.0),
        (AthleteProfile(is_athlete=True, training_level=TrainingLevel.casual), Goal.lose_weight, 2.2),
        (INTENSE, Goal.weight_gain, 2.6),
    ],
)
def test_protein_multiplier(athlete, goal, mult):
    assert protein_multiplier(athlete, goal) == pytest.approx(mult)


def test_priority_balanced_70kg():
    m = priority_macros(2400, 70)
    assert m.protein_g == 126                   # 1.8 * 70
    assert m.fat_g == 67                        # 25 % of 2400 / 9
    assert m.carbs_g == round((2400 - 504 - 600) / 4)
    assert m.carbs_g == 324


def test_priority_fat_floor():
    # 22 % of 1400 kcal = 34 g < 0.8 * 90 = 72 g
    m = priority_macros(1400, 90, goal=Goal.lose_weight)
    assert m.fat_g == 72
    assert m.fat_calories == 72 * 9


def test_priority_degrades_to_zero_carbs_when_infeasible():
    m = priority_macros(1200, 120, goal=Goal.muscle_gain)
    assert m.protein_g == 240                   # 2.0 * 120 = 960 kcal
    assert m.fat_g == 96                        # floor, 864 kcal
    assert m.carbs_g == 0
    assert min(m.protein_g, m.carbs_g, m.fat_g) >= 0


def test_priority_athlete_carb_floor():
    m = priority_macros(1200, 70, INTENSE, Goal.weight_gain)
    assert m.carbs_g == 50
    assert m.carb_calories == 200


def test_priority_conserves_calories_when_feasible():
    for kcal in range(1800, 4001, 50):
        m = priority_macros(kcal, 75, LIGHT, Goal.balanced).as_macro_set()
        assert abs(m.calories - kcal) <= 9
