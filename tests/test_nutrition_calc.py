# tests/test_nutrition_calc.py
from __future__ import annotations

import math
import pytest

from core.nutrition_calc import (
    AthleteProfile,
    CalorieRange,
    Gender,
    Goal,
    NutritionalCalculator,
    TrainingLevel,
    UserProfile,
    primary_goal,
    reconcile_calorie_target,
    round_half_up,
)

calc = NutritionalCalculator()

MALE_70KG = UserProfile(age=30, height_cm=175, weight_kg=70, gender=Gender.male)
FEMALE_90KG = UserProfile(age=60, height_cm=160, weight_kg=90, gender=Gender.female)
INTENSE = AthleteProfile(is_athlete=True, training_level=TrainingLevel.intense)


# ── BMR / maintenance ───────────────────────────────────────────────
def test_bmr_mifflin_male():
    expected = 10 * 70 + 6.25 * 175 - 5 * 30 + 5   # 1773.75
    assert math.isclose(calc.bmr(MALE_70KG), expected, rel_tol=1e-9)


def test_bmr_mifflin_female():
    expected = 10 * 90 + 6.25 * 160 - 5 * 60 - 161
    assert math.isclose(calc.bmr(FEMALE_90KG), expected, rel_tol=1e-9)


@pytest.mark.parametrize(
    "athlete, mult",
    [
        (AthleteProfile(), 1.35),
        (AthleteProfile(is_athlete=True, training_level=TrainingLevel.light), 1.55),
        (AthleteProfile(is_athlete=True, training_level=TrainingLevel.casual), 1.70),
        (INTENSE, 1.90),
        (AthleteProfile(is_athlete=True), 1.55),
        (AthleteProfile(is_athlete=False, training_level=TrainingLevel.intense), 1.35),
    ],
)
def test_activity_multiplier(athlete, mult):
    assert calc.activity_multiplier(athlete) == mult


# ── recommended calories ────────────────────────────────────────────
def test_balanced_non_athlete():
    # 1773.75 * 1.35 = 2394.56 → 2390
    assert calc.recommended_calories(MALE_70KG, [Goal.balanced]) == 2390


def test_lose_weight_offset():
    assert calc.recommended_calories(MALE_70KG, ["lose-weight"]) == 1990


@pytest.mark.parametrize(
    "goal, expected",
    [("leaner", 2190), ("muscle-gain", 2690), ("weight-gain", 2890)],
)
def test_goal_offsets(goal, expected):
    assert calc.recommended_calories(MALE_70KG, [goal]) == expected


def test_primary_goal_skips_balanced():
    assert primary_goal(["balanced", "muscle-gain", "lose-weight"]) is Goal.muscle_gain
    assert primary_goal(["balanced"]) is Goal.balanced
    assert primary_goal([]) is Goal.balanced
    assert primary_goal(None) is Goal.balanced


def test_intense_athlete_floor():
    # 1439 * 1.9 - 400 ≈ 2334 < 90 * 35
    kcal = calc.recommended_calories(FEMALE_90KG, ["lose-weight"], INTENSE)
    assert kcal == 3150


def test_intense_athlete_80kg_never_below_2800():
    small = UserProfile(age=70, height_cm=150, weight_kg=80, gender=Gender.female)
    for goals in (["lose-weight"], ["leaner"], ["balanced"], []):
        assert calc.recommended_calories(small, goals, INTENSE) >= 80 * 35


def test_global_clamp():
    tiny = UserProfile(age=80, height_cm=140, weight_kg=38, gender=Gender.female)
    huge = UserProfile(age=20, height_cm=210, weight_kg=160, gender=Gender.male)
    assert calc.recommended_calories(tiny, ["lose-weight"]) == 1200
    assert calc.recommended_calories(huge, ["weight-gain"], INTENSE) == 4000


def test_rounds_half_up_to_ten():
    assert round_half_up(239.5) == 240
    assert round_half_up(238.5) == 239
    assert round_half_up(0.49) == 0


@pytest.mark.parametrize(
    "profile",
    [
        UserProfile(),
        UserProfile(age=30, height_cm=175, weight_kg=70),
        UserProfile(age=None, height_cm=175, weight_kg=70, gender=Gender.male),
        UserProfile(age=30, height_cm=float("nan"), weight_kg=70, gender=Gender.male),
        UserProfile(age=30, height_cm=175, weight_kg=float("nan"), gender=Gender.female),
    ],
)
def test_incomplete_profile_is_unavailable(profile):
    assert calc.bmr(profile) is None
    assert calc.recommended_calories(profile, ["balanced"]) is None
    assert calc.calorie_bounds(None, profile) is None


# ── bounds ──────────────────────────────────────────────────────────
def test_bounds_non_athlete():
    rec = calc.recommended_calories(MALE_70KG, [])
    assert calc.calorie_bounds(rec, MALE_70KG) == CalorieRange(min=1200, max=4000)


def test_bounds_athlete_floor():
    rec = calc.recommended_calories(FEMALE_90KG, [], INTENSE)
    assert calc.calorie_bounds(rec, FEMALE_90KG, INTENSE) == CalorieRange(min=3150, max=4000)

    casual = AthleteProfile(is_athlete=True, training_level=TrainingLevel.casual)
    rec = calc.recommended_calories(FEMALE_90KG, [], casual)
    assert calc.calorie_bounds(rec, FEMALE_90KG, casual).min == 2700


def test_bounds_never_invert_for_heavy_athletes():
    heavy = UserProfile(age=25, height_cm=200, weight_kg=150, gender=Gender.male)
    rec = calc.recommended_calories(heavy, [], INTENSE)
    b = calc.calorie_bounds(rec, heavy, INTENSE)
    assert 1200 <= b.min <= b.max <= 4000
    assert b.min <= rec <= b.max


# ── snap to fresh recommendation ────────────────────────────────────
BOUNDS = CalorieRange(min=1200, max=4000)


def test_reconcile_unset_target_takes_recommendation():
    assert reconcile_calorie_target(None, 2390, None, BOUNDS) == 2390
    assert reconcile_calorie_target(0, 2390, None, BOUNDS) == 2390


def test_reconcile_keeps_valid_target_when_recommendation_stable():
    assert reconcile_calorie_target(2500, 2390, 2390, BOUNDS) == 2500


def test_reconcile_snaps_when_recommendation_moves():
    assert reconcile_calorie_target(2500, 1990, 2390, BOUNDS) == 1990


def test_reconcile_snaps_when_out_of_bounds():
    assert reconcile_calorie_target(2000, 3150, 3150, CalorieRange(3150, 4000)) == 3150
