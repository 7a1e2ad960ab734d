"""
core/targets_state.py
────────────────────────────────────────────────────────────────────────
Calorie target + macro split as one immutable value.

The host keeps a single ``TargetsState`` and replaces it with
``transition(state, action)`` on every user action:

    UpdateProfile  – biometrics / goals / athlete flag changed
    EditMacro      – +/- on protein, carbs or fat
    EditCalories   – +/- on the daily total
    SetCalories    – restore a saved target

Every transition leaves ``min <= value <= max`` and
``protein*4 + carbs*4 + fat*9 == value`` holding, and records which side
was the source of truth for it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Union

from config import settings
from core.macro_calc import (
    MacroKind,
    MacroSet,
    initial_macros,
    priority_macros,
)
from core.macro_redistribute import balance_to_target, edit_macro, rescale_to_calories
from core.models.profile import ProfileIn
from core.models.targets import (
    CalorieRangeOut,
    MacroCaloriesOut,
    MacrosOut,
    SourceOfTruth,
    TargetsOut,
)
from core.nutrition_calc import (
    AthleteProfile,
    CalorieRange,
    Goal,
    NutritionalCalculator,
    UserProfile,
    clamp_calories,
    primary_goal,
    reconcile_calorie_target,
)

_LOG = logging.getLogger(__name__)

_calc = NutritionalCalculator()


# ──────────────────────────────────────────────────────────────────────
#  State
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class CalorieTarget:
    value: int
    min: int
    max: int

    @property
    def bounds(self) -> CalorieRange:
        return CalorieRange(min=self.min, max=self.max)


@dataclass(frozen=True)
class TargetsState:
    profile: UserProfile = field(default_factory=UserProfile)
    goals: tuple[Goal, ...] = ()
    athlete: AthleteProfile = field(default_factory=AthleteProfile)
    recommended: int | None = None
    calories: CalorieTarget | None = None
    macros: MacroSet | None = None
    source_of_truth: SourceOfTruth | None = None

    @property
    def ready(self) -> bool:
        return self.calories is not None and self.macros is not None

    def to_output(self) -> TargetsOut | None:
        if not self.ready:
            return None
        kcal = self.macros.kcal_by_macro()  # type: ignore[union-attr]
        return TargetsOut(
            calorie_target=self.calories.value,  # type: ignore[union-attr]
            calorie_range=CalorieRangeOut(min=self.calories.min, max=self.calories.max),  # type: ignore[union-attr]
            macros=MacrosOut(
                protein_grams=self.macros.protein_g,  # type: ignore[union-attr]
                carb_grams=self.macros.carb_g,  # type: ignore[union-attr]
                fat_grams=self.macros.fat_g,  # type: ignore[union-attr]
            ),
            macro_calories=MacroCaloriesOut(
                protein_calories=kcal[MacroKind.protein],
                carb_calories=kcal[MacroKind.carbs],
                fat_calories=kcal[MacroKind.fat],
            ),
            source_of_truth=self.source_of_truth or "calories",
        )


# ──────────────────────────────────────────────────────────────────────
#  Actions
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class UpdateProfile:
    """``None`` fields keep the current value."""

    profile: UserProfile | None = None
    goals: tuple[Goal, ...] | None = None
    athlete: AthleteProfile | None = None


@dataclass(frozen=True)
class EditMacro:
    kind: MacroKind
    delta_g: int


@dataclass(frozen=True)
class EditCalories:
    delta: int


@dataclass(frozen=True)
class SetCalories:
    value: int


Action = Union[UpdateProfile, EditMacro, EditCalories, SetCalories]


def transition(state: TargetsState, action: Action) -> TargetsState:
    if isinstance(action, UpdateProfile):
        return _update_profile(state, action)
    if isinstance(action, EditMacro):
        return _edit_macro(state, action)
    if isinstance(action, EditCalories):
        return _set_calories(state, None if state.calories is None else state.calories.value + action.delta)
    if isinstance(action, SetCalories):
        return _set_calories(state, action.value)
    raise TypeError(f"unknown action: {action!r}")


# --------------- profile side ---------------------------------------
def _seed_macros(calories: int, state: TargetsState) -> MacroSet:
    if settings.macro_strategy == "priority" and state.profile.weight_kg is not None:
        seeded = priority_macros(
            calories,
            state.profile.weight_kg,
            state.athlete,
            primary_goal(state.goals),
        ).as_macro_set()
    else:
        seeded = initial_macros(calories)
    return balance_to_target(seeded, calories)


def _update_profile(state: TargetsState, action: UpdateProfile) -> TargetsState:
    state = replace(
        state,
        profile=action.profile if action.profile is not None else state.profile,
        goals=tuple(Goal(g) for g in action.goals) if action.goals is not None else state.goals,
        athlete=action.athlete if action.athlete is not None else state.athlete,
    )

    recommended = _calc.recommended_calories(state.profile, state.goals, state.athlete)
    bounds = _calc.calorie_bounds(recommended, state.profile, state.athlete)
    if recommended is None or bounds is None:
        return replace(state, recommended=None, calories=None, macros=None, source_of_truth=None)

    current = state.calories.value if state.calories is not None else None
    value = reconcile_calorie_target(current, recommended, state.recommended, bounds)
    calories = CalorieTarget(value=value, min=bounds.min, max=bounds.max)

    if value == current and state.macros is not None:
        # target survived, so the macros still describe it
        return replace(state, recommended=recommended, calories=calories)

    _LOG.debug("calorie target %s → %s; re-deriving macros", current, value)
    return replace(
        state,
        recommended=recommended,
        calories=calories,
        macros=_seed_macros(value, state),
        source_of_truth="calories",
    )


# --------------- macro side -----------------------------------------
def _edit_macro(state: TargetsState, action: EditMacro) -> TargetsState:
    kind = MacroKind(action.kind)
    if state.calories is None:
        _LOG.debug("macro edit ignored – no calorie target yet")
        return state

    current = state.macros if state.macros is not None else _seed_macros(state.calories.value, state)
    macros = edit_macro(current, state.calories.value, kind, action.delta_g)

    total = macros.calories
    value = clamp_calories(total, state.calories.bounds)
    if value != total:
        macros = balance_to_target(macros, value, locked=kind)

    return replace(
        state,
        calories=replace(state.calories, value=value),
        macros=macros,
        source_of_truth="macros",
    )


# --------------- calorie side ---------------------------------------
def _set_calories(state: TargetsState, value: int | None) -> TargetsState:
    if state.calories is None or value is None:
        _LOG.debug("calorie edit ignored – no calorie target yet")
        return state

    value = clamp_calories(value, state.calories.bounds)
    return replace(
        state,
        calories=replace(state.calories, value=value),
        macros=rescale_to_calories(state.macros, value),
        source_of_truth="calories",
    )


# ──────────────────────────────────────────────────────────────────────
#  Host-facing helpers
# ──────────────────────────────────────────────────────────────────────
def update_profile(
    state: TargetsState,
    profile: UserProfile | None = None,
    goals: Iterable[Goal | str] | None = None,
    athlete: AthleteProfile | None = None,
) -> TargetsState:
    return transition(
        state,
        UpdateProfile(
            profile=profile,
            goals=tuple(goals) if goals is not None else None,
            athlete=athlete,
        ),
    )


def increment_macro(state: TargetsState, kind: MacroKind | str, step: int | None = None) -> TargetsState:
    return transition(state, EditMacro(MacroKind(kind), step or settings.macro_step_g))


def decrement_macro(state: TargetsState, kind: MacroKind | str, step: int | None = None) -> TargetsState:
    return transition(state, EditMacro(MacroKind(kind), -(step or settings.macro_step_g)))


def can_decrement_macro(state: TargetsState, kind: MacroKind | str, step: int | None = None) -> bool:
    if state.macros is None:
        return False
    return state.macros.grams()[MacroKind(kind)] >= (step or settings.macro_step_g)


def increment_calories(state: TargetsState, step: int | None = None) -> TargetsState:
    return transition(state, EditCalories(step or settings.calorie_step))


def decrement_calories(state: TargetsState, step: int | None = None) -> TargetsState:
    return transition(state, EditCalories(-(step or settings.calorie_step)))


def set_calories(state: TargetsState, value: int) -> TargetsState:
    return transition(state, SetCalories(value))


def from_profile(profile_in: ProfileIn) -> TargetsState:
    """First state for a ``core.models.ProfileIn``."""
    return update_profile(
        TargetsState(),
        profile=profile_in.user_profile(),
        goals=profile_in.goals,
        athlete=profile_in.athlete_profile(),
    )
