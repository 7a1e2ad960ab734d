"""
core/macro_redistribute.py
────────────────────────────────────────────────────────────────────────
Keeps ``protein*4 + carbs*4 + fat*9`` equal to the calorie target while
the user pokes at the +/- controls.

Two deliberately different directions:

* ``edit_macro()``          – one macro moves, the other two share what
                              is left of the budget in their current
                              calorie ratio. Macros are the source of
                              truth; the caller derives the new total.
* ``rescale_to_calories()`` – the total moves, every macro keeps its
                              calorie share. The total is the source of
                              truth; grams follow.

``balance_to_target()`` removes the few kcal of drift that per-macro
rounding leaves behind.
"""

from __future__ import annotations

import logging

from core.macro_calc import (
    KCAL_PER_GRAM,
    MacroKind,
    MacroSet,
    initial_macros,
    macro_shares,
)
from core.nutrition_calc import round_half_up

_LOG = logging.getLogger(__name__)

# grams moved on a locked macro count this many times over
_LOCK_PENALTY = 10


# ─────────────────────────────── edit one ─────────────────────────── #
def edit_macro(
    macros: MacroSet,
    budget: float,
    kind: MacroKind | str,
    delta_g: int,
) -> MacroSet:
    """Move *kind* by *delta_g* grams and refit the other two into *budget*."""
    kind = MacroKind(kind)
    grams = macros.grams()

    new_g = max(0, grams[kind] + delta_g)
    edited_kcal = new_g * KCAL_PER_GRAM[kind]

    if edited_kcal > budget:
        capped = max(0, int(budget // KCAL_PER_GRAM[kind]))
        _LOG.debug("%s capped at %d g (budget %.0f kcal)", kind.value, capped, budget)
        return MacroSet.from_grams({kind: capped})

    others = [k for k in MacroKind if k is not kind]
    other_kcal = {k: grams[k] * KCAL_PER_GRAM[k] for k in others}
    other_total = sum(other_kcal.values())
    if other_total == 0:
        shares = {k: 0.5 for k in others}
    else:
        shares = {k: v / other_total for k, v in other_kcal.items()}

    remaining = budget - edited_kcal
    out = {kind: new_g}
    for k in others:
        out[k] = round_half_up(remaining * shares[k] / KCAL_PER_GRAM[k])
    return MacroSet.from_grams(out)


# ─────────────────────────────── rescale ──────────────────────────── #
def rescale_to_calories(macros: MacroSet | None, calories: int) -> MacroSet:
    """Same calorie shares, new total; default split when nothing is set."""
    shares = macro_shares(macros) if macros is not None else None
    if shares is None:
        return balance_to_target(initial_macros(calories), calories)

    rescaled = MacroSet.from_grams(
        {k: round_half_up(calories * s / KCAL_PER_GRAM[k]) for k, s in shares.items()}
    )
    return balance_to_target(rescaled, calories)


# ─────────────────────────────── balance ──────────────────────────── #
def balance_to_target(
    macros: MacroSet,
    calories: int,
    locked: MacroKind | None = None,
) -> MacroSet:
    """
    Nudge fat and one 4-kcal macro by a few grams so the implied total
    hits *calories* exactly.

    9 ≡ 1 (mod 4), so a fat change of k grams leaves a remainder that
    grams of carbs (or protein) can absorb whenever k ≡ residual (mod 4);
    k ∈ [-7, 7] holds two candidates per residue, one on each side of
    zero, so a fix that only adds carbs exists even when carbs and
    protein are both at 0 g. The cheapest non-negative combination wins,
    carbs before protein on a tie. Grams moved on the *locked* macro are
    penalised, not forbidden.
    """
    residual = calories - macros.calories
    if residual == 0:
        return macros

    grams = macros.grams()
    fat = MacroKind.fat

    def _weight(kind: MacroKind) -> int:
        return _LOCK_PENALTY if kind is locked else 1

    best: tuple[int, int, MacroKind, int, int] | None = None
    for rank, four in enumerate((MacroKind.carbs, MacroKind.protein)):
        for fat_delta in range(-7, 8):
            rest = residual - 9 * fat_delta
            if rest % 4:
                continue
            four_delta = rest // 4
            if grams[fat] + fat_delta < 0 or grams[four] + four_delta < 0:
                continue
            cost = abs(four_delta) * _weight(four) + abs(fat_delta) * _weight(fat)
            if best is None or (cost, rank) < best[:2]:
                best = (cost, rank, four, four_delta, fat_delta)

    if best is None and residual % 9 == 0 and grams[fat] + residual // 9 >= 0:
        # fat alone can carry a whole-gram residual
        grams[fat] += residual // 9
        return MacroSet.from_grams(grams)

    if best is None:
        _LOG.warning("cannot balance %d kcal onto %s; leaving %+d kcal", calories, macros, residual)
        return macros

    _, _, four, four_delta, fat_delta = best
    grams[four] += four_delta
    grams[fat] += fat_delta
    return MacroSet.from_grams(grams)
