"""Macro-nutrient budgets derived from the calorie budget.

Grams = base budget × percent / 100 / kcal-per-gram. Macros follow the base
budget, not the credit-adjusted one: weekly banking applies to calories only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

KCAL_PER_GRAM = {"protein": 4.0, "fat": 9.0, "carbs": 4.0}


@dataclass(frozen=True)
class MacroGrams:
    """Grams per macro; None where no target is configured."""

    protein: Optional[float] = None
    fat: Optional[float] = None
    carbs: Optional[float] = None


def macro_budgets(
    base_budget: float,
    protein_pct: Optional[float] = None,
    fat_pct: Optional[float] = None,
    carbs_pct: Optional[float] = None,
) -> MacroGrams:
    """
    Split a calorie budget into gram targets.

    Args:
        base_budget: Daily calorie budget (kcal)
        protein_pct: Share of calories from protein (0-100)
        fat_pct: Share of calories from fat (0-100)
        carbs_pct: Share of calories from carbohydrates (0-100)

    Returns:
        MacroGrams with a target for every configured percentage
    """

    def grams(pct: Optional[float], macro: str) -> Optional[float]:
        if pct is None:
            return None
        return base_budget * pct / 100 / KCAL_PER_GRAM[macro]

    return MacroGrams(
        protein=grams(protein_pct, "protein"),
        fat=grams(fat_pct, "fat"),
        carbs=grams(carbs_pct, "carbs"),
    )


def remaining_macros(budgets: MacroGrams, consumed: MacroGrams) -> MacroGrams:
    """Grams left today; unlogged intake counts as zero."""

    def left(budget: Optional[float], eaten: Optional[float]) -> Optional[float]:
        if budget is None:
            return None
        return budget - (eaten or 0.0)

    return MacroGrams(
        protein=left(budgets.protein, consumed.protein),
        fat=left(budgets.fat, consumed.fat),
        carbs=left(budgets.carbs, consumed.carbs),
    )
