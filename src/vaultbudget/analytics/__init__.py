"""Maintenance and budget analytics engine.

This module turns sparse daily series of weight, intake and body-fat
percentage into a maintenance estimate and a weekly-credit calorie budget.

Key components:
- Gap-aware EWMA of intake (10% smoothing per elapsed day)
- Recency-weighted regression of weight with physiological slope clamps
- Forbes energy partition model for kcal per kg of weight change
- Density/coverage confidence and a staged historical fallback
- Week-aligned budget credit with bounded daily redistribution
"""

from __future__ import annotations

from vaultbudget.analytics.budget import calculate_budget
from vaultbudget.analytics.engine import analyze, estimate_maintenance
from vaultbudget.analytics.models import (
    BudgetEstimate,
    ConfidenceScore,
    FallbackResult,
    MaintenanceEstimate,
    RegressionResult,
)
from vaultbudget.analytics.series import DailySeries

__all__ = [
    "BudgetEstimate",
    "ConfidenceScore",
    "DailySeries",
    "FallbackResult",
    "MaintenanceEstimate",
    "RegressionResult",
    "analyze",
    "calculate_budget",
    "estimate_maintenance",
]
