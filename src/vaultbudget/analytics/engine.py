"""Entry points composing the analytics pipeline.

Every call is parameterized by an explicit reference date and config and
reads no clock or global state, so identical inputs give identical outputs
and results may be memoized by (series, reference date, config).
"""

from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Union

from vaultbudget.analytics.budget import calculate_budget
from vaultbudget.analytics.fallback import resolve_fallback
from vaultbudget.analytics.maintenance import compute_estimate
from vaultbudget.analytics.models import BudgetEstimate, MaintenanceEstimate
from vaultbudget.analytics.series import DailySeries
from vaultbudget.config.engine import DEFAULT_CONFIG, EngineConfig

SeriesLike = Union[DailySeries, Mapping[date, float], None]


def estimate_maintenance(
    weight: SeriesLike,
    intake: SeriesLike,
    body_fat: SeriesLike,
    reference_date: date,
    config: EngineConfig = DEFAULT_CONFIG,
) -> MaintenanceEstimate:
    """
    Estimate daily maintenance calories as of ``reference_date``.

    Resolves the historical fallback first, then runs the primary estimator
    over ``config.window_days`` blending toward it.

    Args:
        weight: Daily weight (kg)
        intake: Daily intake (kcal)
        body_fat: Daily body-fat fraction (0-1)
        reference_date: Last day of every window
        config: Engine constants

    Returns:
        MaintenanceEstimate, flagged rather than raising on thin data
    """
    weight_series = DailySeries.coerce(weight)
    intake_series = DailySeries.coerce(intake)
    body_fat_series = DailySeries.coerce(body_fat)

    fallback = resolve_fallback(
        weight_series, intake_series, body_fat_series, reference_date, config
    )
    return compute_estimate(
        weight_series,
        intake_series,
        body_fat_series,
        reference_date,
        fallback=fallback,
        config=config,
    )


def analyze(
    weight: SeriesLike,
    intake: SeriesLike,
    body_fat: SeriesLike,
    reference_date: date,
    week_intake: SeriesLike = None,
    adjustment: Optional[float] = None,
    first_weekday: int = 2,
    config: EngineConfig = DEFAULT_CONFIG,
) -> tuple[MaintenanceEstimate, BudgetEstimate]:
    """
    Estimate maintenance and today's budget in one call.

    Args:
        weight: Daily weight (kg)
        intake: Daily intake (kcal) for the maintenance estimate
        body_fat: Daily body-fat fraction (0-1)
        reference_date: Today
        week_intake: Logged intake for the credit; defaults to ``intake``
        adjustment: Daily goal adjustment (kcal)
        first_weekday: Week start, 1 = Sunday ... 7 = Saturday
        config: Engine constants

    Returns:
        Tuple of (MaintenanceEstimate, BudgetEstimate)
    """
    estimate = estimate_maintenance(weight, intake, body_fat, reference_date, config)
    budget = calculate_budget(
        estimate,
        adjustment=adjustment,
        week_intake=intake if week_intake is None else week_intake,
        first_weekday=first_weekday,
        config=config,
    )
    return estimate, budget
