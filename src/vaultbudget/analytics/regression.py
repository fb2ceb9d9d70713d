"""Recency-weighted linear regression of a daily series.

Each sample is weighted by ω_i = λ^{d_i}, where d_i is its age in days at the
reference date, so recent weigh-ins dominate the slope while older ones still
anchor it. The weighted least-squares slope is the ratio of the weighted
covariance of (t, y) to the weighted variance of t, converted to units/week
and clamped to physiological bounds. Both raw and clamped slopes are kept so
callers can see when clamping happened.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

import numpy as np

from vaultbudget.analytics.models import RegressionResult
from vaultbudget.analytics.series import DailySeries
from vaultbudget.config.engine import DEFAULT_CONFIG, EngineConfig


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` to the closed interval ``[lower, upper]``."""
    return min(max(value, lower), upper)


def weighted_fit(
    offsets: np.ndarray, values: np.ndarray, weights: np.ndarray
) -> tuple[float, float]:
    """
    Weighted least-squares line through ``(offsets, values)``.

    Args:
        offsets: Sample positions (days)
        values: Sample values
        weights: Non-negative sample weights

    Returns:
        Tuple of (slope per day, value at offset 0). The slope is 0.0 and the
        intercept the weighted mean when the fit is degenerate.
    """
    total = float(weights.sum())
    if total <= 0:
        return 0.0, float(values.mean()) if len(values) else 0.0

    mean_x = float((weights * offsets).sum()) / total
    mean_y = float((weights * values).sum()) / total
    dx = offsets - mean_x

    numerator = float((weights * dx * (values - mean_y)).sum())
    denominator = float((weights * dx * dx).sum())
    slope = numerator / denominator if denominator != 0 else 0.0
    return slope, mean_y - slope * mean_x


def estimate_trend(
    series: DailySeries,
    reference_date: date,
    window_days: Optional[int] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> RegressionResult:
    """
    Fit the weekly trend of ``series`` over the window ending at ``reference_date``.

    Args:
        series: Daily series (e.g. weight in kg)
        reference_date: Last day of the window; sample ages count from here
        window_days: Window length, defaults to ``config.window_days``
        config: Engine constants (decay and clamp bounds)

    Returns:
        RegressionResult; undefined with zero slope for fewer than 2 days
    """
    if window_days is None:
        window_days = config.window_days
    window = series.window(reference_date, window_days)

    if len(window) < 2:
        return RegressionResult(
            slope=0.0,
            raw_slope=0.0,
            intercept=window.values[0] if window else 0.0,
            sample_count=len(window),
            span_days=0,
            reference_date=reference_date,
            defined=False,
        )

    ages = np.array([(reference_date - d).days for d in window.days], dtype=float)
    values = np.array(window.values, dtype=float)
    weights = np.power(config.regression_decay, ages)

    # Time runs forward with the reference date at offset 0
    beta, intercept = weighted_fit(-ages, values, weights)

    raw_slope = beta * 7.0
    return RegressionResult(
        slope=clamp(raw_slope, config.min_slope, config.max_slope),
        raw_slope=raw_slope,
        intercept=intercept,
        sample_count=len(window),
        span_days=window.span_days,
        reference_date=reference_date,
        defined=True,
    )
