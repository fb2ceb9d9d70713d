"""Maintenance estimation from intake, weight trend and body composition.

    M = Ĉ_b - ẇ_b × ρ / 7

Each component fades toward its own neutral value as its data thins out:

- Intake: Ĉ_b = Ĉ × q_c + F × (1 - q_c), blending toward the fallback F
- Slope:  ẇ_b = ẇ × q_w, fading toward zero ("assume stable weight")

The slope never blends toward the fallback. A user with plenty of intake data
but a single weigh-in is estimated from intake alone.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from vaultbudget.analytics.confidence import score_confidence
from vaultbudget.analytics.ema import smooth
from vaultbudget.analytics.energy import energy_density
from vaultbudget.analytics.models import FallbackResult, MaintenanceEstimate
from vaultbudget.analytics.regression import estimate_trend
from vaultbudget.analytics.series import DailySeries
from vaultbudget.config.engine import DEFAULT_CONFIG, EngineConfig


def latest_body_fat(
    body_fat: DailySeries, reference_date: date, window_days: int
) -> Optional[float]:
    """Latest body-fat fraction in the window, else the latest before it."""
    in_window = body_fat.window(reference_date, window_days).latest_value()
    if in_window is not None:
        return in_window
    return body_fat.through(reference_date).latest_value()


def compute_estimate(
    weight: DailySeries,
    intake: DailySeries,
    body_fat: DailySeries,
    reference_date: date,
    fallback: FallbackResult,
    config: EngineConfig = DEFAULT_CONFIG,
    window_days: Optional[int] = None,
    min_intake_days: Optional[int] = None,
) -> MaintenanceEstimate:
    """
    Blend smoothed intake and weight trend into a maintenance estimate.

    This is the primary estimator for one window with a fixed fallback. It
    never resolves a fallback itself, so the historical stages can reuse it
    at wider windows without recursion.

    Args:
        weight: Daily weight (kg)
        intake: Daily intake (kcal)
        body_fat: Daily body-fat fraction (0-1)
        reference_date: Last day of the window
        fallback: Maintenance to blend toward when intake data is thin
        config: Engine constants
        window_days: Window length, defaults to ``config.window_days``
        min_intake_days: Intake days for full confidence, defaults to
            ``config.min_intake_days``

    Returns:
        MaintenanceEstimate for ``reference_date``
    """
    if window_days is None:
        window_days = config.window_days
    if min_intake_days is None:
        min_intake_days = config.min_intake_days

    smoothed = smooth(intake.window(reference_date, window_days), config.smoothing_alpha)
    trend = estimate_trend(weight, reference_date, window_days, config)

    latest_weight = weight.through(reference_date).latest_value()
    body_fat_value = latest_body_fat(body_fat, reference_date, window_days)
    rho, rho_estimated = energy_density(latest_weight, body_fat_value, config)

    weight_score = score_confidence(
        weight,
        reference_date,
        config.min_weight_days,
        window_days,
        config.validity_span_fraction,
    )
    intake_score = score_confidence(
        intake,
        reference_date,
        min_intake_days,
        window_days,
        config.validity_span_fraction,
    )

    fallback_value = fallback.maintenance
    q_c = intake_score.value
    q_w = weight_score.value

    if smoothed is None:
        blended_intake = fallback_value
        raw_maintenance = fallback_value
    else:
        blended_intake = smoothed * q_c + fallback_value * (1 - q_c)
        raw_maintenance = smoothed - trend.slope * rho / 7.0

    blended_slope = trend.slope * q_w
    maintenance = blended_intake - blended_slope * rho / 7.0

    return MaintenanceEstimate(
        maintenance=maintenance,
        confidence=q_w,
        intake_confidence=q_c,
        rho=rho,
        raw_weight_slope=trend.raw_slope,
        weight_slope=trend.slope,
        smoothed_intake=smoothed,
        blended_intake=blended_intake,
        blended_slope=blended_slope,
        raw_maintenance=raw_maintenance,
        fallback_maintenance=fallback_value,
        fallback_source=fallback.source,
        reference_date=reference_date,
        weight_score=weight_score,
        intake_score=intake_score,
        body_fat_used=None if rho_estimated else body_fat_value,
        latest_weight=latest_weight,
        suspect_threshold=config.suspect_maintenance_below,
    )
