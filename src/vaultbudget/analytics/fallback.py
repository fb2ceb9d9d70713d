"""Staged historical fallback for the maintenance estimate.

When the recent window is thin, the primary estimate should blend toward the
user's own history rather than a population constant. The resolver walks a
fixed, ascending list of lookback windows (180, 365, 730 days by default) and
takes the first one holding enough weight and intake days. Failing that it
anchors on body weight, and finally on the population baseline.

Each stage reuses the primary estimator with the baseline as its own
fallback, so the walk is bounded by the stage count.
"""

from __future__ import annotations

import logging
from datetime import date

from vaultbudget.analytics.maintenance import compute_estimate
from vaultbudget.analytics.models import (
    BASELINE_SOURCE,
    WEIGHT_ANCHORED_SOURCE,
    FallbackResult,
    stage_source,
)
from vaultbudget.analytics.series import DailySeries
from vaultbudget.config.engine import DEFAULT_CONFIG, EngineConfig

logger = logging.getLogger(__name__)


def baseline_fallback(config: EngineConfig = DEFAULT_CONFIG) -> FallbackResult:
    """The population baseline maintenance."""
    return FallbackResult(maintenance=config.baseline_maintenance, source=BASELINE_SOURCE)


def resolve_fallback(
    weight: DailySeries,
    intake: DailySeries,
    body_fat: DailySeries,
    reference_date: date,
    config: EngineConfig = DEFAULT_CONFIG,
) -> FallbackResult:
    """
    Find the maintenance fallback for ``reference_date``.

    First match wins:

    1. The first historical stage with at least
       ``historical_min_weight_days`` weight days and
       ``historical_min_intake_days`` intake days, estimated over that stage.
    2. ``weight_anchor_multiplier`` × the latest weight, if any weight exists.
    3. ``baseline_maintenance``.

    Args:
        weight: Daily weight (kg)
        intake: Daily intake (kcal)
        body_fat: Daily body-fat fraction (0-1)
        reference_date: Last day of every stage window
        config: Engine constants

    Returns:
        FallbackResult tagged with its source
    """
    for stage in config.historical_stages:
        weight_days = len(weight.window(reference_date, stage))
        intake_days = len(intake.window(reference_date, stage))

        if (
            weight_days < config.historical_min_weight_days
            or intake_days < config.historical_min_intake_days
        ):
            logger.debug(
                "Historical stage %dd: %d weight, %d intake days (insufficient)",
                stage,
                weight_days,
                intake_days,
            )
            continue

        estimate = compute_estimate(
            weight,
            intake,
            body_fat,
            reference_date,
            fallback=baseline_fallback(config),
            config=config,
            window_days=stage,
            min_intake_days=config.historical_min_intake_days,
        )
        logger.info(
            "Historical maintenance from %dd window: %.0f kcal/day "
            "(conf: %.2f, %dw %dc days)",
            stage,
            estimate.maintenance,
            estimate.confidence,
            weight_days,
            intake_days,
        )
        return FallbackResult(
            maintenance=estimate.maintenance,
            source=stage_source(stage),
            weight_days=weight_days,
            intake_days=intake_days,
        )

    latest_weight = weight.through(reference_date).latest_value()
    if latest_weight is not None:
        anchored = config.weight_anchor_multiplier * latest_weight
        logger.info(
            "No sufficient historical data, anchoring on weight: %.0f kcal/day", anchored
        )
        return FallbackResult(
            maintenance=anchored,
            source=WEIGHT_ANCHORED_SOURCE,
            weight_days=len(weight.through(reference_date)),
            intake_days=len(intake.through(reference_date)),
        )

    logger.info(
        "No sufficient historical data found, using baseline: %.0f kcal/day",
        config.baseline_maintenance,
    )
    return baseline_fallback(config)
