"""Pytest fixtures for vaultbudget tests."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

import pytest

from vaultbudget.analytics.models import ConfidenceScore, MaintenanceEstimate
from vaultbudget.analytics.series import DailySeries

# Fixed reference Wednesday. Monday 2024-01-01 starts its week.
REFERENCE_WEDNESDAY = date(2024, 1, 3)


class SeriesBuilder:
    """Builds synthetic daily series relative to a reference date."""

    def __init__(self, reference_date: date):
        self.reference_date = reference_date

    def days_ago(self, days: int) -> date:
        return self.reference_date - timedelta(days=days)

    def constant(self, value: float, days: int, start_ago: int = 0) -> DailySeries:
        """Daily ``value`` for ``days`` days, newest at ``start_ago`` days ago."""
        return DailySeries.from_mapping(
            {self.days_ago(start_ago + n): value for n in range(days)}
        )

    def linear(self, latest: float, slope_per_week: float, days: int) -> DailySeries:
        """Weight changing at ``slope_per_week``, newest sample today."""
        return DailySeries.from_mapping(
            {
                self.days_ago(n): latest - (slope_per_week / 7.0) * n
                for n in range(days)
            }
        )

    def sparse(self, value: float, total_days_back: int, stride: int) -> DailySeries:
        """``value`` on every ``stride``-th day going back ``total_days_back`` days."""
        return DailySeries.from_mapping(
            {self.days_ago(n): value for n in range(0, total_days_back, stride)}
        )

    def at(self, offsets: dict[int, float]) -> DailySeries:
        """Series from ``{days_ago: value}``."""
        return DailySeries.from_mapping(
            {self.days_ago(n): value for n, value in offsets.items()}
        )


@pytest.fixture
def reference_date() -> date:
    """The fixed reference Wednesday."""
    return REFERENCE_WEDNESDAY


@pytest.fixture
def series(reference_date: date) -> SeriesBuilder:
    """Series builder anchored at the reference date."""
    return SeriesBuilder(reference_date)


def _score(value: float) -> ConfidenceScore:
    return ConfidenceScore(value=value, count=28, span_days=27, min_count=7, window_days=28)


@pytest.fixture
def make_estimate():
    """Factory for a MaintenanceEstimate with a chosen maintenance value."""

    def factory(
        maintenance: float,
        reference_date: date = REFERENCE_WEDNESDAY,
        body_fat: Optional[float] = None,
    ) -> MaintenanceEstimate:
        return MaintenanceEstimate(
            maintenance=maintenance,
            confidence=1.0,
            intake_confidence=1.0,
            rho=7350.0,
            raw_weight_slope=0.0,
            weight_slope=0.0,
            smoothed_intake=maintenance,
            blended_intake=maintenance,
            blended_slope=0.0,
            raw_maintenance=maintenance,
            fallback_maintenance=2200.0,
            fallback_source="180d personal",
            reference_date=reference_date,
            weight_score=_score(1.0),
            intake_score=_score(1.0),
            body_fat_used=body_fat,
            latest_weight=70.0,
        )

    return factory
