"""Value objects produced by the analytics engine.

All types are frozen dataclasses. Estimates are snapshots: recomputation
builds a new instance, and every flag is derived from stored fields on read.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, timedelta
from typing import Optional

BASELINE_SOURCE = "baseline"
WEIGHT_ANCHORED_SOURCE = "weight-anchored"


def stage_source(stage_days: int) -> str:
    """Fallback tag for a historical stage, e.g. ``"180d personal"``."""
    return f"{stage_days}d personal"


@dataclass(frozen=True)
class RegressionResult:
    """Recency-weighted least-squares fit of a daily series.

    Attributes:
        slope: Clamped slope (units/week)
        raw_slope: Slope before clamping (units/week)
        intercept: Fitted value at the reference date
        sample_count: Distinct days used in the fit
        span_days: Days between the first and last sample
        reference_date: Day the sample ages are measured from
        defined: False when fewer than 2 days were available
    """

    slope: float
    raw_slope: float
    intercept: float
    sample_count: int
    span_days: int
    reference_date: date
    defined: bool = True

    @property
    def slope_clamped(self) -> bool:
        return self.slope != self.raw_slope

    def predict(self, day: date) -> float:
        """Evaluate the fitted trend line at ``day``."""
        offset = (day - self.reference_date).days
        return self.intercept + self.raw_slope / 7.0 * offset


@dataclass(frozen=True)
class ConfidenceScore:
    """Density and coverage confidence of a series inside a window.

    value = min(1, count / min_count) × min(1, span_days / window_days)
    """

    value: float
    count: int
    span_days: int
    min_count: int
    window_days: int
    span_fraction: float = 0.5

    def __post_init__(self) -> None:
        if not 0.0 <= self.value <= 1.0:
            raise ValueError(f"confidence must be in [0, 1], got {self.value}")

    @property
    def sufficient(self) -> bool:
        """Enough days, spread over enough of the window, for a valid estimate."""
        return (
            self.count >= self.min_count
            and self.span_days >= self.window_days * self.span_fraction
        )


@dataclass(frozen=True)
class FallbackResult:
    """Maintenance used when recent data lacks confidence."""

    maintenance: float
    source: str
    weight_days: int = 0
    intake_days: int = 0


@dataclass(frozen=True)
class MaintenanceFlags:
    valid: bool
    slope_clamped: bool
    rho_estimated: bool
    maintenance_suspect: bool


@dataclass(frozen=True)
class BudgetFlags:
    budget_clamped: bool
    delta_clamped: bool


def _active(flags: object) -> list[str]:
    return [f.name for f in fields(flags) if getattr(flags, f.name)]  # type: ignore[arg-type]


@dataclass(frozen=True)
class MaintenanceEstimate:
    """Estimated daily maintenance and the intermediate values behind it.

    Attributes:
        maintenance: Final blended maintenance M (kcal/day)
        confidence: Weight confidence q_w
        intake_confidence: Intake confidence q_c
        rho: Energy density of weight change (kcal/kg)
        raw_weight_slope: Regression slope before clamping (kg/week)
        weight_slope: Clamped slope (kg/week)
        smoothed_intake: EWMA of intake, None without intake data
        blended_intake: Intake blended toward the fallback by q_c
        blended_slope: Slope faded toward zero by q_w
        raw_maintenance: Unblended maintenance (fallback when no intake)
        fallback_maintenance: Fallback F
        fallback_source: Stage tag, "weight-anchored" or "baseline"
        reference_date: Day the estimate was computed for
        weight_score: Weight confidence details
        intake_score: Intake confidence details
        body_fat_used: Body-fat fraction fed to the Forbes model
        latest_weight: Most recent weight on or before the reference date
        suspect_threshold: Maintenance below this is flagged suspect
    """

    maintenance: float
    confidence: float
    intake_confidence: float
    rho: float
    raw_weight_slope: float
    weight_slope: float
    smoothed_intake: Optional[float]
    blended_intake: float
    blended_slope: float
    raw_maintenance: float
    fallback_maintenance: float
    fallback_source: str
    reference_date: date
    weight_score: ConfidenceScore
    intake_score: ConfidenceScore
    body_fat_used: Optional[float] = None
    latest_weight: Optional[float] = None
    suspect_threshold: float = 1000.0

    @property
    def valid(self) -> bool:
        return self.weight_score.sufficient or self.intake_score.sufficient

    @property
    def slope_clamped(self) -> bool:
        return self.weight_slope != self.raw_weight_slope

    @property
    def rho_estimated(self) -> bool:
        return self.body_fat_used is None

    @property
    def maintenance_suspect(self) -> bool:
        return self.maintenance < self.suspect_threshold

    @property
    def flags(self) -> MaintenanceFlags:
        return MaintenanceFlags(
            valid=self.valid,
            slope_clamped=self.slope_clamped,
            rho_estimated=self.rho_estimated,
            maintenance_suspect=self.maintenance_suspect,
        )

    def active_flags(self) -> list[str]:
        """Names of the flags that are set."""
        return _active(self.flags)


@dataclass(frozen=True)
class BudgetEstimate:
    """Today's calorie budget with week-aligned credit.

    Attributes:
        reference_date: Today
        first_weekday: Week start, 1 = Sunday ... 7 = Saturday
        base_budget: B0 = maintenance + adjustment
        adjustment: User daily adjustment A
        days_elapsed: Days from week start through yesterday
        days_remaining_in_week: 7 - days_elapsed, today included
        logged_intake: Intake logged from week start through yesterday
        credit: B0 × days_elapsed - logged_intake
        raw_delta: credit / days_remaining_in_week
        delta_adjustment: raw_delta clamped to the daily bound
        unclamped_budget: B0 + delta_adjustment
        final_budget: unclamped_budget clamped to the budget bounds
    """

    reference_date: date
    first_weekday: int
    base_budget: float
    adjustment: float
    days_elapsed: int
    days_remaining_in_week: int
    logged_intake: float
    credit: float
    raw_delta: float
    delta_adjustment: float
    unclamped_budget: float
    final_budget: float

    @property
    def week_start(self) -> date:
        return self.reference_date - timedelta(days=self.days_elapsed)

    @property
    def budget_clamped(self) -> bool:
        return self.final_budget != self.unclamped_budget

    @property
    def delta_clamped(self) -> bool:
        return self.delta_adjustment != self.raw_delta

    @property
    def flags(self) -> BudgetFlags:
        return BudgetFlags(
            budget_clamped=self.budget_clamped,
            delta_clamped=self.delta_clamped,
        )

    def active_flags(self) -> list[str]:
        return _active(self.flags)

    def remaining(self, consumed_today: float) -> float:
        """Budget left for today after ``consumed_today`` kcal."""
        return self.final_budget - consumed_today
