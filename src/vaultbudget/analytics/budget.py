"""Daily calorie budget with week-aligned credit.

    B0     = M + A
    credit = B0 × days_elapsed - intake(week start .. yesterday)
    δ      = clamp(credit / days_left, ±500)
    B      = clamp(B0 + δ, 1000, 6000)

Credit accumulates from the configured first weekday and resets there. A
rolling seven-day window would never reset, so a consistent dieter's credit
would keep growing; the week-aligned form keeps it bounded to one week.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Mapping, Optional, Union

from vaultbudget.analytics.models import BudgetEstimate, MaintenanceEstimate
from vaultbudget.analytics.regression import clamp
from vaultbudget.analytics.series import DailySeries
from vaultbudget.config.engine import DEFAULT_CONFIG, EngineConfig

DAYS_PER_WEEK = 7


def calendar_weekday(day: date) -> int:
    """Weekday numbered 1 = Sunday ... 7 = Saturday."""
    return day.isoweekday() % DAYS_PER_WEEK + 1


def days_elapsed_in_week(reference_date: date, first_weekday: int) -> int:
    """
    Days from the week start through yesterday.

    Whole calendar dates are compared, so the count is unaffected by clock
    time or daylight-saving transitions. It is 0 on the first weekday itself.

    Args:
        reference_date: Today
        first_weekday: Week start, 1 = Sunday ... 7 = Saturday

    Returns:
        Integer in [0, 6]
    """
    if not 1 <= first_weekday <= DAYS_PER_WEEK:
        raise ValueError(f"first_weekday must be between 1 and 7, got {first_weekday}")
    return (calendar_weekday(reference_date) - first_weekday) % DAYS_PER_WEEK


def week_start(reference_date: date, first_weekday: int) -> date:
    """Most recent occurrence of ``first_weekday`` on or before ``reference_date``."""
    return reference_date - timedelta(days=days_elapsed_in_week(reference_date, first_weekday))


def calculate_budget(
    estimate: MaintenanceEstimate,
    adjustment: Optional[float] = None,
    week_intake: Union[DailySeries, Mapping[date, float], None] = None,
    first_weekday: int = 2,
    config: EngineConfig = DEFAULT_CONFIG,
) -> BudgetEstimate:
    """
    Compute today's budget from a maintenance estimate.

    Only intake logged between the week start and yesterday counts toward the
    credit; entries outside that range are ignored. Today is the estimate's
    reference date, so a stored estimate reproduces the same budget.

    Args:
        estimate: Maintenance estimate; its reference date is "today"
        adjustment: Daily goal adjustment in kcal (None means 0)
        week_intake: Daily logged intake covering at least this week
        first_weekday: Week start, 1 = Sunday ... 7 = Saturday
        config: Engine constants (clamp bounds)

    Returns:
        BudgetEstimate
    """
    today = estimate.reference_date
    adjustment = adjustment or 0.0
    base_budget = estimate.maintenance + adjustment

    elapsed = days_elapsed_in_week(today, first_weekday)
    days_left = max(1, DAYS_PER_WEEK - elapsed)

    if elapsed > 0:
        intake = DailySeries.coerce(week_intake)
        start = today - timedelta(days=elapsed)
        logged = intake.between(start, today - timedelta(days=1)).total()
    else:
        logged = 0.0

    credit = base_budget * elapsed - logged
    raw_delta = credit / days_left
    bound = config.max_daily_credit_adjustment
    delta = clamp(raw_delta, -bound, bound)

    unclamped = base_budget + delta
    final = clamp(unclamped, config.min_budget, config.max_budget)

    return BudgetEstimate(
        reference_date=today,
        first_weekday=first_weekday,
        base_budget=base_budget,
        adjustment=adjustment,
        days_elapsed=elapsed,
        days_remaining_in_week=days_left,
        logged_intake=logged,
        credit=credit,
        raw_delta=raw_delta,
        delta_adjustment=delta,
        unclamped_budget=unclamped,
        final_budget=final,
    )
