"""Tests for the week-aligned budget calculator."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from vaultbudget.analytics.budget import (
    calculate_budget,
    calendar_weekday,
    days_elapsed_in_week,
    week_start,
)
from vaultbudget.analytics.engine import estimate_maintenance
from vaultbudget.analytics.series import DailySeries
from vaultbudget.config.engine import EngineConfig

SUNDAY = 1
MONDAY = 2

# Week of Monday 2024-01-01
MON = date(2024, 1, 1)
TUE = date(2024, 1, 2)
WED = date(2024, 1, 3)
THU = date(2024, 1, 4)
FRI = date(2024, 1, 5)


def logged(start: date, days: int, kcal: float) -> DailySeries:
    return DailySeries.from_mapping(
        {start + timedelta(days=n): kcal for n in range(days)}
    )


class TestWeekArithmetic:
    """Tests for weekday numbering and elapsed days."""

    def test_calendar_weekday_numbering(self):
        """1 = Sunday through 7 = Saturday."""
        assert calendar_weekday(date(2023, 12, 31)) == 1  # Sunday
        assert calendar_weekday(MON) == 2
        assert calendar_weekday(date(2024, 1, 6)) == 7  # Saturday

    def test_days_elapsed_monday_start(self):
        assert days_elapsed_in_week(MON, MONDAY) == 0
        assert days_elapsed_in_week(WED, MONDAY) == 2
        assert days_elapsed_in_week(FRI, MONDAY) == 4
        assert days_elapsed_in_week(date(2024, 1, 7), MONDAY) == 6

    def test_days_elapsed_sunday_start(self):
        assert days_elapsed_in_week(WED, SUNDAY) == 3
        assert days_elapsed_in_week(date(2023, 12, 31), SUNDAY) == 0

    def test_daylight_saving_week(self):
        """The US spring-forward Sunday does not change the count."""
        assert days_elapsed_in_week(date(2024, 3, 12), SUNDAY) == 2
        assert days_elapsed_in_week(date(2024, 11, 5), SUNDAY) == 2

    def test_week_start(self):
        assert week_start(FRI, MONDAY) == MON
        assert week_start(MON, MONDAY) == MON
        assert week_start(WED, SUNDAY) == date(2023, 12, 31)

    @pytest.mark.parametrize("weekday", [0, 8])
    def test_invalid_first_weekday(self, weekday):
        with pytest.raises(ValueError, match="first_weekday"):
            days_elapsed_in_week(WED, weekday)


class TestCalculateBudget:
    """Tests for calculate_budget function."""

    def test_friday_after_light_week(self, make_estimate):
        """1700 kcal Mon-Thu at 2200 leaves 2000 credit; 666/day clamps to 500."""
        budget = calculate_budget(
            make_estimate(2200.0, FRI),
            week_intake=logged(MON, 4, 1700.0),
            first_weekday=MONDAY,
        )
        assert budget.days_elapsed == 4
        assert budget.days_remaining_in_week == 3
        assert budget.logged_intake == pytest.approx(6800.0)
        assert budget.credit == pytest.approx(2000.0)
        assert budget.raw_delta == pytest.approx(2000.0 / 3)
        assert budget.delta_adjustment == 500.0
        assert budget.final_budget == pytest.approx(2700.0)
        assert budget.delta_clamped
        assert not budget.budget_clamped
        assert budget.active_flags() == ["delta_clamped"]

    def test_credit_resets_on_first_weekday(self, make_estimate):
        """Last week's overeating does not follow into Monday."""
        budget = calculate_budget(
            make_estimate(2200.0, date(2024, 1, 8)),
            week_intake=logged(MON, 7, 3500.0),
            first_weekday=MONDAY,
        )
        assert budget.days_elapsed == 0
        assert budget.days_remaining_in_week == 7
        assert budget.credit == 0.0
        assert budget.final_budget == 2200.0

    def test_wednesday_without_logs(self, make_estimate):
        """Unlogged days count as zero intake."""
        budget = calculate_budget(make_estimate(2200.0, WED), first_weekday=MONDAY)
        assert budget.days_elapsed == 2
        assert budget.days_remaining_in_week == 5
        assert budget.credit == pytest.approx(4400.0)
        assert budget.delta_adjustment == 500.0

    def test_overeating_creates_debt(self, make_estimate):
        budget = calculate_budget(
            make_estimate(2200.0, THU),
            week_intake=logged(MON, 3, 2600.0),
            first_weekday=MONDAY,
        )
        assert budget.credit == pytest.approx(-1200.0)
        assert budget.delta_adjustment == pytest.approx(-300.0)
        assert budget.final_budget == pytest.approx(1900.0)
        assert not budget.delta_clamped

    def test_today_and_earlier_weeks_ignored(self, make_estimate):
        """Only week start through yesterday counts toward the credit."""
        intake = logged(date(2023, 12, 25), 10, 2200.0)  # Dec 25 .. Jan 3
        intake = DailySeries.from_mapping({**intake.to_dict(), WED: 5000.0})
        budget = calculate_budget(
            make_estimate(2200.0, WED), week_intake=intake, first_weekday=MONDAY
        )
        assert budget.logged_intake == pytest.approx(4400.0)
        assert budget.credit == pytest.approx(0.0)

    def test_sunday_week_start(self, make_estimate):
        budget = calculate_budget(
            make_estimate(2000.0, WED),
            week_intake=logged(date(2023, 12, 31), 3, 2000.0),
            first_weekday=SUNDAY,
        )
        assert budget.days_elapsed == 3
        assert budget.week_start == date(2023, 12, 31)
        assert budget.credit == pytest.approx(0.0)
        assert budget.final_budget == pytest.approx(2000.0)

    def test_adjustment_shifts_base(self, make_estimate):
        budget = calculate_budget(
            make_estimate(2200.0, MON), adjustment=-500.0, first_weekday=MONDAY
        )
        assert budget.base_budget == 1700.0
        assert budget.final_budget == 1700.0

    def test_missing_adjustment_is_zero(self, make_estimate):
        budget = calculate_budget(make_estimate(2200.0, MON), first_weekday=MONDAY)
        assert budget.adjustment == 0.0
        assert budget.base_budget == 2200.0

    def test_clamped_to_minimum(self, make_estimate):
        budget = calculate_budget(make_estimate(800.0, MON), first_weekday=MONDAY)
        assert budget.unclamped_budget == 800.0
        assert budget.final_budget == 1000.0
        assert budget.budget_clamped

    def test_clamped_to_maximum(self, make_estimate):
        budget = calculate_budget(make_estimate(7000.0, MON), first_weekday=MONDAY)
        assert budget.final_budget == 6000.0
        assert budget.budget_clamped

    def test_accepts_plain_mapping(self, make_estimate):
        budget = calculate_budget(
            make_estimate(2200.0, TUE),
            week_intake={MON: 2000.0},
            first_weekday=MONDAY,
        )
        assert budget.credit == pytest.approx(200.0)

    def test_custom_bounds(self, make_estimate):
        config = EngineConfig(max_daily_credit_adjustment=200.0)
        budget = calculate_budget(
            make_estimate(2200.0, FRI),
            week_intake=logged(MON, 4, 1700.0),
            first_weekday=MONDAY,
            config=config,
        )
        assert budget.delta_adjustment == 200.0

    def test_not_gated_on_validity(self, reference_date):
        """An invalid estimate still yields a budget."""
        estimate = estimate_maintenance(None, None, None, reference_date)
        assert not estimate.valid
        budget = calculate_budget(estimate, first_weekday=MONDAY)
        assert budget.base_budget == 2200.0

    def test_remaining(self, make_estimate):
        budget = calculate_budget(make_estimate(2200.0, MON), first_weekday=MONDAY)
        assert budget.remaining(800.0) == pytest.approx(1400.0)
        assert budget.remaining(3000.0) == pytest.approx(-800.0)
