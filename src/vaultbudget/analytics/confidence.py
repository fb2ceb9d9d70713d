"""Density and coverage confidence for a daily series."""

from __future__ import annotations

from datetime import date

from vaultbudget.analytics.models import ConfidenceScore
from vaultbudget.analytics.series import DailySeries


def score_confidence(
    series: DailySeries,
    reference_date: date,
    min_count: int,
    window_days: int,
    span_fraction: float = 0.5,
) -> ConfidenceScore:
    """
    Score how far a series can be trusted inside a window.

    confidence = min(1, n / min_count) × min(1, s / window_days)

    where n is the number of distinct days in the window and s the span in
    days between its earliest and latest sample. The same scorer serves weight
    (7 days) and intake (14 days).

    Args:
        series: Daily series
        reference_date: Last day of the window
        min_count: Days needed for full density credit
        window_days: Window length, also the span needed for full coverage
        span_fraction: Share of the window the data must span to be sufficient

    Returns:
        ConfidenceScore carrying the value and the counts behind it
    """
    window = series.window(reference_date, window_days)
    count = len(window)
    span = window.span_days

    density = min(1.0, count / min_count)
    coverage = min(1.0, span / window_days)

    return ConfidenceScore(
        value=density * coverage,
        count=count,
        span_days=span,
        min_count=min_count,
        window_days=window_days,
        span_fraction=span_fraction,
    )
