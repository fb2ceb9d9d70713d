"""Gap-aware exponentially weighted moving average.

The classic Hacker's Diet recurrence:
    S_k = S_{k-1} + α × (c_k - S_{k-1})

With α = 0.1 this is a low-pass filter with roughly a 10-day time constant.
For irregular series the per-day factor is compounded over the gap:
    α_k = 1 - (1 - α)^Δ_k
where Δ_k is the number of days since the previous sample. A ten-day silence
therefore decays the old value far more than a one-day gap, and no values are
fabricated for the missing days.

Reference: https://www.fourmilab.ch/hackdiet/
"""

from __future__ import annotations

from typing import Optional

from vaultbudget.analytics.series import DailySeries
from vaultbudget.config.engine import DEFAULT_SMOOTHING


def time_scaled_alpha(base_alpha: float, days_elapsed: int) -> float:
    """
    Adjust smoothing factor for non-daily samples.

    Args:
        base_alpha: Base smoothing factor per day (typically 0.1)
        days_elapsed: Days since the previous sample; values below 1 count as 1

    Returns:
        Adjusted smoothing factor

    Example:
        >>> time_scaled_alpha(0.1, 1)  # Daily: unchanged
        0.1
        >>> time_scaled_alpha(0.1, 3)  # 1 - 0.9^3
        0.271
    """
    if days_elapsed <= 0:
        days_elapsed = 1
    return 1 - (1 - base_alpha) ** days_elapsed


def update_trend(
    prev_trend: float,
    value: float,
    smoothing: float = DEFAULT_SMOOTHING,
    days_elapsed: int = 1,
) -> float:
    """
    Advance the smoothed value by one sample.

    Args:
        prev_trend: Previous smoothed value (S_{k-1})
        value: New sample (c_k)
        smoothing: Base smoothing factor
        days_elapsed: Days since the previous sample

    Returns:
        New smoothed value (S_k)
    """
    adjusted_alpha = time_scaled_alpha(smoothing, days_elapsed)
    return adjusted_alpha * value + (1 - adjusted_alpha) * prev_trend


def trend_series(
    series: DailySeries, smoothing: float = DEFAULT_SMOOTHING
) -> list[float]:
    """
    Smoothed value at every sample day.

    The first sample seeds the trend. Gaps between consecutive days scale the
    smoothing factor as described in the module docstring.

    Args:
        series: Daily series, oldest first
        smoothing: Base smoothing factor

    Returns:
        List of trend values, same length as the series

    Example:
        >>> from datetime import date
        >>> s = DailySeries.from_mapping({date(2025, 1, 1): 80.0, date(2025, 1, 4): 79.0})
        >>> trend_series(s)  # 3-day gap: α = 0.271
        [80.0, 79.729]
    """
    if not series:
        return []

    trends = [series.values[0]]
    for i in range(1, len(series)):
        days_elapsed = (series.days[i] - series.days[i - 1]).days
        trends.append(update_trend(trends[-1], series.values[i], smoothing, days_elapsed))
    return trends


def smooth(series: DailySeries, smoothing: float = DEFAULT_SMOOTHING) -> Optional[float]:
    """Smoothed last value of the series, or None when it is empty."""
    trends = trend_series(series, smoothing)
    if not trends:
        return None
    return trends[-1]
