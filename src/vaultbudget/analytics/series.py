"""Day-aggregated time series consumed by the analytics engine.

A ``DailySeries`` is an immutable, strictly increasing sequence of
``(day, value)`` pairs. It is hashable, so callers can memoize engine results
keyed by the input series and the reference date.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, Mapping, Optional, Union

Day = date
Sample = tuple[Union[date, datetime], float]

AGGREGATIONS = ("last", "sum", "mean")


@dataclass(frozen=True)
class DailySeries:
    """Ordered mapping from calendar day to one aggregated value.

    Attributes:
        days: Strictly increasing calendar days
        values: One finite value per day
    """

    days: tuple[Day, ...] = ()
    values: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if len(self.days) != len(self.values):
            raise ValueError(
                f"days and values differ in length ({len(self.days)} != {len(self.values)})"
            )
        for prev, curr in zip(self.days, self.days[1:]):
            if curr <= prev:
                raise ValueError(f"days must be strictly increasing: {prev} then {curr}")
        if any(math.isnan(v) for v in self.values):
            raise ValueError("values must not contain NaN")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[Day, float]) -> "DailySeries":
        """Build a series from a ``{day: value}`` mapping, dropping NaN values."""
        items = sorted(
            (_as_day(day), float(value))
            for day, value in data.items()
            if value is not None and not math.isnan(value)
        )
        return cls(
            days=tuple(day for day, _ in items),
            values=tuple(value for _, value in items),
        )

    @classmethod
    def from_samples(cls, samples: Iterable[Sample], how: str = "last") -> "DailySeries":
        """Bucket raw timestamped samples into calendar days.

        Args:
            samples: ``(timestamp, value)`` pairs in any order
            how: ``"last"`` keeps the latest sample of each day (weight,
                body fat), ``"sum"`` totals the day (intake), ``"mean"``
                averages it

        Returns:
            DailySeries with one value per day that had samples
        """
        if how not in AGGREGATIONS:
            raise ValueError(f"how must be one of {AGGREGATIONS}, got '{how}'")

        # Stable sort keeps insertion order for identical timestamps
        ordered = sorted(
            ((stamp, float(value)) for stamp, value in samples),
            key=lambda sample: _sort_key(sample[0]),
        )

        buckets: dict[Day, list[float]] = {}
        for stamp, value in ordered:
            if math.isnan(value):
                continue
            buckets.setdefault(_as_day(stamp), []).append(value)

        aggregated: dict[Day, float] = {}
        for day, bucket in buckets.items():
            if how == "last":
                aggregated[day] = bucket[-1]
            elif how == "sum":
                aggregated[day] = math.fsum(bucket)
            else:
                aggregated[day] = math.fsum(bucket) / len(bucket)

        return cls.from_mapping(aggregated)

    @classmethod
    def coerce(cls, data: Union["DailySeries", Mapping[Day, float], None]) -> "DailySeries":
        """Accept a series, a plain mapping or None."""
        if data is None:
            return cls()
        if isinstance(data, DailySeries):
            return data
        return cls.from_mapping(data)

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.days)

    def __iter__(self) -> Iterator[tuple[Day, float]]:
        return iter(zip(self.days, self.values))

    def __bool__(self) -> bool:
        return bool(self.days)

    def items(self) -> list[tuple[Day, float]]:
        """Return ``(day, value)`` pairs, oldest first."""
        return list(zip(self.days, self.values))

    def to_dict(self) -> dict[Day, float]:
        return dict(zip(self.days, self.values))

    # ------------------------------------------------------------------
    # Windows
    # ------------------------------------------------------------------

    def between(self, start: Day, end: Day) -> "DailySeries":
        """Days in the closed range ``[start, end]``."""
        pairs = [(d, v) for d, v in self if start <= d <= end]
        return DailySeries(
            days=tuple(d for d, _ in pairs), values=tuple(v for _, v in pairs)
        )

    def through(self, end: Day) -> "DailySeries":
        """Days on or before ``end``."""
        if not self.days or self.days[-1] <= end:
            return self
        return self.between(self.days[0], end)

    def window(self, end: Day, days: int) -> "DailySeries":
        """The ``days`` calendar days ending at ``end`` (inclusive)."""
        return self.between(end - timedelta(days=days - 1), end)

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------

    def latest(self) -> Optional[tuple[Day, float]]:
        """Most recent ``(day, value)`` or None for an empty series."""
        if not self.days:
            return None
        return self.days[-1], self.values[-1]

    def latest_value(self) -> Optional[float]:
        latest = self.latest()
        return None if latest is None else latest[1]

    @property
    def span_days(self) -> int:
        """Days between the first and last sample (0 for fewer than 2)."""
        if len(self.days) < 2:
            return 0
        return (self.days[-1] - self.days[0]).days

    def total(self) -> float:
        return math.fsum(self.values)


def _as_day(stamp: Union[date, datetime]) -> Day:
    if isinstance(stamp, datetime):
        return stamp.date()
    return stamp


def _sort_key(stamp: Union[date, datetime]) -> datetime:
    if isinstance(stamp, datetime):
        return stamp.replace(tzinfo=None) if stamp.tzinfo else stamp
    return datetime(stamp.year, stamp.month, stamp.day)
