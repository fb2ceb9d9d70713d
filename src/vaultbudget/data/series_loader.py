"""Load raw samples from CSV files into daily series."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from vaultbudget.analytics.series import DailySeries

# How each metric is bucketed into days
AGGREGATION_BY_METRIC = {
    "weight": "last",
    "body_fat": "last",
    "intake": "sum",
}


class SeriesLoader:
    """Handles importing weight, intake and body-fat samples from CSV files."""

    REQUIRED_COLUMNS = ["date", "value"]

    def load_from_csv(self, csv_path: Path, how: str = "last") -> DailySeries:
        """Load samples from a CSV file and bucket them by day.

        CSV format:
            date,value
            2025-01-15,81.4
            2025-01-15T21:10:00,81.1

        Rows with an unparseable date or a missing value are skipped.

        Args:
            csv_path: Path to the CSV file
            how: Day aggregation, one of "last", "sum", "mean"

        Returns:
            DailySeries with one value per day

        Raises:
            ValueError: If required columns are missing
        """
        df = pd.read_csv(csv_path)

        missing = set(self.REQUIRED_COLUMNS) - set(df.columns)
        if missing:
            raise ValueError(
                f"Missing required columns: {missing}. "
                f"Required columns are: {self.REQUIRED_COLUMNS}"
            )

        df["date"] = pd.to_datetime(df["date"], errors="coerce", format="ISO8601")
        df["value"] = pd.to_numeric(df["value"], errors="coerce")
        df = df.dropna(subset=["date", "value"])

        samples = list(
            zip(
                [stamp.to_pydatetime() for stamp in df["date"]],
                df["value"].astype(float).tolist(),
            )
        )
        return DailySeries.from_samples(samples, how=how)

    def load_metric(self, csv_path: Path, metric: str) -> DailySeries:
        """Load a CSV using the bucketing rule for ``metric``."""
        if metric not in AGGREGATION_BY_METRIC:
            raise ValueError(
                f"metric must be one of {tuple(AGGREGATION_BY_METRIC)}, got '{metric}'"
            )
        return self.load_from_csv(csv_path, how=AGGREGATION_BY_METRIC[metric])
