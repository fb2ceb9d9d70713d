"""Data loading for raw health samples."""

from vaultbudget.data.series_loader import SeriesLoader

__all__ = ["SeriesLoader"]
