"""Tests for loading CSV samples."""

from __future__ import annotations

from datetime import date

import pytest

from vaultbudget.data import SeriesLoader


@pytest.fixture
def loader() -> SeriesLoader:
    return SeriesLoader()


class TestSeriesLoader:
    """Tests for SeriesLoader."""

    def test_load_weight_keeps_last_of_day(self, loader, tmp_path):
        path = tmp_path / "weight.csv"
        path.write_text(
            "date,value\n"
            "2024-01-01T07:00:00,80.6\n"
            "2024-01-01T21:00:00,80.9\n"
            "2024-01-02,80.4\n"
        )
        s = loader.load_metric(path, "weight")
        assert s.to_dict() == {date(2024, 1, 1): 80.9, date(2024, 1, 2): 80.4}

    def test_load_intake_sums_day(self, loader, tmp_path):
        path = tmp_path / "intake.csv"
        path.write_text(
            "date,value,note\n"
            "2024-01-01T08:00:00,450,breakfast\n"
            "2024-01-01T12:30:00,700,lunch\n"
            "2024-01-02T08:00:00,500,breakfast\n"
        )
        s = loader.load_metric(path, "intake")
        assert s.values == (pytest.approx(1150.0), pytest.approx(500.0))

    def test_bad_rows_skipped(self, loader, tmp_path):
        path = tmp_path / "weight.csv"
        path.write_text("date,value\n2024-01-01,80.0\nnot-a-date,81.0\n2024-01-03,\n")
        s = loader.load_metric(path, "weight")
        assert len(s) == 1

    def test_missing_columns(self, loader, tmp_path):
        path = tmp_path / "weight.csv"
        path.write_text("day,kg\n2024-01-01,80.0\n")
        with pytest.raises(ValueError, match="Missing required columns"):
            loader.load_metric(path, "weight")

    def test_unknown_metric(self, loader, tmp_path):
        with pytest.raises(ValueError, match="metric must be one of"):
            loader.load_metric(tmp_path / "x.csv", "steps")

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(FileNotFoundError):
            loader.load_metric(tmp_path / "absent.csv", "weight")
