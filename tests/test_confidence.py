"""Tests for the confidence scorer."""

from __future__ import annotations

import pytest

from vaultbudget.analytics.confidence import score_confidence
from vaultbudget.analytics.models import ConfidenceScore
from vaultbudget.analytics.series import DailySeries


class TestScoreConfidence:
    """Tests for score_confidence function."""

    def test_empty_series(self, reference_date):
        score = score_confidence(DailySeries(), reference_date, 7, 28)
        assert score.value == 0.0
        assert score.count == 0
        assert not score.sufficient

    def test_dense_full_window(self, series, reference_date):
        """28 consecutive days span 27 of 28 days."""
        score = score_confidence(series.constant(70.0, 28), reference_date, 7, 28)
        assert score.count == 28
        assert score.span_days == 27
        assert score.value == pytest.approx(27 / 28)
        assert score.sufficient

    def test_sparse_but_spread(self, series, reference_date):
        """Seven weigh-ins every fourth day: full density, span 24."""
        score = score_confidence(series.sparse(70.0, 28, 4), reference_date, 7, 28)
        assert score.count == 7
        assert score.value == pytest.approx(24 / 28)

    def test_few_samples_scale_density(self, series, reference_date):
        score = score_confidence(series.at({0: 1.0, 10: 1.0, 20: 1.0}), reference_date, 7, 28)
        assert score.value == pytest.approx((3 / 7) * (20 / 28))
        assert not score.sufficient

    def test_dense_but_clustered_is_insufficient(self, series, reference_date):
        """Twelve consecutive recent days cover under half the window."""
        score = score_confidence(series.constant(2000.0, 12), reference_date, 7, 28)
        assert score.count == 12
        assert score.span_days == 11
        assert not score.sufficient

    def test_old_data_ignored(self, series, reference_date):
        score = score_confidence(series.constant(70.0, 10, start_ago=40), reference_date, 7, 28)
        assert score.value == 0.0

    def test_intake_threshold(self, series, reference_date):
        score = score_confidence(series.constant(2000.0, 7), reference_date, 14, 28)
        assert score.value == pytest.approx(0.5 * 6 / 28)

    def test_value_bounds_enforced(self):
        with pytest.raises(ValueError):
            ConfidenceScore(value=1.5, count=1, span_days=0, min_count=7, window_days=28)
