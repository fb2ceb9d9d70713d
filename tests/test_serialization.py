"""Tests for estimate snapshot serialization."""

from __future__ import annotations

import json

import pytest

from vaultbudget.analytics.engine import analyze
from vaultbudget.analytics.serialization import (
    SCHEMA_VERSION,
    deserialize_budget,
    deserialize_maintenance,
    recompute_budget,
    serialize_budget,
    serialize_maintenance,
)


@pytest.fixture
def analyzed(series, reference_date):
    """A maintenance and budget pair from realistic data."""
    return analyze(
        series.linear(82.0, -0.4, 40),
        series.sparse(2100.0, 40, 1),
        series.at({5: 0.28}),
        reference_date,
        adjustment=-300.0,
    )


class TestMaintenanceSnapshot:
    """Tests for maintenance snapshots."""

    def test_json_round_trip(self, analyzed):
        estimate, _ = analyzed
        restored = deserialize_maintenance(json.loads(json.dumps(serialize_maintenance(estimate))))
        assert restored == estimate
        assert restored.flags == estimate.flags

    def test_snapshot_fields(self, analyzed):
        estimate, _ = analyzed
        data = serialize_maintenance(estimate)
        assert data["schema_version"] == SCHEMA_VERSION
        assert data["reference_date"] == "2024-01-03"
        assert data["fallback_source"] == "180d personal"

    def test_unknown_version_rejected(self, analyzed):
        data = serialize_maintenance(analyzed[0])
        data["schema_version"] = "9.9"
        with pytest.raises(ValueError, match="schema_version"):
            deserialize_maintenance(data)

    def test_missing_field_rejected(self, analyzed):
        data = serialize_maintenance(analyzed[0])
        del data["rho"]
        with pytest.raises(ValueError, match="missing field"):
            deserialize_maintenance(data)


class TestBudgetSnapshot:
    """Tests for budget snapshots."""

    def test_json_round_trip(self, analyzed):
        _, budget = analyzed
        restored = deserialize_budget(json.loads(json.dumps(serialize_budget(budget))))
        assert restored == budget
        assert restored.week_start == budget.week_start

    def test_recompute_reproduces_budget(self, analyzed, series):
        """A stored estimate gives the same budget without the wall clock."""
        estimate, budget = analyzed
        snapshot = json.loads(json.dumps(serialize_maintenance(estimate)))
        recomputed = recompute_budget(
            snapshot,
            week_intake=series.sparse(2100.0, 40, 1),
            adjustment=-300.0,
        )
        assert recomputed == budget

    def test_missing_field_rejected(self, analyzed):
        data = serialize_budget(analyzed[1])
        del data["credit"]
        with pytest.raises(ValueError, match="missing field"):
            deserialize_budget(data)
