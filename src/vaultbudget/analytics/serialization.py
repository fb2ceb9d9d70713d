"""Serialization utilities for estimate snapshots.

These functions turn MaintenanceEstimate and BudgetEstimate into JSON-ready
dicts and back without loss. The reference date travels with the snapshot,
so a restored estimate never needs the current clock to be reinterpreted.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any, Mapping, Optional, Union

from vaultbudget.analytics.budget import calculate_budget
from vaultbudget.analytics.models import (
    BudgetEstimate,
    ConfidenceScore,
    MaintenanceEstimate,
)
from vaultbudget.analytics.series import DailySeries
from vaultbudget.config.engine import DEFAULT_CONFIG, EngineConfig

SCHEMA_VERSION = "1.0"


def serialize_maintenance(estimate: MaintenanceEstimate) -> dict[str, Any]:
    """Convert a MaintenanceEstimate to a JSON-serializable dict.

    Args:
        estimate: The estimate to serialize

    Returns:
        Dictionary accepted by deserialize_maintenance()
    """
    data = asdict(estimate)
    data["reference_date"] = estimate.reference_date.isoformat()
    data["schema_version"] = SCHEMA_VERSION
    return data


def deserialize_maintenance(data: Mapping[str, Any]) -> MaintenanceEstimate:
    """Rebuild a MaintenanceEstimate from serialize_maintenance() output.

    Raises:
        ValueError: If the schema version is unknown or a field is missing
    """
    _check_version(data)
    try:
        return MaintenanceEstimate(
            maintenance=float(data["maintenance"]),
            confidence=float(data["confidence"]),
            intake_confidence=float(data["intake_confidence"]),
            rho=float(data["rho"]),
            raw_weight_slope=float(data["raw_weight_slope"]),
            weight_slope=float(data["weight_slope"]),
            smoothed_intake=_optional_float(data["smoothed_intake"]),
            blended_intake=float(data["blended_intake"]),
            blended_slope=float(data["blended_slope"]),
            raw_maintenance=float(data["raw_maintenance"]),
            fallback_maintenance=float(data["fallback_maintenance"]),
            fallback_source=str(data["fallback_source"]),
            reference_date=date.fromisoformat(data["reference_date"]),
            weight_score=_score_from_dict(data["weight_score"]),
            intake_score=_score_from_dict(data["intake_score"]),
            body_fat_used=_optional_float(data.get("body_fat_used")),
            latest_weight=_optional_float(data.get("latest_weight")),
            suspect_threshold=float(data.get("suspect_threshold", 1000.0)),
        )
    except KeyError as e:
        raise ValueError(f"Maintenance snapshot is missing field {e}") from e


def serialize_budget(budget: BudgetEstimate) -> dict[str, Any]:
    """Convert a BudgetEstimate to a JSON-serializable dict."""
    data = asdict(budget)
    data["reference_date"] = budget.reference_date.isoformat()
    data["schema_version"] = SCHEMA_VERSION
    return data


def deserialize_budget(data: Mapping[str, Any]) -> BudgetEstimate:
    """Rebuild a BudgetEstimate from serialize_budget() output.

    Raises:
        ValueError: If the schema version is unknown or a field is missing
    """
    _check_version(data)
    try:
        return BudgetEstimate(
            reference_date=date.fromisoformat(data["reference_date"]),
            first_weekday=int(data["first_weekday"]),
            base_budget=float(data["base_budget"]),
            adjustment=float(data["adjustment"]),
            days_elapsed=int(data["days_elapsed"]),
            days_remaining_in_week=int(data["days_remaining_in_week"]),
            logged_intake=float(data["logged_intake"]),
            credit=float(data["credit"]),
            raw_delta=float(data["raw_delta"]),
            delta_adjustment=float(data["delta_adjustment"]),
            unclamped_budget=float(data["unclamped_budget"]),
            final_budget=float(data["final_budget"]),
        )
    except KeyError as e:
        raise ValueError(f"Budget snapshot is missing field {e}") from e


def recompute_budget(
    snapshot: Mapping[str, Any],
    week_intake: Union[DailySeries, Mapping[date, float], None] = None,
    adjustment: Optional[float] = None,
    first_weekday: int = 2,
    config: EngineConfig = DEFAULT_CONFIG,
) -> BudgetEstimate:
    """Derive a budget from a stored maintenance snapshot.

    The stored reference date is "today", whatever the wall clock says.
    """
    return calculate_budget(
        deserialize_maintenance(snapshot),
        adjustment=adjustment,
        week_intake=week_intake,
        first_weekday=first_weekday,
        config=config,
    )


def _check_version(data: Mapping[str, Any]) -> None:
    version = data.get("schema_version", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise ValueError(
            f"Unsupported snapshot schema_version '{version}', expected '{SCHEMA_VERSION}'"
        )


def _score_from_dict(data: Mapping[str, Any]) -> ConfidenceScore:
    return ConfidenceScore(
        value=float(data["value"]),
        count=int(data["count"]),
        span_days=int(data["span_days"]),
        min_count=int(data["min_count"]),
        window_days=int(data["window_days"]),
        span_fraction=float(data.get("span_fraction", 0.5)),
    )


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)
