"""Engine configuration: every tunable constant of the analytics pipeline.

A single frozen ``EngineConfig`` value is passed explicitly into every engine
entry point. Nothing in ``vaultbudget.analytics`` reads global state, so the
same inputs and the same config always give the same estimate.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any

# Smoothing and regression
DEFAULT_SMOOTHING = 0.1  # ~10 day time constant for intake EWMA
DEFAULT_REGRESSION_DECAY = 0.9  # per-day recency weight in the slope fit
DEFAULT_WINDOW_DAYS = 28

# Confidence thresholds
MIN_WEIGHT_DAYS = 7
MIN_INTAKE_DAYS = 14

# Physiological slope bounds (kg/week)
MAX_WEIGHT_LOSS_PER_WEEK = 1.0
MAX_WEIGHT_GAIN_PER_WEEK = 0.75

# Forbes two-compartment model
FORBES_CONSTANT_KG = 10.4
FAT_TISSUE_KCAL_PER_KG = 9440.0
LEAN_TISSUE_KCAL_PER_KG = 1816.0
DEFAULT_RHO = 7350.0

# Fallback chain
HISTORICAL_STAGES = (180, 365, 730)
BASELINE_MAINTENANCE = 2200.0
WEIGHT_ANCHOR_MULTIPLIER = 30.0

# Budget bounds (kcal/day)
MAX_DAILY_CREDIT_ADJUSTMENT = 500.0
MIN_BUDGET = 1000.0
MAX_BUDGET = 6000.0


@dataclass(frozen=True)
class EngineConfig:
    """Constants for smoothing, regression, confidence, fallback and budgets.

    Attributes:
        smoothing_alpha: Base EWMA factor applied per elapsed day
        regression_decay: Weight decay per day of sample age in the slope fit
        window_days: Primary regression/confidence window
        min_weight_days: Weight days needed for full weight confidence
        min_intake_days: Intake days needed for full intake confidence
        max_weight_loss_per_week: Magnitude of the lower slope clamp (kg/week)
        max_weight_gain_per_week: Upper slope clamp (kg/week)
        forbes_constant: Forbes C (kg)
        fat_tissue_energy: Energy density of fat tissue (kcal/kg)
        lean_tissue_energy: Energy density of lean tissue (kcal/kg)
        default_rho: Population rho used without body-fat data (kcal/kg)
        historical_stages: Ascending lookback windows tried by the fallback
        historical_min_weight_days: Weight days a stage needs to qualify
        historical_min_intake_days: Intake days a stage needs to qualify
        weight_anchor_multiplier: kcal per kg of body weight when anchoring
        baseline_maintenance: Population maintenance (kcal/day)
        suspect_maintenance_below: Maintenance under this value is flagged
        max_daily_credit_adjustment: Bound on |credit / days left|
        min_budget: Lower bound on the final budget
        max_budget: Upper bound on the final budget
        validity_span_fraction: Share of the window the data must span
    """

    smoothing_alpha: float = DEFAULT_SMOOTHING
    regression_decay: float = DEFAULT_REGRESSION_DECAY
    window_days: int = DEFAULT_WINDOW_DAYS
    min_weight_days: int = MIN_WEIGHT_DAYS
    min_intake_days: int = MIN_INTAKE_DAYS
    max_weight_loss_per_week: float = MAX_WEIGHT_LOSS_PER_WEEK
    max_weight_gain_per_week: float = MAX_WEIGHT_GAIN_PER_WEEK
    forbes_constant: float = FORBES_CONSTANT_KG
    fat_tissue_energy: float = FAT_TISSUE_KCAL_PER_KG
    lean_tissue_energy: float = LEAN_TISSUE_KCAL_PER_KG
    default_rho: float = DEFAULT_RHO
    historical_stages: tuple[int, ...] = HISTORICAL_STAGES
    historical_min_weight_days: int = MIN_WEIGHT_DAYS
    historical_min_intake_days: int = MIN_INTAKE_DAYS
    weight_anchor_multiplier: float = WEIGHT_ANCHOR_MULTIPLIER
    baseline_maintenance: float = BASELINE_MAINTENANCE
    suspect_maintenance_below: float = MIN_BUDGET
    max_daily_credit_adjustment: float = MAX_DAILY_CREDIT_ADJUSTMENT
    min_budget: float = MIN_BUDGET
    max_budget: float = MAX_BUDGET
    validity_span_fraction: float = 0.5

    def __post_init__(self) -> None:
        # YAML hands us lists
        object.__setattr__(
            self, "historical_stages", tuple(int(s) for s in self.historical_stages)
        )

        if not 0 < self.smoothing_alpha <= 1:
            raise ValueError(
                f"smoothing_alpha must be in (0, 1], got {self.smoothing_alpha}"
            )
        if not 0 < self.regression_decay <= 1:
            raise ValueError(
                f"regression_decay must be in (0, 1], got {self.regression_decay}"
            )
        if self.window_days <= 0:
            raise ValueError(f"window_days must be positive, got {self.window_days}")
        if self.min_weight_days <= 0 or self.min_intake_days <= 0:
            raise ValueError("minimum day counts must be positive")
        if self.max_weight_loss_per_week < 0 or self.max_weight_gain_per_week < 0:
            raise ValueError("slope bounds are magnitudes and must be non-negative")
        if not self.historical_stages:
            raise ValueError("historical_stages must not be empty")
        stages = self.historical_stages
        if any(b <= a for a, b in zip(stages, stages[1:])) or stages[0] <= 0:
            raise ValueError(
                f"historical_stages must be positive and ascending, got {stages}"
            )
        if self.min_budget > self.max_budget:
            raise ValueError(
                f"min_budget ({self.min_budget}) exceeds max_budget ({self.max_budget})"
            )
        if self.max_daily_credit_adjustment < 0:
            raise ValueError("max_daily_credit_adjustment must be non-negative")

    @property
    def min_slope(self) -> float:
        """Lower slope clamp (kg/week)."""
        return -self.max_weight_loss_per_week

    @property
    def max_slope(self) -> float:
        """Upper slope clamp (kg/week)."""
        return self.max_weight_gain_per_week

    def replace(self, **overrides: Any) -> "EngineConfig":
        """Return a validated copy with the given constants overridden."""
        return replace(self, **overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a YAML/JSON friendly dict."""
        data = asdict(self)
        data["historical_stages"] = list(self.historical_stages)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        """Build a config from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


DEFAULT_CONFIG = EngineConfig()
