"""Forbes two-compartment energy partition model.

Weight change is a mix of fat and lean tissue. Forbes' relation gives the fat
share of a change as p = F / (F + C), where F is fat mass and C is a constant
(10.4 kg). The energy density of the change is then

    ρ = E_fat × p + E_lean × (1 - p)

Lean people lose proportionally more lean tissue, so their ρ is lower.
"""

from __future__ import annotations

from typing import Optional

from vaultbudget.config.engine import DEFAULT_CONFIG, EngineConfig


def fat_partition(
    weight_kg: float, body_fat: float, forbes_constant: float
) -> float:
    """Fraction of a weight change that is fat mass."""
    fat_mass = body_fat * weight_kg
    denominator = fat_mass + forbes_constant
    if denominator == 0:
        return 0.0
    return fat_mass / denominator


def energy_density(
    weight_kg: Optional[float],
    body_fat: Optional[float],
    config: EngineConfig = DEFAULT_CONFIG,
) -> tuple[float, bool]:
    """
    Energy per kilogram of weight change.

    Args:
        weight_kg: Latest body weight, or None
        body_fat: Latest body-fat fraction (0-1), or None
        config: Engine constants

    Returns:
        Tuple of (rho in kcal/kg, estimated). ``estimated`` is True when the
        population default was used because composition data was missing.
    """
    if body_fat is None or weight_kg is None:
        return config.default_rho, True

    p = fat_partition(weight_kg, body_fat, config.forbes_constant)
    rho = config.fat_tissue_energy * p + config.lean_tissue_energy * (1 - p)
    return rho, False
