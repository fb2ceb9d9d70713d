"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from vaultbudget.config.engine import EngineConfig

# 1 = Sunday ... 7 = Saturday
MONDAY = 2


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".vaultbudget"


@dataclass
class MacroConfig:
    """Macro split as percentages of the calorie budget."""

    protein: Optional[float] = None
    fat: Optional[float] = None
    carbs: Optional[float] = None


@dataclass
class BudgetConfig:
    """User budget preferences supplied to the budget calculator."""

    adjustment: float = 0.0  # kcal/day, negative for a deficit
    first_weekday: int = MONDAY
    macros: MacroConfig = field(default_factory=MacroConfig)

    def __post_init__(self) -> None:
        if not 1 <= self.first_weekday <= 7:
            raise ValueError(
                f"first_weekday must be between 1 and 7, got {self.first_weekday}"
            )


@dataclass
class Settings:
    """Main application settings."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    budget: BudgetConfig = field(default_factory=BudgetConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.vaultbudget/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        if "engine" in data:
            settings.engine = EngineConfig.from_dict(data["engine"] or {})

        if "budget" in data:
            budget_data = data["budget"] or {}
            if "adjustment" in budget_data:
                settings.budget.adjustment = float(budget_data["adjustment"] or 0.0)
            if "first_weekday" in budget_data:
                settings.budget.first_weekday = int(budget_data["first_weekday"])
                settings.budget.__post_init__()
            if "macros" in budget_data:
                macro_data = budget_data["macros"] or {}
                settings.budget.macros = MacroConfig(
                    protein=_optional_float(macro_data.get("protein")),
                    fat=_optional_float(macro_data.get("fat")),
                    carbs=_optional_float(macro_data.get("carbs")),
                )

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.vaultbudget/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict:
        """Convert to the YAML document layout."""
        return {
            "engine": self.engine.to_dict(),
            "budget": {
                "adjustment": self.budget.adjustment,
                "first_weekday": self.budget.first_weekday,
                "macros": {
                    "protein": self.budget.macros.protein,
                    "fat": self.budget.macros.fat,
                    "carbs": self.budget.macros.carbs,
                },
            },
        }


def _optional_float(value: object) -> Optional[float]:
    if value is None:
        return None
    return float(value)  # type: ignore[arg-type]


# Global settings instance (lazy loaded, CLI only)
_settings: Optional[Settings] = None


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None or config_path is not None:
        _settings = Settings.load(config_path)
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
