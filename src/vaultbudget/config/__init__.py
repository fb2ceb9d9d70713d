"""Configuration for the analytics engine and the command-line front end."""

from vaultbudget.config.engine import DEFAULT_CONFIG, EngineConfig
from vaultbudget.config.settings import (
    BudgetConfig,
    MacroConfig,
    Settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "BudgetConfig",
    "MacroConfig",
    "Settings",
    "get_settings",
    "reload_settings",
]
