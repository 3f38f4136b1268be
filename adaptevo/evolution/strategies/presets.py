"""Named starting points for common component families."""

from __future__ import annotations

from typing import Any

from adaptevo.evolution.strategies.models import EvolutionStrategy, validate_strategy
from adaptevo.exceptions import InvalidConfigurationError

__all__ = ["STRATEGY_PRESETS", "create_strategy"]

STRATEGY_PRESETS: dict[str, dict[str, Any]] = {
    "default": {
        "mutation_rate": 0.1,
        "crossover_rate": 0.7,
        "selection_pressure": 0.8,
        "population_size": 100,
        "elite_size": 5,
    },
    "physical_laws": {
        "mutation_rate": 0.1,
        "crossover_rate": 0.7,
        "selection_pressure": 0.8,
    },
    "biological_laws": {
        "mutation_rate": 0.2,
        "crossover_rate": 0.8,
        "selection_pressure": 0.6,
    },
    "mathematical_laws": {
        "mutation_rate": 0.15,
        "crossover_rate": 0.75,
        "selection_pressure": 0.7,
    },
}


def create_strategy(preset: str = "default", **overrides: Any) -> EvolutionStrategy:
    """Build a strategy from a preset, with keyword overrides applied on top.

    Example:
        create_strategy("biological_laws", population_size=20, elite_size=2)
    """
    if preset not in STRATEGY_PRESETS:
        raise InvalidConfigurationError(
            f"Unknown strategy preset '{preset}', expected one of {sorted(STRATEGY_PRESETS)}"
        )
    return validate_strategy({**STRATEGY_PRESETS[preset], **overrides})
