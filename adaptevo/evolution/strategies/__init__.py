from adaptevo.evolution.strategies.models import (
    EvolutionStrategy,
    RateSnapshot,
    validate_strategy,
)
from adaptevo.evolution.strategies.presets import STRATEGY_PRESETS, create_strategy

__all__ = [
    "EvolutionStrategy",
    "RateSnapshot",
    "STRATEGY_PRESETS",
    "create_strategy",
    "validate_strategy",
]
