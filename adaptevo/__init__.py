"""Adaptive population-based optimization of named parameter components."""

from adaptevo.evolution.engine import EngineConfig, EvolutionEngine, FailureReason, Feedback
from adaptevo.evolution.strategies import EvolutionStrategy, create_strategy
from adaptevo.genomes import Genome, Population

__version__ = "0.1.0"

__all__ = [
    "EngineConfig",
    "EvolutionEngine",
    "EvolutionStrategy",
    "FailureReason",
    "Feedback",
    "Genome",
    "Population",
    "create_strategy",
]
