from __future__ import annotations

from adaptevo.evolution.engine.config import EngineConfig
from adaptevo.evolution.engine.core import DEFAULT_STRATEGY_KEY, EvolutionEngine
from adaptevo.evolution.engine.feedback import Feedback
from adaptevo.evolution.engine.metrics import EngineMetrics
from adaptevo.evolution.engine.results import (
    AdaptOutcome,
    AnalysisOutcome,
    EngineStatus,
    EvolveOutcome,
    FailureReason,
    OperationFailure,
    RegisterOutcome,
)

__all__ = [
    "AdaptOutcome",
    "AnalysisOutcome",
    "DEFAULT_STRATEGY_KEY",
    "EngineConfig",
    "EngineMetrics",
    "EngineStatus",
    "EvolutionEngine",
    "EvolveOutcome",
    "FailureReason",
    "Feedback",
    "OperationFailure",
    "RegisterOutcome",
]
