from adaptevo.evolution.analysis.analyzer import (
    AnalyzerConfig,
    ConvergencePattern,
    FitnessMetrics,
    analyze_history,
    classify_convergence,
    detect_cycles,
    improvement_rate,
    is_stagnating,
    population_diversity,
)
from adaptevo.evolution.analysis.history import DEFAULT_HISTORY_CAPACITY, FitnessHistory

__all__ = [
    "AnalyzerConfig",
    "ConvergencePattern",
    "DEFAULT_HISTORY_CAPACITY",
    "FitnessHistory",
    "FitnessMetrics",
    "analyze_history",
    "classify_convergence",
    "detect_cycles",
    "improvement_rate",
    "is_stagnating",
    "population_diversity",
]
