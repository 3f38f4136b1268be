from __future__ import annotations

from enum import Enum
from itertools import combinations
from typing import Any, Sequence

import numpy as np
from pydantic import BaseModel, Field

from adaptevo.genomes.genome import Genome

__all__ = [
    "AnalyzerConfig",
    "ConvergencePattern",
    "FitnessMetrics",
    "analyze_history",
    "classify_convergence",
    "detect_cycles",
    "improvement_rate",
    "is_stagnating",
    "population_diversity",
]


class ConvergencePattern(str, Enum):
    """Shape of a fitness trajectory."""

    STABLE = "stable"  # barely moving
    PUNCTUATED = "punctuated"  # long flats broken by large jumps
    GRADUAL = "gradual"


class AnalyzerConfig(BaseModel):
    """Thresholds used when summarizing fitness histories."""

    stagnation_window: int = Field(default=10, gt=0)
    stagnation_threshold: float = Field(
        default=0.01, ge=0, description="Max per-generation gain still counted as stagnant"
    )
    stability_std_threshold: float = Field(default=1e-3, ge=0)
    punctuation_jump_threshold: float = Field(default=0.5, gt=0)
    cycle_correlation_threshold: float = Field(default=0.7, gt=0, le=1)
    max_cycle_lag: int = Field(default=10, gt=0)


class FitnessMetrics(BaseModel):
    """Summary of one component's fitness history and population spread."""

    generations: int = 0
    current_fitness: float = 0.0
    best_fitness: float = 0.0
    mean_fitness: float = 0.0
    fitness_std: float = 0.0
    evolution_rate: float = 0.0
    improvement_rate: float = 0.0
    stagnating: bool = False
    convergence: ConvergencePattern = ConvergencePattern.STABLE
    cyclical: bool = False
    diversity: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Flat dictionary for reporting layers."""
        result = self.model_dump()
        result["convergence"] = self.convergence.value
        return result


def improvement_rate(values: Sequence[float]) -> float:
    """(last - first) / length, or 0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return (values[-1] - values[0]) / len(values)


def is_stagnating(
    values: Sequence[float], window: int = 10, threshold: float = 0.01
) -> bool:
    """True if each of the last ``min(window, len - 1)`` deltas is <= threshold."""
    if len(values) < 2:
        return False
    steps = min(window, len(values) - 1)
    recent = np.diff(np.asarray(values[-(steps + 1):], dtype=float))
    return bool(np.all(recent <= threshold))


def classify_convergence(
    values: Sequence[float], config: AnalyzerConfig | None = None
) -> ConvergencePattern:
    config = config or AnalyzerConfig()
    if len(values) < 2:
        return ConvergencePattern.STABLE

    series = np.asarray(values, dtype=float)
    if float(np.std(series, ddof=1)) < config.stability_std_threshold:
        return ConvergencePattern.STABLE
    if float(np.max(np.abs(np.diff(series)))) > config.punctuation_jump_threshold:
        return ConvergencePattern.PUNCTUATED
    return ConvergencePattern.GRADUAL


def detect_cycles(values: Sequence[float], config: AnalyzerConfig | None = None) -> bool:
    """Flag cyclical fitness: any lag-1..N autocorrelation above the threshold.

    Computed on generation-to-generation differences, so a steady trend is not
    mistaken for a cycle.
    """
    config = config or AnalyzerConfig()
    if len(values) < 4:
        return False

    series = np.diff(np.asarray(values, dtype=float))
    # constant steps (including float noise on a linear trend) carry no cycle
    if np.allclose(series, series[0]):
        return False
    centered = series - series.mean()
    denominator = float(np.dot(centered, centered))

    max_lag = min(config.max_cycle_lag, len(series) // 2)
    for lag in range(1, max_lag + 1):
        correlation = float(np.dot(centered[:-lag], centered[lag:])) / denominator
        if correlation > config.cycle_correlation_threshold:
            return True
    return False


def population_diversity(genomes: Sequence[Genome]) -> float:
    """Mean pairwise absolute parameter distance over shared keys.

    Pairs without shared keys are skipped; returns 0.0 when fewer than two
    genomes (or no comparable pairs) exist.
    """
    if len(genomes) < 2:
        return 0.0

    distances = []
    for a, b in combinations(genomes, 2):
        shared = a.parameters.keys() & b.parameters.keys()
        if not shared:
            continue
        distances.append(
            sum(abs(a.parameters[k] - b.parameters[k]) for k in shared) / len(shared)
        )
    if not distances:
        return 0.0
    return float(np.mean(distances))


def analyze_history(
    values: Sequence[float],
    evolution_rate: float = 0.0,
    diversity: float = 0.0,
    config: AnalyzerConfig | None = None,
) -> FitnessMetrics:
    """Summarize a fitness history. An empty history yields zeroed metrics."""
    config = config or AnalyzerConfig()
    if not values:
        return FitnessMetrics(evolution_rate=evolution_rate, diversity=diversity)

    series = np.asarray(values, dtype=float)
    return FitnessMetrics(
        generations=len(series),
        current_fitness=float(series[-1]),
        best_fitness=float(series.max()),
        mean_fitness=float(series.mean()),
        fitness_std=float(series.std(ddof=1)) if len(series) > 1 else 0.0,
        evolution_rate=evolution_rate,
        improvement_rate=improvement_rate(values),
        stagnating=is_stagnating(
            values, config.stagnation_window, config.stagnation_threshold
        ),
        convergence=classify_convergence(values, config),
        cyclical=detect_cycles(values, config),
        diversity=diversity,
    )
