"""Stock fitness functions and termination predicates.

Fitness functions map a genome's parameters to a float (higher is better).
Termination predicates look at a population and decide whether a run should
stop. Both are plain callables so they can be targeted from Hydra configs.
"""

from __future__ import annotations

from typing import Mapping

from adaptevo.genomes.population import Population

__all__ = [
    "MeanParameters",
    "ParameterValue",
    "TargetMatch",
    "FitnessThreshold",
    "GenerationLimit",
    "never_terminate",
]


class MeanParameters:
    """Mean of all parameter values."""

    def __call__(self, parameters: dict[str, float]) -> float:
        if not parameters:
            return 0.0
        return sum(parameters.values()) / len(parameters)

    def __repr__(self) -> str:
        return "MeanParameters()"


class ParameterValue:
    """Value of a single named parameter."""

    def __init__(self, name: str):
        if not name:
            raise ValueError("name cannot be empty")
        self.name = name

    def __call__(self, parameters: dict[str, float]) -> float:
        return parameters[self.name]

    def __repr__(self) -> str:
        return f"ParameterValue(name={self.name!r})"


class TargetMatch:
    """1 minus the mean absolute distance to per-parameter targets.

    Parameters missing from the genome count as maximally distant.
    """

    def __init__(self, targets: Mapping[str, float]):
        if not targets:
            raise ValueError("targets cannot be empty")
        self.targets = {str(k): float(v) for k, v in targets.items()}

    def __call__(self, parameters: dict[str, float]) -> float:
        distance = 0.0
        for name, target in self.targets.items():
            if name in parameters:
                distance += abs(parameters[name] - target)
            else:
                distance += 1.0
        return 1.0 - distance / len(self.targets)

    def __repr__(self) -> str:
        return f"TargetMatch(targets={self.targets!r})"


def never_terminate(population: Population) -> bool:
    return False


class FitnessThreshold:
    """Stop once the best genome reaches ``threshold``."""

    def __init__(self, threshold: float):
        self.threshold = threshold

    def __call__(self, population: Population) -> bool:
        best = population.best()
        return best is not None and best.fitness >= self.threshold

    def __repr__(self) -> str:
        return f"FitnessThreshold(threshold={self.threshold})"


class GenerationLimit:
    """Stop once the population has produced ``generations`` generations."""

    def __init__(self, generations: int):
        if generations < 1:
            raise ValueError(f"generations must be at least 1, got {generations}")
        self.generations = generations

    def __call__(self, population: Population) -> bool:
        return population.generation >= self.generations

    def __repr__(self) -> str:
        return f"GenerationLimit(generations={self.generations})"
