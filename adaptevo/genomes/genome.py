from __future__ import annotations

import math
import random
from typing import Callable, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from adaptevo.exceptions import FitnessEvaluationError

__all__ = [
    "PARAMETER_MIN",
    "PARAMETER_MAX",
    "UNEVALUATED_FITNESS",
    "Genome",
    "clamp",
    "create_genome",
    "evaluate",
    "score",
]

PARAMETER_MIN: float = 0.0
PARAMETER_MAX: float = 1.0
UNEVALUATED_FITNESS: float = 0.0

FitnessFunction = Callable[[dict[str, float]], float]


def clamp(value: float, low: float = PARAMETER_MIN, high: float = PARAMETER_MAX) -> float:
    return max(low, min(value, high))


class Genome(BaseModel):
    """Parameter vector for one component plus fitness and age metadata."""

    parameters: dict[str, float] = Field(
        default_factory=dict,
        description="Parameter name -> value, every value within [0, 1]",
    )
    fitness: float = Field(
        default=UNEVALUATED_FITNESS,
        description="Last evaluated fitness (0.0 means not evaluated yet)",
    )
    age: int = Field(default=0, ge=0, description="Generations survived")
    generation: int = Field(default=0, ge=0, description="Birth generation index")

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("parameters")
    @classmethod
    def validate_parameters(cls, v: dict[str, float]) -> dict[str, float]:
        for name, value in v.items():
            if not name:
                raise ValueError("Parameter names must be non-empty strings")
            if not math.isfinite(value) or not PARAMETER_MIN <= value <= PARAMETER_MAX:
                raise ValueError(
                    f"Parameter '{name}' must be within [{PARAMETER_MIN}, {PARAMETER_MAX}], got {value}"
                )
        return v

    @property
    def is_evaluated(self) -> bool:
        return self.fitness != UNEVALUATED_FITNESS

    @property
    def parameter_names(self) -> list[str]:
        return list(self.parameters.keys())

    def copy_genome(self) -> Genome:
        """Deep copy; parameter dicts are never shared between genomes."""
        return self.model_copy(deep=True)


def create_genome(
    names_or_values: Mapping[str, float] | Iterable[str],
    rng: random.Random | None = None,
    generation: int = 0,
) -> Genome:
    """Create an unevaluated genome.

    Args:
        names_or_values: Either explicit ``name -> value`` pairs, or parameter
            names whose values are drawn uniformly from [0, 1].
        rng: Random source for the randomized form (module RNG if omitted).
        generation: Birth generation index.

    Returns:
        Genome with fitness 0 and age 0.
    """
    if isinstance(names_or_values, Mapping):
        parameters = {str(k): float(v) for k, v in names_or_values.items()}
    else:
        rng = rng or random.Random()
        parameters = {str(name): rng.random() for name in names_or_values}
    return Genome(parameters=parameters, generation=generation)


def evaluate(genome: Genome, fitness_fn: FitnessFunction) -> float:
    """Score ``genome`` with ``fitness_fn`` and store the result on it.

    Raises:
        FitnessEvaluationError: If the function raises or its result is not a
            finite number.
    """
    genome.fitness = score(genome, fitness_fn)
    return genome.fitness


def score(genome: Genome, fitness_fn: FitnessFunction) -> float:
    """Compute fitness without touching the genome."""
    try:
        raw = fitness_fn(dict(genome.parameters))
    except Exception as exc:
        raise FitnessEvaluationError(
            f"Fitness function {_describe(fitness_fn)} failed: {exc}"
        ) from exc

    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise FitnessEvaluationError(
            f"Fitness function {_describe(fitness_fn)} returned non-numeric {raw!r}"
        ) from exc
    if not math.isfinite(value):
        raise FitnessEvaluationError(
            f"Fitness function {_describe(fitness_fn)} returned non-finite {value}"
        )
    return value


def _describe(fn: Callable) -> str:
    return getattr(fn, "__name__", type(fn).__name__)
