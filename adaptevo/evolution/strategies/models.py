from __future__ import annotations

from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from adaptevo.evolution.fitness_functions import MeanParameters, never_terminate
from adaptevo.exceptions import InvalidConfigurationError
from adaptevo.genomes.population import Population

__all__ = ["EvolutionStrategy", "RateSnapshot", "validate_strategy"]


class RateSnapshot(BaseModel):
    """The auto-tunable rates of a strategy at one point in time."""

    mutation_rate: float
    crossover_rate: float
    selection_pressure: float


class EvolutionStrategy(BaseModel):
    """Hyperparameters for one GA configuration.

    Frozen: the auto-tuner swaps in a tuned copy rather than editing fields.
    """

    population_size: int = Field(default=100, gt=0)
    mutation_rate: float = Field(default=0.1, ge=0.0, le=1.0)
    crossover_rate: float = Field(default=0.7, ge=0.0, le=1.0)
    selection_pressure: float = Field(default=0.8, ge=0.0, le=1.0)
    elite_size: int = Field(default=5, ge=0)
    fitness_function: Callable[[dict[str, float]], float] = Field(
        default_factory=MeanParameters,
        description="Maps genome parameters to fitness (higher is better)",
    )
    termination: Callable[[Population], bool] = Field(
        default=never_terminate,
        description="Decides when a multi-generation run should stop",
    )

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def validate_elite_size(self) -> EvolutionStrategy:
        if self.elite_size > self.population_size:
            raise ValueError(
                f"elite_size ({self.elite_size}) must be <= population_size ({self.population_size})"
            )
        return self

    @property
    def tournament_size(self) -> int:
        return max(2, round(self.selection_pressure * self.population_size))

    @property
    def parent_pool_size(self) -> int:
        return max(self.population_size // 2, 2)

    def rates(self) -> RateSnapshot:
        return RateSnapshot(
            mutation_rate=self.mutation_rate,
            crossover_rate=self.crossover_rate,
            selection_pressure=self.selection_pressure,
        )

    def with_rates(self, rates: RateSnapshot) -> EvolutionStrategy:
        """Return a validated copy carrying ``rates``."""
        return validate_strategy({**self._fields(), **rates.model_dump()})

    def _fields(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in type(self).model_fields}


def validate_strategy(
    strategy: EvolutionStrategy | Mapping[str, Any],
) -> EvolutionStrategy:
    """Re-validate a strategy (or build one from a mapping).

    Raises:
        InvalidConfigurationError: If any field is outside its documented range.
    """
    if isinstance(strategy, EvolutionStrategy):
        data = strategy._fields()
    elif isinstance(strategy, Mapping):
        data = dict(strategy)
    else:
        raise InvalidConfigurationError(
            f"Expected EvolutionStrategy or mapping, got {type(strategy).__name__}"
        )
    try:
        return EvolutionStrategy.model_validate(data)
    except PydanticValidationError as exc:
        raise InvalidConfigurationError(f"Invalid evolution strategy: {exc}") from exc
