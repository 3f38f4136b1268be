from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from adaptevo.evolution.analysis.analyzer import AnalyzerConfig
from adaptevo.evolution.analysis.history import DEFAULT_HISTORY_CAPACITY
from adaptevo.evolution.mutation.operators import (
    DEFAULT_MUTATION_SCALE,
    DEFAULT_PER_GENE_RATE,
)
from adaptevo.evolution.tuning.tuner import TunerConfig

EVOLUTION_RATE_FLOOR: float = 0.01
EVOLUTION_RATE_CEILING: float = 0.5


class EngineConfig(BaseModel):
    """Configuration options controlling EvolutionEngine behaviour."""

    history_capacity: int = Field(
        default=DEFAULT_HISTORY_CAPACITY,
        gt=0,
        description="Fitness history entries kept per component",
    )
    initial_evolution_rate: float = Field(
        default=0.1, description="Starting step size for direct-feedback adaptation"
    )
    evolution_rate_min: float = Field(
        default=EVOLUTION_RATE_FLOOR, ge=EVOLUTION_RATE_FLOOR, le=EVOLUTION_RATE_CEILING
    )
    evolution_rate_max: float = Field(
        default=EVOLUTION_RATE_CEILING, ge=EVOLUTION_RATE_FLOOR, le=EVOLUTION_RATE_CEILING
    )
    evolution_rate_growth: float = Field(default=1.1, ge=1)
    evolution_rate_decay: float = Field(default=0.9, gt=0, le=1)
    fast_improvement: float = Field(
        default=0.1, description="Improvement rate above which evolution_rate grows"
    )
    slow_improvement: float = Field(
        default=0.01, description="Improvement rate below which evolution_rate decays"
    )
    per_gene_rate: float = Field(default=DEFAULT_PER_GENE_RATE, ge=0, le=1)
    mutation_scale: float = Field(default=DEFAULT_MUTATION_SCALE, gt=0)
    feedback_fitness_weight: float = Field(
        default=0.1,
        ge=0,
        le=1,
        description="Weight of feedback fitness in the blended fitness after adapt",
    )
    seed: int | None = Field(
        default=None, description="Seed for the engine's random source (None = unseeded)"
    )
    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    tuner: TunerConfig = Field(default_factory=TunerConfig)

    @model_validator(mode="after")
    def validate_evolution_rate(self) -> EngineConfig:
        if self.evolution_rate_min > self.evolution_rate_max:
            raise ValueError(
                f"evolution_rate_min ({self.evolution_rate_min}) must be <= "
                f"evolution_rate_max ({self.evolution_rate_max})"
            )
        if not self.evolution_rate_min <= self.initial_evolution_rate <= self.evolution_rate_max:
            raise ValueError(
                f"initial_evolution_rate ({self.initial_evolution_rate}) must be within "
                f"[{self.evolution_rate_min}, {self.evolution_rate_max}]"
            )
        if self.slow_improvement > self.fast_improvement:
            raise ValueError(
                f"slow_improvement ({self.slow_improvement}) must be <= "
                f"fast_improvement ({self.fast_improvement})"
            )
        return self
