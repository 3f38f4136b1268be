from __future__ import annotations

from pydantic import BaseModel, Field


class EngineMetrics(BaseModel):
    """Running counters for an EvolutionEngine."""

    registrations: int = Field(default=0, description="Components registered")
    total_generations: int = Field(
        default=0, description="Total number of generations run"
    )
    genomes_evaluated: int = Field(
        default=0, description="Total fitness function calls that succeeded"
    )
    offspring_created: int = Field(
        default=0, description="Total offspring produced (crossover or clone)"
    )
    crossovers: int = Field(default=0, description="Offspring produced by crossover")
    mutations: int = Field(default=0, description="Offspring passed through mutation")
    improvements: int = Field(
        default=0, description="Times a component's current genome was replaced"
    )
    adaptations: int = Field(default=0, description="Direct-feedback adaptations")
    tuning_passes: int = Field(default=0, description="Strategy tuning passes")
    strategy_adjustments: int = Field(
        default=0, description="Strategies whose rates changed during tuning"
    )
    lookup_failures: int = Field(
        default=0, description="Operations answered with a NOT_FOUND or ALREADY_REGISTERED failure"
    )
    evaluation_errors: int = Field(
        default=0, description="Generations aborted by a failing fitness function"
    )

    def record_generation_metrics(
        self, evaluated: int, offspring: int, crossovers: int, mutations: int, improved: bool
    ) -> None:
        """Record metrics from one completed generation."""
        self.total_generations += 1
        self.genomes_evaluated += evaluated
        self.offspring_created += offspring
        self.crossovers += crossovers
        self.mutations += mutations
        if improved:
            self.improvements += 1

    def record_tuning_metrics(self, changed: int) -> None:
        """Record metrics from a tuning pass."""
        self.tuning_passes += 1
        self.strategy_adjustments += changed
