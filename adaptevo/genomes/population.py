from __future__ import annotations

import random

from pydantic import BaseModel, Field

from adaptevo.genomes.genome import Genome, create_genome

__all__ = ["Population", "initialize_population"]


class Population(BaseModel):
    """Fixed-size cohort of genomes competing for one component."""

    component_id: str = Field(default="", description="Owning component")
    genomes: list[Genome] = Field(default_factory=list)
    generation: int = Field(default=0, ge=0, description="Generations produced so far")
    selection_pressure: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Selection pressure used to build the current generation",
    )

    def __len__(self) -> int:
        return len(self.genomes)

    def sorted_by_fitness(self) -> list[Genome]:
        """Genomes by descending fitness; equal fitness keeps current order."""
        return sorted(self.genomes, key=lambda g: g.fitness, reverse=True)

    def best(self) -> Genome | None:
        if not self.genomes:
            return None
        best = self.genomes[0]
        for genome in self.genomes[1:]:
            if genome.fitness > best.fitness:
                best = genome
        return best

    @property
    def unevaluated(self) -> list[Genome]:
        return [g for g in self.genomes if not g.is_evaluated]


def initialize_population(
    template: Genome,
    size: int,
    rng: random.Random | None = None,
    component_id: str = "",
) -> Population:
    """Build ``size`` genomes with the template's keys and random values."""
    if size < 0:
        raise ValueError(f"size must be non-negative, got {size}")
    rng = rng or random.Random()
    names = template.parameter_names
    return Population(
        component_id=component_id,
        genomes=[create_genome(names, rng=rng) for _ in range(size)],
    )
