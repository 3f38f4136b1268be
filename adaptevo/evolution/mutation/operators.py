"""Variation operators over genomes.

All operators return new genomes and leave their inputs untouched.
"""

from __future__ import annotations

import random

from adaptevo.genomes.genome import UNEVALUATED_FITNESS, Genome, clamp

__all__ = [
    "DEFAULT_PER_GENE_RATE",
    "DEFAULT_MUTATION_SCALE",
    "clone",
    "crossover",
    "mutate",
]

DEFAULT_PER_GENE_RATE: float = 0.1
DEFAULT_MUTATION_SCALE: float = 0.1


def crossover(parent1: Genome, parent2: Genome, rng: random.Random) -> Genome:
    """Uniform crossover over the union of both parents' keys.

    A key held by both parents comes from ``parent1`` with probability 0.5;
    a key held by one parent only is always taken from that parent.
    """
    child: dict[str, float] = {}
    for name, value in parent1.parameters.items():
        if name in parent2.parameters and rng.random() >= 0.5:
            child[name] = parent2.parameters[name]
        else:
            child[name] = value
    for name, value in parent2.parameters.items():
        if name not in child:
            child[name] = value

    return Genome(
        parameters=child,
        fitness=UNEVALUATED_FITNESS,
        age=0,
        generation=max(parent1.generation, parent2.generation) + 1,
    )


def mutate(
    genome: Genome,
    rng: random.Random,
    per_gene_rate: float = DEFAULT_PER_GENE_RATE,
    scale: float = DEFAULT_MUTATION_SCALE,
) -> Genome:
    """Gaussian point mutation, clamped to [0, 1].

    Fitness resets to unevaluated when at least one gene changed.
    """
    mutated = genome.copy_genome()
    if not genome.parameters:
        return mutated

    parameters = dict(genome.parameters)
    changed = False
    for name, value in parameters.items():
        if rng.random() < per_gene_rate:
            new_value = clamp(value + rng.gauss(0.0, scale))
            if new_value != value:
                parameters[name] = new_value
                changed = True

    if changed:
        mutated.parameters = parameters
        mutated.fitness = UNEVALUATED_FITNESS
    return mutated


def clone(genome: Genome) -> Genome:
    """Asexual offspring: same parameters and fitness, fresh age."""
    child = genome.copy_genome()
    child.age = 0
    child.generation = genome.generation + 1
    return child
