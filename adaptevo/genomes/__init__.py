from adaptevo.genomes.genome import (
    PARAMETER_MAX,
    PARAMETER_MIN,
    UNEVALUATED_FITNESS,
    Genome,
    clamp,
    create_genome,
    evaluate,
    score,
)
from adaptevo.genomes.population import Population, initialize_population

__all__ = [
    "PARAMETER_MAX",
    "PARAMETER_MIN",
    "UNEVALUATED_FITNESS",
    "Genome",
    "Population",
    "clamp",
    "create_genome",
    "evaluate",
    "initialize_population",
    "score",
]
