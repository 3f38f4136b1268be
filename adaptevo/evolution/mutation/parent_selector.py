from abc import ABC, abstractmethod
import random

from loguru import logger

from adaptevo.evolution.strategies.models import EvolutionStrategy
from adaptevo.genomes.genome import Genome
from adaptevo.genomes.population import Population


class ParentSelector(ABC):
    """Abstract base class for building the parent pool of a generation."""

    @abstractmethod
    def select_parents(
        self,
        population: Population,
        strategy: EvolutionStrategy,
        rng: random.Random,
    ) -> list[Genome]:
        """Select parents for recombination.

        Args:
            population: Evaluated population of the current generation
            strategy: Strategy providing selection pressure and pool size
            rng: Random source for sampling

        Returns:
            Parent pool (may contain the same genome more than once)
        """


class TournamentParentSelector(ParentSelector):
    """Repeated tournaments; each winner joins the parent pool."""

    def select_one(
        self,
        population: Population,
        strategy: EvolutionStrategy,
        rng: random.Random,
    ) -> Genome:
        if not population.genomes:
            raise ValueError("Cannot run a tournament on an empty population")

        size = min(strategy.tournament_size, len(population.genomes))
        candidates = rng.sample(population.genomes, size)

        winner = candidates[0]
        for candidate in candidates[1:]:
            if candidate.fitness > winner.fitness:
                winner = candidate
        return winner

    def select_parents(
        self,
        population: Population,
        strategy: EvolutionStrategy,
        rng: random.Random,
    ) -> list[Genome]:
        total = strategy.parent_pool_size
        parents = [self.select_one(population, strategy, rng) for _ in range(total)]
        logger.debug(
            "TournamentParentSelector: {} parents from {} genomes (tournament_size={})",
            len(parents),
            len(population.genomes),
            min(strategy.tournament_size, len(population.genomes)),
        )
        return parents


_DEFAULT_SELECTOR = TournamentParentSelector()


def tournament_select(
    population: Population, strategy: EvolutionStrategy, rng: random.Random
) -> Genome:
    """Fittest of ``tournament_size`` distinct genomes; first seen wins ties."""
    return _DEFAULT_SELECTOR.select_one(population, strategy, rng)


def select_parents(
    population: Population, strategy: EvolutionStrategy, rng: random.Random
) -> list[Genome]:
    return _DEFAULT_SELECTOR.select_parents(population, strategy, rng)
