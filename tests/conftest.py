import random

import pytest

from adaptevo.evolution.engine import EngineConfig, EvolutionEngine
from adaptevo.evolution.fitness_functions import ParameterValue
from adaptevo.evolution.strategies import create_strategy


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def engine(rng):
    return EvolutionEngine(EngineConfig(), rng=rng)


@pytest.fixture
def small_strategy():
    """population_size=10, elite_size=2, fitness = x."""
    return create_strategy(
        population_size=10,
        elite_size=2,
        fitness_function=ParameterValue("x"),
    )
