"""
Tests for genomes and populations.
"""

import math
import random

import pytest

from adaptevo.exceptions import FitnessEvaluationError
from adaptevo.genomes import (
    Genome,
    Population,
    create_genome,
    evaluate,
    initialize_population,
)


class TestCreateGenome:
    def test_explicit_values(self):
        genome = create_genome({"x": 0.5, "y": 0.25})
        assert genome.parameters == {"x": 0.5, "y": 0.25}
        assert genome.fitness == 0.0
        assert genome.age == 0
        assert not genome.is_evaluated

    def test_randomized_names(self, rng):
        genome = create_genome(["a", "b", "c"], rng=rng)
        assert genome.parameter_names == ["a", "b", "c"]
        assert all(0.0 <= v <= 1.0 for v in genome.parameters.values())

    def test_randomized_names_reproducible(self):
        first = create_genome(["a", "b"], rng=random.Random(3))
        second = create_genome(["a", "b"], rng=random.Random(3))
        assert first.parameters == second.parameters

    @pytest.mark.parametrize("bad", [-0.1, 1.5, math.nan])
    def test_out_of_range_rejected(self, bad):
        with pytest.raises(ValueError):
            create_genome({"x": bad})

    def test_assignment_is_validated(self):
        genome = create_genome({"x": 0.5})
        with pytest.raises(ValueError):
            genome.parameters = {"x": 2.0}

    def test_copy_does_not_share_parameters(self):
        genome = create_genome({"x": 0.5})
        copy = genome.copy_genome()
        copy.parameters["x"] = 0.9
        assert genome.parameters["x"] == 0.5


class TestEvaluate:
    def test_sets_fitness(self):
        genome = create_genome({"x": 0.3})
        assert evaluate(genome, lambda p: p["x"] * 2) == pytest.approx(0.6)
        assert genome.fitness == pytest.approx(0.6)

    def test_raising_fitness_function_propagates(self):
        def broken(parameters):
            raise RuntimeError("boom")

        genome = create_genome({"x": 0.3})
        with pytest.raises(FitnessEvaluationError) as excinfo:
            evaluate(genome, broken)
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert genome.fitness == 0.0

    @pytest.mark.parametrize("value", [math.inf, math.nan, "high", None])
    def test_non_finite_result_rejected(self, value):
        genome = create_genome({"x": 0.3})
        with pytest.raises(FitnessEvaluationError):
            evaluate(genome, lambda p: value)

    def test_function_receives_a_copy(self):
        genome = create_genome({"x": 0.3})

        def meddling(parameters):
            parameters["x"] = 0.9
            return 1.0

        evaluate(genome, meddling)
        assert genome.parameters["x"] == 0.3


class TestPopulation:
    def test_initialize_population(self, rng):
        template = create_genome({"x": 0.5, "y": 0.5})
        population = initialize_population(template, 12, rng=rng, component_id="c1")
        assert len(population) == 12
        assert population.component_id == "c1"
        assert all(g.parameter_names == ["x", "y"] for g in population.genomes)
        assert len(population.unevaluated) == 12

    def test_initialize_empty(self, rng):
        population = initialize_population(create_genome({"x": 0.5}), 0, rng=rng)
        assert len(population) == 0
        assert population.best() is None

    def test_sorted_by_fitness_is_stable(self):
        a = Genome(parameters={"x": 0.1}, fitness=0.5)
        b = Genome(parameters={"x": 0.2}, fitness=0.9)
        c = Genome(parameters={"x": 0.3}, fitness=0.5)
        population = Population(genomes=[a, b, c])
        ranked = population.sorted_by_fitness()
        assert ranked[0] is b
        assert ranked[1] is a
        assert ranked[2] is c

    def test_best_prefers_first_on_tie(self):
        a = Genome(parameters={"x": 0.1}, fitness=0.7)
        b = Genome(parameters={"x": 0.2}, fitness=0.7)
        assert Population(genomes=[a, b]).best() is a
