"""
Tests for the strategy auto-tuner.
"""

import pytest

from adaptevo.evolution.analysis import FitnessHistory
from adaptevo.evolution.strategies import create_strategy
from adaptevo.evolution.tuning import (
    StrategyAutoTuner,
    TunerConfig,
    TuningAction,
    recent_improvement,
)


def _history(values):
    history = FitnessHistory()
    for value in values:
        history.append(value)
    return history


def _linear(step, n=12, start=0.1):
    return _history([start + step * i for i in range(n)])


class TestRecentImprovement:
    def test_no_data(self):
        assert recent_improvement([]) is None
        assert recent_improvement([_history([0.5])]) is None

    def test_pools_last_window_of_each_history(self):
        early_jumps = [0.1 * i for i in range(11)]
        flat_tail = [early_jumps[-1]] * 10
        history = _history(early_jumps + flat_tail)
        assert recent_improvement([history], window=10) == pytest.approx(0.0)

    def test_pooled_mean(self):
        improvement = recent_improvement([_linear(0.02, n=3), _linear(0.04, n=3)])
        assert improvement == pytest.approx(0.03)


class TestTuning:
    def test_slow_improvement_explores(self):
        strategy = create_strategy(mutation_rate=0.1, crossover_rate=0.7, selection_pressure=0.8)
        tuned, report = StrategyAutoTuner().tune({"s": strategy}, {"s": [_linear(0.005)]})

        adjustment = report["s"]
        assert adjustment.action == TuningAction.EXPLORE
        assert adjustment.improvement == pytest.approx(0.005)
        assert tuned["s"].mutation_rate == pytest.approx(0.1 * 1.1)
        assert tuned["s"].crossover_rate == pytest.approx(0.7 * 1.1)
        assert tuned["s"].selection_pressure == pytest.approx(0.8 * 0.9)
        assert adjustment.old_params.mutation_rate == 0.1
        assert adjustment.new_params.mutation_rate == pytest.approx(0.11)

    def test_exploration_respects_bounds(self):
        strategy = create_strategy(mutation_rate=0.48, crossover_rate=0.85, selection_pressure=0.52)
        tuned, _ = StrategyAutoTuner().tune({"s": strategy}, {"s": [_linear(0.0)]})
        assert tuned["s"].mutation_rate == 0.5
        assert tuned["s"].crossover_rate == 0.9
        assert tuned["s"].selection_pressure == 0.5

    def test_fast_improvement_exploits(self):
        strategy = create_strategy(mutation_rate=0.2, crossover_rate=0.7, selection_pressure=0.9)
        tuned, report = StrategyAutoTuner().tune({"s": strategy}, {"s": [_linear(0.2, n=4)]})
        assert report["s"].action == TuningAction.EXPLOIT
        assert tuned["s"].mutation_rate == pytest.approx(0.18)
        assert tuned["s"].crossover_rate == 0.7
        assert tuned["s"].selection_pressure == 0.95

    def test_moderate_improvement_holds(self):
        strategy = create_strategy()
        tuned, report = StrategyAutoTuner().tune({"s": strategy}, {"s": [_linear(0.05, n=5)]})
        assert report["s"].action == TuningAction.HOLD
        assert not report["s"].changed
        assert tuned["s"] is strategy

    def test_strategies_without_data_are_skipped(self):
        strategies = {"used": create_strategy(), "idle": create_strategy()}
        tuned, report = StrategyAutoTuner().tune(strategies, {"used": [_linear(0.0)]})
        assert "idle" not in tuned
        assert "idle" not in report
        assert report.skipped == ["idle"]
        assert len(report) == 1

    def test_population_and_functions_preserved(self):
        strategy = create_strategy(population_size=12, elite_size=3)
        tuned, _ = StrategyAutoTuner().tune({"s": strategy}, {"s": [_linear(0.0)]})
        assert tuned["s"].population_size == 12
        assert tuned["s"].elite_size == 3
        assert tuned["s"].fitness_function is strategy.fitness_function

    def test_custom_config(self):
        tuner = StrategyAutoTuner(TunerConfig(explore_below=0.001, exploit_above=0.002))
        _, report = tuner.tune({"s": create_strategy()}, {"s": [_linear(0.005)]})
        assert report["s"].action == TuningAction.EXPLOIT

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            TunerConfig(explore_below=0.5, exploit_above=0.1)
