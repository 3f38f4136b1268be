from __future__ import annotations

from enum import Enum
from typing import Iterable, Mapping

from loguru import logger
from pydantic import BaseModel, Field, model_validator

from adaptevo.evolution.analysis.history import FitnessHistory
from adaptevo.evolution.strategies.models import EvolutionStrategy, RateSnapshot

__all__ = [
    "StrategyAutoTuner",
    "StrategyAdjustment",
    "TunerConfig",
    "TuningAction",
    "TuningReport",
    "recent_improvement",
]


class TuningAction(str, Enum):
    EXPLORE = "explore"
    EXPLOIT = "exploit"
    HOLD = "hold"


class TunerConfig(BaseModel):
    """Thresholds, factors and bounds of the three-branch rate controller."""

    window: int = Field(default=10, gt=0, description="Deltas per component considered")
    explore_below: float = Field(default=0.01)
    exploit_above: float = Field(default=0.1)

    explore_mutation_factor: float = Field(default=1.1, gt=0)
    explore_crossover_factor: float = Field(default=1.1, gt=0)
    explore_pressure_factor: float = Field(default=0.9, gt=0)
    exploit_mutation_factor: float = Field(default=0.9, gt=0)
    exploit_pressure_factor: float = Field(default=1.1, gt=0)

    mutation_rate_max: float = Field(default=0.5, ge=0, le=1)
    mutation_rate_min: float = Field(default=0.01, ge=0, le=1)
    crossover_rate_max: float = Field(default=0.9, ge=0, le=1)
    selection_pressure_min: float = Field(default=0.5, ge=0, le=1)
    selection_pressure_max: float = Field(default=0.95, ge=0, le=1)

    @model_validator(mode="after")
    def validate_thresholds(self) -> TunerConfig:
        if self.explore_below > self.exploit_above:
            raise ValueError(
                f"explore_below ({self.explore_below}) must be <= exploit_above ({self.exploit_above})"
            )
        return self


class StrategyAdjustment(BaseModel):
    """Before/after record for one strategy in a tuning pass."""

    strategy_key: str
    improvement: float
    action: TuningAction
    old_params: RateSnapshot
    new_params: RateSnapshot

    @property
    def changed(self) -> bool:
        return self.old_params != self.new_params


class TuningReport(BaseModel):
    adjustments: dict[str, StrategyAdjustment] = Field(default_factory=dict)
    skipped: list[str] = Field(
        default_factory=list, description="Strategies without improvement data"
    )

    def __len__(self) -> int:
        return len(self.adjustments)

    def __contains__(self, key: str) -> bool:
        return key in self.adjustments

    def __getitem__(self, key: str) -> StrategyAdjustment:
        return self.adjustments[key]


def recent_improvement(
    histories: Iterable[FitnessHistory], window: int = 10
) -> float | None:
    """Mean of the last ``window`` deltas pooled over ``histories``; None without data."""
    deltas: list[float] = []
    for history in histories:
        deltas.extend(history.deltas(window))
    if not deltas:
        return None
    return sum(deltas) / len(deltas)


class StrategyAutoTuner:
    """Proportional, three-branch controller over strategy rates.

    Slow improvement pushes toward exploration (more mutation and crossover,
    less selection pressure); fast improvement pushes toward exploitation.
    """

    def __init__(self, config: TunerConfig | None = None):
        self.config = config or TunerConfig()

    def adjust(self, rates: RateSnapshot, improvement: float) -> tuple[TuningAction, RateSnapshot]:
        cfg = self.config
        if improvement < cfg.explore_below:
            return TuningAction.EXPLORE, RateSnapshot(
                mutation_rate=min(
                    rates.mutation_rate * cfg.explore_mutation_factor, cfg.mutation_rate_max
                ),
                crossover_rate=min(
                    rates.crossover_rate * cfg.explore_crossover_factor,
                    cfg.crossover_rate_max,
                ),
                selection_pressure=max(
                    rates.selection_pressure * cfg.explore_pressure_factor,
                    cfg.selection_pressure_min,
                ),
            )
        if improvement > cfg.exploit_above:
            return TuningAction.EXPLOIT, RateSnapshot(
                mutation_rate=max(
                    rates.mutation_rate * cfg.exploit_mutation_factor, cfg.mutation_rate_min
                ),
                crossover_rate=rates.crossover_rate,
                selection_pressure=min(
                    rates.selection_pressure * cfg.exploit_pressure_factor,
                    cfg.selection_pressure_max,
                ),
            )
        return TuningAction.HOLD, rates.model_copy()

    def tune(
        self,
        strategies: Mapping[str, EvolutionStrategy],
        histories_by_strategy: Mapping[str, list[FitnessHistory]],
    ) -> tuple[dict[str, EvolutionStrategy], TuningReport]:
        """Run one tuning pass.

        Args:
            strategies: Strategy key -> current strategy
            histories_by_strategy: Strategy key -> fitness histories of the
                components evolved with it

        Returns:
            The tuned strategies (only those with data) and the report.
        """
        tuned: dict[str, EvolutionStrategy] = {}
        report = TuningReport()

        for key, strategy in strategies.items():
            improvement = recent_improvement(
                histories_by_strategy.get(key, []), self.config.window
            )
            if improvement is None:
                report.skipped.append(key)
                logger.debug("[StrategyAutoTuner] {}: no improvement data, skipped", key)
                continue

            old = strategy.rates()
            action, new = self.adjust(old, improvement)
            tuned[key] = strategy.with_rates(new) if new != old else strategy
            report.adjustments[key] = StrategyAdjustment(
                strategy_key=key,
                improvement=improvement,
                action=action,
                old_params=old,
                new_params=new,
            )
            logger.info(
                "[StrategyAutoTuner] {}: improvement={:.4f} -> {} | mutation {:.3f}->{:.3f}, "
                "crossover {:.3f}->{:.3f}, pressure {:.3f}->{:.3f}",
                key,
                improvement,
                action.value,
                old.mutation_rate,
                new.mutation_rate,
                old.crossover_rate,
                new.crossover_rate,
                old.selection_pressure,
                new.selection_pressure,
            )

        return tuned, report
