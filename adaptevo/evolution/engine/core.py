from __future__ import annotations

from collections import defaultdict
from contextlib import contextmanager
import random
import threading
from typing import Any, Iterable, Iterator, Mapping

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from adaptevo.evolution.analysis.analyzer import analyze_history, improvement_rate, population_diversity
from adaptevo.evolution.analysis.history import FitnessHistory
from adaptevo.evolution.engine.config import EngineConfig
from adaptevo.evolution.engine.feedback import Feedback
from adaptevo.evolution.engine.metrics import EngineMetrics
from adaptevo.evolution.engine.results import (
    AdaptOutcome,
    AdaptResult,
    AnalysisOutcome,
    AnalyzeResult,
    EngineStatus,
    EvolveOutcome,
    EvolveResult,
    FailureReason,
    OperationFailure,
    RegisterOutcome,
    RegisterResult,
)
from adaptevo.evolution.mutation.operators import clone, crossover, mutate
from adaptevo.evolution.mutation.parent_selector import ParentSelector, TournamentParentSelector
from adaptevo.evolution.strategies.models import EvolutionStrategy, validate_strategy
from adaptevo.evolution.tuning.tuner import StrategyAutoTuner, TuningReport
from adaptevo.exceptions import FitnessEvaluationError, ValidationError
from adaptevo.genomes.genome import Genome, clamp, create_genome, score
from adaptevo.genomes.population import Population, initialize_population

__all__ = ["DEFAULT_STRATEGY_KEY", "EvolutionEngine"]

DEFAULT_STRATEGY_KEY = "default"


class EvolutionEngine:
    """
    Evolves named components, one GA generation per ``evolve`` call.

    - ``components`` holds each component's current best genome.
    - ``populations`` are created lazily on the first ``evolve``.
    - ``fitness_history`` records the best fitness of every generation.
    - Recoverable lookups return ``OperationFailure``; caller defects raise.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        rng: random.Random | None = None,
        parent_selector: ParentSelector | None = None,
        tuner: StrategyAutoTuner | None = None,
    ):
        self.config = config or EngineConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.parent_selector = parent_selector or TournamentParentSelector()
        self.tuner = tuner or StrategyAutoTuner(self.config.tuner)

        self.components: dict[str, Genome] = {}
        self.strategies: dict[str, EvolutionStrategy] = {}
        self.populations: dict[str, Population] = {}
        self.fitness_history: dict[str, FitnessHistory] = {}
        self.generation = 0
        self.evolution_rate = self.config.initial_evolution_rate

        # strategy key -> components evolved with it
        self._strategy_components: dict[str, set[str]] = defaultdict(set)

        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._state_lock = threading.RLock()

        self.metrics = EngineMetrics()

        logger.info(
            "[EvolutionEngine] Init | selector={}, history_capacity={}, evolution_rate={}, seed={}",
            type(self.parent_selector).__name__,
            self.config.history_capacity,
            self.evolution_rate,
            self.config.seed,
        )

    # -------------------------- Registration --------------------------

    def register(
        self,
        component_id: str,
        initial_genome: Genome | Mapping[str, float] | Iterable[str],
    ) -> RegisterResult:
        """Register a component with explicit values, names to randomize, or a genome.

        Raises:
            ValidationError: If explicit parameter values fall outside [0, 1].
        """
        with self._component_lock(component_id):
            if component_id in self.components:
                return self._failure(
                    FailureReason.ALREADY_REGISTERED,
                    f"Component '{component_id}' is already registered",
                )

            if isinstance(initial_genome, Genome):
                genome = initial_genome.copy_genome()
            else:
                try:
                    genome = create_genome(initial_genome, rng=self.rng)
                except (PydanticValidationError, TypeError, ValueError) as exc:
                    raise ValidationError(
                        f"Invalid initial genome for '{component_id}': {exc}"
                    ) from exc

            self.components[component_id] = genome
            with self._state_lock:
                self.metrics.registrations += 1

        logger.info(
            "[EvolutionEngine] Registered {} | parameters={}",
            component_id,
            genome.parameter_names,
        )
        return RegisterOutcome(component_id=component_id, parameters=dict(genome.parameters))

    def set_strategy(
        self, key: str, strategy: EvolutionStrategy | Mapping[str, Any]
    ) -> EvolutionStrategy:
        """Insert or replace a strategy.

        Raises:
            InvalidConfigurationError: If the strategy fields are out of range.
        """
        validated = validate_strategy(strategy)
        with self._state_lock:
            replaced = key in self.strategies
            self.strategies[key] = validated
        logger.info(
            "[EvolutionEngine] Strategy {} {} | population={}, elites={}, mutation={}, crossover={}, pressure={}",
            key,
            "replaced" if replaced else "set",
            validated.population_size,
            validated.elite_size,
            validated.mutation_rate,
            validated.crossover_rate,
            validated.selection_pressure,
        )
        return validated

    # -------------------------- Evolution --------------------------

    def evolve(self, component_id: str, strategy_key: str = DEFAULT_STRATEGY_KEY) -> EvolveResult:
        """Run one generation for ``component_id`` under ``strategy_key``.

        Raises:
            FitnessEvaluationError: If the strategy's fitness function fails. No
                engine state changes in that case.
        """
        with self._component_lock(component_id):
            current = self.components.get(component_id)
            if current is None:
                return self._failure(
                    FailureReason.NOT_FOUND, f"Component '{component_id}' not found"
                )
            strategy = self.strategies.get(strategy_key)
            if strategy is None:
                return self._failure(
                    FailureReason.NOT_FOUND, f"Strategy '{strategy_key}' not found"
                )

            existing = self.populations.get(component_id)
            if existing is None:
                population = initialize_population(
                    current,
                    strategy.population_size,
                    rng=self.rng,
                    component_id=component_id,
                )
                logger.debug(
                    "[EvolutionEngine] {}: initialized population of {}",
                    component_id,
                    strategy.population_size,
                )
            else:
                population = existing.model_copy(deep=True)

            evaluated = self._evaluate(component_id, population, strategy)

            ranked = population.sorted_by_fitness()
            best = ranked[0]

            next_generation, crossovers, mutations = self._breed(ranked, population, strategy)
            new_population = Population(
                component_id=component_id,
                genomes=next_generation,
                generation=population.generation + 1,
                selection_pressure=strategy.selection_pressure,
            )

            # an unevaluated current genome is always replaced
            improved = not current.is_evaluated or best.fitness > current.fitness
            self.populations[component_id] = new_population
            if improved:
                self.components[component_id] = best.copy_genome()

            with self._state_lock:
                history = self.fitness_history.get(component_id)
                if history is None:
                    history = FitnessHistory(self.config.history_capacity)
                    self.fitness_history[component_id] = history
                history.append(best.fitness)
                self._strategy_components[strategy_key].add(component_id)
                self.generation += 1
                generation = self.generation
                self._update_evolution_rate(history)
                self.metrics.record_generation_metrics(
                    evaluated=evaluated,
                    offspring=len(next_generation) - min(strategy.elite_size, len(ranked)),
                    crossovers=crossovers,
                    mutations=mutations,
                    improved=improved,
                )

            fitness = self.components[component_id].fitness

        logger.debug(
            "[EvolutionEngine] {} gen {} | best={:.4f}, current={:.4f}, improved={}, evaluated={}",
            component_id,
            generation,
            best.fitness,
            fitness,
            improved,
            evaluated,
        )
        return EvolveOutcome(
            component_id=component_id,
            fitness=fitness,
            generation=generation,
            generation_best=best.fitness,
            improved=improved,
            population_size=len(new_population),
        )

    def run(
        self,
        component_id: str,
        strategy_key: str = DEFAULT_STRATEGY_KEY,
        max_generations: int = 1,
    ) -> EvolveResult:
        """Evolve until ``max_generations`` or the strategy's termination predicate holds."""
        if max_generations < 1:
            raise ValueError(f"max_generations must be at least 1, got {max_generations}")

        result: EvolveResult | None = None
        for step in range(max_generations):
            result = self.evolve(component_id, strategy_key)
            if not result.success:
                return result
            strategy = self.strategies[strategy_key]
            if strategy.termination(self.populations[component_id]):
                logger.info(
                    "[EvolutionEngine] {}: termination predicate met after {} generation(s)",
                    component_id,
                    step + 1,
                )
                break
        return result

    def _evaluate(
        self, component_id: str, population: Population, strategy: EvolutionStrategy
    ) -> int:
        pending = population.unevaluated
        try:
            scores = [score(genome, strategy.fitness_function) for genome in pending]
        except FitnessEvaluationError as exc:
            with self._state_lock:
                self.metrics.evaluation_errors += 1
            logger.error("[EvolutionEngine] {}: evaluation failed: {}", component_id, exc)
            raise
        for genome, value in zip(pending, scores):
            genome.fitness = value
        return len(pending)

    def _breed(
        self,
        ranked: list[Genome],
        population: Population,
        strategy: EvolutionStrategy,
    ) -> tuple[list[Genome], int, int]:
        """Elites first, then offspring until the strategy's population size."""
        parents = self.parent_selector.select_parents(
            population.model_copy(update={"genomes": ranked}), strategy, self.rng
        )

        next_generation: list[Genome] = []
        for elite in ranked[: strategy.elite_size]:
            survivor = elite.copy_genome()
            survivor.age += 1
            next_generation.append(survivor)

        crossovers = mutations = 0
        while len(next_generation) < strategy.population_size:
            if len(parents) >= 2 and self.rng.random() < strategy.crossover_rate:
                parent1, parent2 = self.rng.sample(parents, 2)
                child = crossover(parent1, parent2, self.rng)
                crossovers += 1
            else:
                child = clone(self.rng.choice(parents))

            if self.rng.random() < strategy.mutation_rate:
                child = mutate(
                    child,
                    self.rng,
                    per_gene_rate=self.config.per_gene_rate,
                    scale=self.config.mutation_scale,
                )
                mutations += 1
            next_generation.append(child)

        return next_generation, crossovers, mutations

    def _update_evolution_rate(self, history: FitnessHistory) -> None:
        if len(history) < 2:
            return
        cfg = self.config
        improvement = improvement_rate(history.values())
        previous = self.evolution_rate
        if improvement > cfg.fast_improvement:
            self.evolution_rate = min(previous * cfg.evolution_rate_growth, cfg.evolution_rate_max)
        elif improvement < cfg.slow_improvement:
            self.evolution_rate = max(previous * cfg.evolution_rate_decay, cfg.evolution_rate_min)
        if self.evolution_rate != previous:
            logger.debug(
                "[EvolutionEngine] evolution_rate {:.4f} -> {:.4f} (improvement={:.4f})",
                previous,
                self.evolution_rate,
                improvement,
            )

    # -------------------------- Direct feedback --------------------------

    def adapt(
        self, component_id: str, feedback: Feedback | Mapping[str, Any]
    ) -> AdaptResult:
        """Nudge the current genome toward external feedback signals.

        Each signal moves its parameter by ``(signal - 0.5) * evolution_rate``;
        a ``fitness`` entry is blended into the genome's fitness.

        Raises:
            FeedbackValidationError: If the feedback is malformed.
        """
        feedback = Feedback.coerce(feedback)

        with self._component_lock(component_id):
            genome = self.components.get(component_id)
            if genome is None:
                return self._failure(
                    FailureReason.NOT_FOUND, f"Component '{component_id}' not found"
                )

            with self._state_lock:
                rate = self.evolution_rate

            parameters = dict(genome.parameters)
            ignored = []
            for name, signal in feedback.signals.items():
                if name not in parameters:
                    ignored.append(name)
                    continue
                parameters[name] = clamp(parameters[name] + (signal - 0.5) * rate)
            genome.parameters = parameters

            if feedback.fitness is not None:
                weight = self.config.feedback_fitness_weight
                genome.fitness = (1.0 - weight) * genome.fitness + weight * feedback.fitness
            genome.age += 1

            with self._state_lock:
                self.metrics.adaptations += 1

            outcome = AdaptOutcome(
                component_id=component_id,
                parameters=dict(genome.parameters),
                fitness=genome.fitness,
                age=genome.age,
                ignored=ignored,
            )

        if ignored:
            logger.debug(
                "[EvolutionEngine] {}: feedback for unknown parameters ignored: {}",
                component_id,
                ignored,
            )
        return outcome

    # -------------------------- Analysis & tuning --------------------------

    def analyze(self, component_id: str) -> AnalyzeResult:
        """Summarize fitness history and population diversity (read-only)."""
        with self._component_lock(component_id):
            if component_id not in self.components:
                return self._failure(
                    FailureReason.NOT_FOUND, f"Component '{component_id}' not found"
                )
            with self._state_lock:
                history = self.fitness_history.get(component_id)
                values = history.values() if history is not None else []
                rate = self.evolution_rate
            population = self.populations.get(component_id)
            diversity = population_diversity(population.genomes) if population else 0.0

        metrics = analyze_history(
            values,
            evolution_rate=rate,
            diversity=diversity,
            config=self.config.analyzer,
        )
        return AnalysisOutcome(component_id=component_id, metrics=metrics)

    def tune_strategies(self) -> TuningReport:
        """Retune every strategy from the recent improvement of its components."""
        with self._state_lock:
            histories_by_strategy = {
                key: [
                    self.fitness_history[cid]
                    for cid in sorted(component_ids)
                    if cid in self.fitness_history
                ]
                for key, component_ids in self._strategy_components.items()
            }
            tuned, report = self.tuner.tune(self.strategies, histories_by_strategy)
            self.strategies.update(tuned)
            self.metrics.record_tuning_metrics(
                sum(1 for adjustment in report.adjustments.values() if adjustment.changed)
            )

        logger.info(
            "[EvolutionEngine] Tuning pass | adjusted={}, skipped={}",
            list(report.adjustments),
            report.skipped,
        )
        return report

    # -------------------------- Introspection --------------------------

    def get_population(self, component_id: str) -> Population | None:
        return self.populations.get(component_id)

    def components_for_strategy(self, strategy_key: str) -> list[str]:
        with self._state_lock:
            return sorted(self._strategy_components.get(strategy_key, set()))

    def status(self) -> EngineStatus:
        with self._state_lock:
            return EngineStatus(
                active_components=len(self.components),
                populations=len(self.populations),
                strategies=sorted(self.strategies),
                generation=self.generation,
                evolution_rate=self.evolution_rate,
                metrics=self.metrics.model_copy(),
            )

    # -------------------------- Helpers --------------------------

    @contextmanager
    def _component_lock(self, component_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.get(component_id)
            if lock is None:
                lock = self._locks[component_id] = threading.Lock()
        with lock:
            yield

    def _failure(self, reason: FailureReason, detail: str) -> OperationFailure:
        with self._state_lock:
            self.metrics.lookup_failures += 1
        logger.warning("[EvolutionEngine] {}: {}", reason.value, detail)
        return OperationFailure(reason=reason, detail=detail)
