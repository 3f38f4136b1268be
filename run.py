from datetime import datetime, timezone
import time

import hydra
from loguru import logger
from omegaconf import DictConfig, OmegaConf

from adaptevo.config.helpers import build_engine, component_plan
from adaptevo.evolution.engine.core import EvolutionEngine
from adaptevo.utils.logger_setup import LoggingConfig, setup_logger


def run_experiment(cfg: DictConfig) -> EvolutionEngine:
    start_time = time.time()

    logger.info("=" * 80)
    logger.info("adaptevo evolution run")
    logger.info("=" * 80)
    logger.info(f"Start time: {datetime.now(timezone.utc).isoformat()}")

    logger.info("Step 1/3: Building engine from config...")
    engine = build_engine(cfg)
    plan = component_plan(cfg)
    logger.info(f"  - Components: {sorted(plan)}")
    logger.info(f"  - Strategies: {sorted(engine.strategies)}")
    logger.info(f"  - Generations: {cfg.run.generations}, tune every {cfg.run.tune_every}")

    logger.info("Step 2/3: Evolving...")
    finished: set[str] = set()
    for step in range(1, cfg.run.generations + 1):
        for component_id, strategy_key in plan.items():
            if component_id in finished:
                continue
            result = engine.evolve(component_id, strategy_key)
            if not result.success:
                logger.warning(f"{component_id}: {result.reason.value} ({result.detail})")
                finished.add(component_id)
                continue
            strategy = engine.strategies[strategy_key]
            if strategy.termination(engine.populations[component_id]):
                logger.info(f"{component_id}: termination reached at step {step}")
                finished.add(component_id)

        if cfg.run.tune_every and step % cfg.run.tune_every == 0:
            engine.tune_strategies()

    logger.info("Step 3/3: Analysis")
    for component_id in plan:
        analysis = engine.analyze(component_id)
        if analysis.success:
            logger.info(f"{component_id}: {analysis.metrics.to_dict()}")

    status = engine.status()
    duration = time.time() - start_time
    logger.info(
        f"Done | generation={status.generation}, evolution_rate={status.evolution_rate:.4f}, "
        f"duration={duration:.2f}s"
    )
    return engine


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entrypoint with Hydra configuration management."""
    log_file_path = setup_logger(
        LoggingConfig.model_validate(OmegaConf.to_container(cfg.logging, resolve=True))
    )
    logger.info(f"Log file: {log_file_path}")
    run_experiment(cfg)


if __name__ == "__main__":
    main()
