from adaptevo.config.helpers import (
    build_engine,
    build_engine_config,
    build_strategy,
    component_plan,
)

__all__ = ["build_engine", "build_engine_config", "build_strategy", "component_plan"]
