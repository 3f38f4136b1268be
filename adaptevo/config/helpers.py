"""Helpers that turn Hydra/OmegaConf configs into engine objects."""

from __future__ import annotations

from typing import Any

from hydra.utils import get_object, instantiate
from omegaconf import DictConfig, OmegaConf
from pydantic import ValidationError as PydanticValidationError

from adaptevo.evolution.engine.config import EngineConfig
from adaptevo.evolution.engine.core import EvolutionEngine
from adaptevo.evolution.strategies.models import EvolutionStrategy
from adaptevo.evolution.strategies.presets import create_strategy
from adaptevo.exceptions import InvalidConfigurationError

__all__ = [
    "CALLABLE_FIELDS",
    "build_engine",
    "build_engine_config",
    "build_strategy",
    "component_plan",
]

CALLABLE_FIELDS = ("fitness_function", "termination")


def build_engine_config(cfg: DictConfig | None) -> EngineConfig:
    """Validate the ``engine`` section into an EngineConfig."""
    if cfg is None:
        return EngineConfig()
    data = OmegaConf.to_container(cfg, resolve=True)
    try:
        return EngineConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise InvalidConfigurationError(f"Invalid engine config: {exc}") from exc


def _resolve_callable(node: Any) -> Any:
    """A ``_target_`` node is instantiated; a dotted string is imported."""
    if isinstance(node, DictConfig):
        return instantiate(node)
    if isinstance(node, str):
        return get_object(node)
    return node


def build_strategy(cfg: DictConfig) -> EvolutionStrategy:
    """Build a strategy from a preset name plus field overrides.

    Example config::

        preset: biological_laws
        population_size: 20
        elite_size: 2
        fitness_function:
          _target_: adaptevo.evolution.fitness_functions.ParameterValue
          name: x
    """
    plain = OmegaConf.to_container(cfg, resolve=True)
    preset = plain.pop("preset", "default")
    overrides: dict[str, Any] = {}
    for key, value in plain.items():
        if key in CALLABLE_FIELDS:
            overrides[key] = _resolve_callable(cfg[key])
        else:
            overrides[key] = value
    return create_strategy(preset, **overrides)


def component_plan(cfg: DictConfig) -> dict[str, str]:
    """Component id -> strategy key, from the ``components`` section."""
    return {
        str(component_id): str(component_cfg.get("strategy", "default"))
        for component_id, component_cfg in (cfg.get("components") or {}).items()
    }


def build_engine(cfg: DictConfig) -> EvolutionEngine:
    """Create an engine, set every configured strategy and register components."""
    engine = EvolutionEngine(build_engine_config(cfg.get("engine")))

    for key, strategy_cfg in (cfg.get("strategies") or {}).items():
        engine.set_strategy(str(key), build_strategy(strategy_cfg))

    for component_id, component_cfg in (cfg.get("components") or {}).items():
        parameters = OmegaConf.to_container(component_cfg.parameters, resolve=True)
        result = engine.register(str(component_id), parameters)
        if not result.success:
            raise InvalidConfigurationError(result.detail)

    return engine
